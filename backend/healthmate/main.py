import logging
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from healthmate.api.v1 import (
    appointments,
    auth,
    chat,
    conversations,
    doctors,
    emergency_contacts,
    health,
    location,
    outbreaks,
)
from healthmate.core.config import settings
from healthmate.core.errors import HealthMateError, to_http_exception
from healthmate.models import registry  # noqa: F401


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("healthmate")

app = FastAPI(title=settings.PROJECT_NAME)

logger.info("🚀 AI HealthMate starting up (%s)", settings.ENVIRONMENT)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(HealthMateError)
async def handle_healthmate_error(request: Request, exc: HealthMateError):
    logger.warning(
        "%s %s -> %s (%s): %s",
        request.method,
        request.url.path,
        exc.http_status,
        exc.code,
        exc,
    )
    http_exc = to_http_exception(exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content={"detail": http_exc.detail},
        headers=http_exc.headers,
    )


@app.get("/")
def root():
    return {"status": "ok"}

@app.get("/readyz")
def ready():
    return {"ready": True}

app.include_router(auth.router, prefix=settings.API_V1_STR, tags=["Auth"])
app.include_router(chat.router, prefix=settings.API_V1_STR, tags=["Chat"])
app.include_router(health.router, prefix=settings.API_V1_STR, tags=["Health"])
app.include_router(conversations.router, prefix=settings.API_V1_STR, tags=["Conversations"])
app.include_router(doctors.router, prefix=settings.API_V1_STR, tags=["Doctors"])
app.include_router(location.router, prefix=settings.API_V1_STR, tags=["Location"])
app.include_router(appointments.router, prefix=settings.API_V1_STR, tags=["Appointments"])
app.include_router(emergency_contacts.router, prefix=settings.API_V1_STR, tags=["Emergency"])
app.include_router(outbreaks.router, prefix=settings.API_V1_STR, tags=["Outbreaks"])
