from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from healthmate.core.config import settings


_connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # directory fan-out reads from worker threads
    _connect_args["check_same_thread"] = False

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
