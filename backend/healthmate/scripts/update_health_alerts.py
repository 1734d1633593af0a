import logging

from healthmate.db.session import SessionLocal
from healthmate.models import registry  # noqa: F401
from healthmate.services.outbreak_service import refresh_health_alerts

logger = logging.getLogger("healthmate.outbreaks")


def main() -> dict:
    db = SessionLocal()
    try:
        return refresh_health_alerts(db)
    except Exception:
        db.rollback()
        logger.exception("Health alert refresh failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    result = main()
    print(f"Deactivated: {result['deactivated']} | Inserted: {result['inserted']}")
