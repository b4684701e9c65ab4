from celery import Celery
from sqlalchemy.exc import SQLAlchemyError

from codrisk.config import settings
from codrisk.database import get_sessionmaker
from codrisk.errors import InvalidOrderError
from codrisk.rules.address import parse_shipping_address
from codrisk.services.records import record_analysis
from codrisk.services.scoring import analyze_fraud_risk, coerce_order
from codrisk.utils.logging import logger

REDIS_URL = settings.REDIS_URL

celery = Celery("codrisk", broker=REDIS_URL, backend=REDIS_URL)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    broker_connection_retry_on_startup=True,
    worker_prefetch_multiplier=1,
)

# ---------- Celery task ----------
# only database errors are retried; a bad payload fails once
@celery.task(name="analyze_order_async", autoretry_for=(SQLAlchemyError,),
             retry_backoff=True, max_retries=5)
def analyze_order_async(order: dict, profile: dict | None = None, user_orders: list | None = None):
    """Score an order off the request path and store the verdict next to its evidence."""
    try:
        current = coerce_order(order)
    except InvalidOrderError:
        logger.error("rejecting order payload without id/created_at: %r",
                     order.get("id") if isinstance(order, dict) else type(order).__name__)
        raise

    analysis = analyze_fraud_risk(current, profile, user_orders or [])

    db = get_sessionmaker()()
    try:
        record_analysis(db, current, analysis, parse_shipping_address(current.shipping_address))
    except Exception:
        logger.exception("failed to record risk for order %s", current.id)
        raise
    finally:
        db.close()

    return {"ok": True, "order_id": current.id, "score": analysis.score, "level": analysis.level.value}
