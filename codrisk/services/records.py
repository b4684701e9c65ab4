# codrisk/services/records.py
import logging
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import OrderRisk, EvidenceLog
from ..rules.address import ParsedAddress
from ..schemas import FraudAnalysis, Order

logger = logging.getLogger(__name__)

def record_analysis(db: Session, order: Order, analysis: FraudAnalysis, parsed: ParsedAddress) -> OrderRisk:
    """Upsert the verdict for `order` and append the evidence behind it. Commits."""
    signals = [s.model_dump(mode="json") for s in analysis.signals]
    row = db.execute(select(OrderRisk).where(OrderRisk.order_id == order.id)).scalar_one_or_none()
    if row:
        row.score = analysis.score
        row.level = analysis.level.value
        row.signals = signals
        row.recommendation = analysis.recommendation
        row.total_amount = order.total_amount
    else:
        row = OrderRisk(
            order_id=order.id,
            user_id=order.user_id,
            total_amount=order.total_amount,
            score=analysis.score,
            level=analysis.level.value,
            signals=signals,
            recommendation=analysis.recommendation,
        )
        db.add(row)

    db.add(EvidenceLog(order_id=order.id, key="input", value=order.model_dump(mode="json", exclude={"items"})))
    db.add(EvidenceLog(order_id=order.id, key="parsed_address", value=parsed._asdict()))
    db.add(EvidenceLog(order_id=order.id, key="scores", value=analysis.model_dump(mode="json")))

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.info("order %s recorded as %s (score %d)", order.id, row.level, row.score)
    return row
