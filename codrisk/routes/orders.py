# codrisk/routes/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, desc
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import InvalidOrderError
from ..models import OrderRisk, EvidenceLog
from ..rules.address import parse_shipping_address
from ..schemas import AnalyzeInput, AnalyzeResponse, BatchAnalyzeInput, RiskLevel
from ..services.records import record_analysis
from ..services.scoring import analyze_fraud_risk, analyze_orders, coerce_order, risk_label
from ..utils.security import require_internal_secret

router = APIRouter(prefix="/v1", tags=["orders"], dependencies=[Depends(require_internal_secret)])

def _with_label(analysis) -> AnalyzeResponse:
    return AnalyzeResponse(**analysis.model_dump(), label=risk_label(analysis.level))

@router.post("/orders/analyze", response_model=AnalyzeResponse)
def analyze(payload: AnalyzeInput, db: Session = Depends(get_db)):
    try:
        order = coerce_order(payload.order)
        analysis = analyze_fraud_risk(order, payload.profile, payload.user_orders)
    except InvalidOrderError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    if payload.persist:
        record_analysis(db, order, analysis, parse_shipping_address(order.shipping_address))
    return _with_label(analysis)

@router.post("/orders/analyze/batch", response_model=dict[str, AnalyzeResponse])
def analyze_batch(payload: BatchAnalyzeInput):
    try:
        results = analyze_orders(payload.orders, payload.profiles)
    except InvalidOrderError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {order_id: _with_label(a) for order_id, a in results.items()}

@router.get("/orders/risk")
def list_risk(db: Session = Depends(get_db),
              level: RiskLevel | None = Query(None),
              limit: int = Query(50, ge=1, le=500)):
    stmt = select(OrderRisk).order_by(desc(OrderRisk.id)).limit(limit)
    if level: stmt = stmt.where(OrderRisk.level == level.value)
    rows = db.execute(stmt).scalars().all()
    return [{"order_id": r.order_id, "user_id": r.user_id, "score": r.score,
             "level": r.level, "label": risk_label(r.level), "signals": r.signals,
             "recommendation": r.recommendation, "total_amount": r.total_amount,
             "created_at": r.created_at} for r in rows]

@router.get("/orders/{order_id}/evidence")
def order_evidence(order_id: str, db: Session = Depends(get_db)):
    rows = db.execute(select(EvidenceLog).where(EvidenceLog.order_id == order_id)
                      .order_by(EvidenceLog.id)).scalars().all()
    return [{"key": r.key, "value": r.value, "created_at": r.created_at} for r in rows]
