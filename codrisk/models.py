from __future__ import annotations
from typing import Optional, List, Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, JSON, Float, Text, func
from .database import Base

# ----------------------------
# Order risk verdicts
# ----------------------------
class OrderRisk(Base):
    __tablename__ = "order_risk"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    total_amount: Mapped[Optional[float]] = mapped_column(Float)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    level: Mapped[str] = mapped_column(String(12), index=True)    # low|medium|high
    signals: Mapped[List[Any]] = mapped_column(JSON)              # list of signal dicts
    recommendation: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

# ----------------------------
# Evidence log (debug/audit)
# ----------------------------
class EvidenceLog(Base):
    __tablename__ = "evidence_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(32))
    value: Mapped[Any] = mapped_column(JSON)
    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now())
