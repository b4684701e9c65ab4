from __future__ import annotations
from datetime import datetime
from enum import Enum
from uuid import UUID
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

Timestamp = Union[str, datetime, int, float]


class SignalCategory(str, Enum):
    ADDRESS = "address"
    PHONE = "phone"
    NAME = "name"
    REPEAT = "repeat"
    CANCEL = "cancel"
    AMOUNT = "amount"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _coerce_id(value):
    # psycopg hands back uuid columns as UUID, some exports use ints
    if isinstance(value, bool):
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return str(int(value))
    return value


RecordId = Annotated[str, BeforeValidator(_coerce_id)]


# ----------------------------
# Inputs (read-only snapshots)
# ----------------------------
class Order(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", from_attributes=True)

    id: RecordId
    user_id: Optional[RecordId] = None
    shipping_address: Optional[str] = None
    total_amount: float = 0.0
    created_at: Timestamp
    status: Optional[str] = None
    items: Any = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amount_default(cls, value):
        return 0.0 if value is None else value

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("order id must not be empty")
        return value

    @field_validator("created_at")
    @classmethod
    def _created_at_not_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("order created_at must not be empty")
        return value


def _text_or_none(value):
    return value if isinstance(value, str) else None


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", from_attributes=True)

    full_name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("full_name", "phone", mode="before")
    @classmethod
    def _drop_non_text(cls, value):
        return _text_or_none(value)


class HistoryOrder(BaseModel):
    """One row of a user's order history. Every field is optional; junk values become None."""
    model_config = ConfigDict(frozen=True, extra="ignore", from_attributes=True)

    id: Optional[RecordId] = None
    user_id: Optional[RecordId] = None
    created_at: Optional[Timestamp] = None
    status: Optional[str] = None
    total_amount: Optional[float] = None
    shipping_address: Optional[str] = None
    items: Any = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _drop_bad_id(cls, value):
        value = _coerce_id(value)
        return value if isinstance(value, str) else None

    @field_validator("created_at", mode="before")
    @classmethod
    def _drop_bad_timestamp(cls, value):
        if isinstance(value, bool) or not isinstance(value, (str, datetime, int, float)):
            return None
        return value

    @field_validator("status", "shipping_address", mode="before")
    @classmethod
    def _drop_non_text(cls, value):
        return _text_or_none(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _drop_bad_amount(cls, value):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


# ----------------------------
# Outputs
# ----------------------------
class FraudSignal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str
    points: int = Field(gt=0)
    category: SignalCategory


class FraudAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    level: RiskLevel
    signals: Tuple[FraudSignal, ...] = ()
    recommendation: str


# ----------------------------
# HTTP payloads
# ----------------------------
class AnalyzeInput(BaseModel):
    order: Dict[str, Any]
    profile: Optional[Profile] = None
    user_orders: List[Dict[str, Any]] = Field(default_factory=list)
    persist: bool = False


class AnalyzeResponse(FraudAnalysis):
    label: str


class BatchAnalyzeInput(BaseModel):
    orders: List[Dict[str, Any]]
    profiles: Dict[str, Profile] = Field(default_factory=dict)
