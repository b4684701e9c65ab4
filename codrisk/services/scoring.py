# scoring.py
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from ..errors import InvalidOrderError
from ..rules.address import ParsedAddress, parse_shipping_address
from ..rules.history import _get, as_history, check_cancellation_rate, check_rapid_orders
from ..rules.identity import check_name_mismatch
from ..rules.phone import is_valid_bd_phone
from ..rules.text import check_short_address_parts, is_gibberish_text
from ..schemas import (
    FraudAnalysis, FraudSignal, HistoryOrder, Order, Profile, RiskLevel, SignalCategory,
)

logger = logging.getLogger(__name__)

# -----------------------------
# Tunables
# -----------------------------
THRESHOLDS = {
    "high": 40,    # >= 40 → high
    "medium": 20,  # >= 20 → medium, else low
}

WEIGHTS = {
    "gibberish_address": 30,
    "invalid_phone": 25,
    "name_mismatch": 15,
    "rapid_orders": 20,
    "high_cancellation": 15,
    "short_address": 20,
    "high_first_order": 10,
}

HIGH_FIRST_ORDER_AMOUNT = 5000.0

RECOMMENDATIONS = {
    RiskLevel.HIGH: "This order has multiple fraud indicators. Consider rejecting or verifying with the customer before processing.",
    RiskLevel.MEDIUM: "This order has some suspicious signals. Review the details carefully before accepting.",
    RiskLevel.LOW: "This order appears normal. No significant fraud indicators detected.",
}

RISK_LABELS = {
    RiskLevel.LOW: "Low Risk",
    RiskLevel.MEDIUM: "Medium Risk",
    RiskLevel.HIGH: "High Risk",
}

# -----------------------------
# Helpers
# -----------------------------
def level_for(score: int) -> RiskLevel:
    if score >= THRESHOLDS["high"]:
        return RiskLevel.HIGH
    if score >= THRESHOLDS["medium"]:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW

def risk_label(level: RiskLevel | str) -> str:
    return RISK_LABELS[RiskLevel(level)]

def summarize_signals(analysis: FraudAnalysis) -> List[str]:
    if not analysis.signals:
        return ["No fraud signals detected"]
    return [f"• {s.label} (+{s.points})" for s in analysis.signals]

def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)

def _signal(signal_id: str, label: str, description: str, category: SignalCategory) -> FraudSignal:
    return FraudSignal(
        id=signal_id,
        label=label,
        description=description,
        points=WEIGHTS[signal_id],
        category=category,
    )

def coerce_order(order: Order | Mapping[str, Any]) -> Order:
    if isinstance(order, Order):
        return order
    if isinstance(order, BaseModel):
        order = order.model_dump()
    if order is None or isinstance(order, (str, bytes, int, float)):
        raise InvalidOrderError(f"order must be a mapping, Order or row object, got {type(order).__name__}")
    try:
        return Order.model_validate(order)
    except ValidationError as exc:
        raise InvalidOrderError(f"invalid order {_get(order, 'id')!r}: {exc}") from exc

def coerce_profile(profile: Profile | Mapping[str, Any] | None) -> Optional[Profile]:
    """A profile that can't be read counts as no profile: the name check is skipped."""
    if profile is None or isinstance(profile, Profile):
        return profile
    if isinstance(profile, BaseModel):
        profile = profile.model_dump()
    try:
        return Profile.model_validate(profile)
    except ValidationError:
        logger.debug("ignoring unreadable profile of type %s", type(profile).__name__)
        return None

# -----------------------------
# Rule-based signals
# -----------------------------
def address_signals(parsed: ParsedAddress, profile: Optional[Profile]) -> List[FraudSignal]:
    """Signals read off the shipping string itself: text quality, phone, name vs profile."""
    signals: List[FraudSignal] = []

    gibberish = is_gibberish_text(" ".join([*parsed.address_parts, parsed.name]))
    if gibberish.is_gibberish:
        signals.append(_signal("gibberish_address", "Gibberish Address",
                               gibberish.reason, SignalCategory.ADDRESS))

    # only a present-but-malformed phone scores
    if parsed.phone:
        phone = is_valid_bd_phone(parsed.phone)
        if not phone.is_valid:
            signals.append(_signal("invalid_phone", "Invalid Phone Number",
                                   phone.reason, SignalCategory.PHONE))

    if profile is not None:
        name = check_name_mismatch(parsed.name, profile.full_name)
        if name.is_mismatch:
            signals.append(_signal("name_mismatch", "Name Mismatch",
                                   name.reason, SignalCategory.NAME))
    return signals

def history_signals(order: Order, history: List[HistoryOrder]) -> List[FraudSignal]:
    signals: List[FraudSignal] = []

    rapid = check_rapid_orders(history, order)
    if rapid.is_rapid:
        signals.append(_signal("rapid_orders", "Rapid Repeat Order",
                               rapid.reason, SignalCategory.REPEAT))

    cancel = check_cancellation_rate(history)
    if cancel.is_high:
        signals.append(_signal("high_cancellation", "High Cancellation Rate",
                               cancel.reason, SignalCategory.CANCEL))
    return signals

# -----------------------------
# Main entry
# -----------------------------
def analyze_fraud_risk(
    order: Order | Mapping[str, Any],
    profile: Profile | Mapping[str, Any] | None,
    user_orders: Iterable[Any] | None,
) -> FraudAnalysis:
    """
    Score one order against its user's profile and order history.

    Returns a FraudAnalysis whose score is the sum of the fired signals'
    points, in evaluation order:
      gibberish address, invalid phone, name mismatch, rapid repeat orders,
      high cancellation rate, short address fields, high value first order.

    Raises InvalidOrderError when `order` lacks an id or created_at; every
    other gap (no profile, no phone, empty history, bad timestamps) just
    means the matching signal does not fire.
    """
    order = coerce_order(order)
    profile = coerce_profile(profile)
    history = as_history(user_orders)

    parsed = parse_shipping_address(order.shipping_address)

    signals: List[FraudSignal] = []
    signals.extend(address_signals(parsed, profile))
    signals.extend(history_signals(order, history))

    short = check_short_address_parts(parsed.address_parts)
    if short.is_short:
        signals.append(_signal("short_address", "Suspicious Address Length",
                               short.reason, SignalCategory.ADDRESS))

    if len(history) <= 1 and order.total_amount > HIGH_FIRST_ORDER_AMOUNT:
        signals.append(_signal(
            "high_first_order", "High Value First Order",
            f"First order with ৳{_format_amount(order.total_amount)} (threshold: ৳5,000)",
            SignalCategory.AMOUNT,
        ))

    score = sum(s.points for s in signals)
    level = level_for(score)
    logger.debug("order %s scored %d (%s): %s",
                 order.id, score, level.value, [s.id for s in signals])

    return FraudAnalysis(
        score=score,
        level=level,
        signals=tuple(signals),
        recommendation=RECOMMENDATIONS[level],
    )

def analyze_orders(
    orders: Iterable[Order | Mapping[str, Any]],
    profiles: Mapping[str, Profile | Mapping[str, Any] | None] | None = None,
) -> Dict[str, FraudAnalysis]:
    """
    Score a page of orders at once, e.g. for the admin orders table.
    Each order is judged against the other supplied orders of the same user,
    so pass the user's full history, not just the visible page.
    """
    profiles = profiles or {}
    parsed_orders = [coerce_order(o) for o in orders]

    by_user: Dict[str, List[Order]] = defaultdict(list)
    for o in parsed_orders:
        if o.user_id:
            by_user[o.user_id].append(o)

    results: Dict[str, FraudAnalysis] = {}
    for o in parsed_orders:
        history = by_user[o.user_id] if o.user_id else [o]
        profile = profiles.get(o.user_id) if o.user_id else None
        results[o.id] = analyze_fraud_risk(o, profile, history)
    return results
