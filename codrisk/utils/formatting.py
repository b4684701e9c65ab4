def percent(ratio: float) -> int:
    """Whole percent, halves rounded up (12.5% -> 13), the way the dashboard prints rates."""
    return int(ratio * 100 + 0.5)
