class InvalidOrderError(ValueError):
    """Order record is missing the fields every detector depends on (id, created_at)."""
