"""Card, address and action types."""
