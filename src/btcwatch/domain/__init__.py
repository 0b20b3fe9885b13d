"""Domain layer for btcwatch application."""
