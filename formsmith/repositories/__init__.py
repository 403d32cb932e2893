"""Repository 层."""
