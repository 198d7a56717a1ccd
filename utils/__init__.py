"""Request validation and monitoring helpers."""
