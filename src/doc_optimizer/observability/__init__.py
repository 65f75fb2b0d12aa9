"""Observability – structured logging, metrics ports, and health checks."""
