"""Observability – metrics ports."""
from doc_optimizer.observability.metrics.ports import Counter, Histogram, Metrics
from doc_optimizer.observability.metrics.noop import NoopMetrics

__all__ = ["Counter", "Histogram", "Metrics", "NoopMetrics"]
