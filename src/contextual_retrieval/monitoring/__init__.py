"""
Monitoring subsystem for contextual retrieval.
"""

from contextual_retrieval.monitoring.metrics import MetricsSnapshot, RetrievalMetrics

__all__ = ["MetricsSnapshot", "RetrievalMetrics"]
