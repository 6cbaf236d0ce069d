"""
Domain Models - Type-safe data structures for dashboard data

This package contains dataclasses representing the dashboard's concepts:
    - metrics: MetricValue, MetricUnavailable, InstanceMetrics
    - collaborators: CollaboratorRecord

Usage:
    from cloudpulse.domain import InstanceMetrics, MetricUnavailable

    metrics = InstanceMetrics(instance_id="i-0abc")
    metrics.to_dict()
"""

from .collaborators import CollaboratorRecord
from .metrics import (
    CPU_UTILIZATION,
    MONITORED_METRICS,
    NETWORK_IN,
    NETWORK_OUT,
    NOT_AVAILABLE,
    InstanceMetrics,
    MetricReading,
    MetricUnavailable,
    MetricValue,
)

__all__ = [
    # Metrics
    "InstanceMetrics",
    "MetricReading",
    "MetricValue",
    "MetricUnavailable",
    "MONITORED_METRICS",
    "CPU_UTILIZATION",
    "NETWORK_IN",
    "NETWORK_OUT",
    "NOT_AVAILABLE",
    # Collaborators
    "CollaboratorRecord",
]
