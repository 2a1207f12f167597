"""
Metrics Collection
Prometheus metrics for rendering, action execution and view generation
"""

import time
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the view service.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or REGISTRY

        # Action execution metrics
        self.actions_total = Counter(
            "viewkit_actions_total",
            "Total number of executed actions",
            ["path", "outcome"],
            registry=self.registry,
        )
        self.action_duration = Histogram(
            "viewkit_action_duration_seconds",
            "Action execution duration in seconds",
            ["path"],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )
        self.pending_changes = Gauge(
            "viewkit_pending_changes",
            "Pending changes awaiting confirmation",
            registry=self.registry,
        )

        # Generation metrics
        self.generation_requests_total = Counter(
            "viewkit_generation_requests_total",
            "Total number of dynamic view generation requests",
            ["status"],
            registry=self.registry,
        )
        self.generation_duration = Histogram(
            "viewkit_generation_duration_seconds",
            "View generation duration in seconds",
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry,
        )

        # Rendering metrics
        self.renders_total = Counter(
            "viewkit_renders_total",
            "Total number of rendered trees",
            ["source"],
            registry=self.registry,
        )
        self.render_placeholders_total = Counter(
            "viewkit_render_placeholders_total",
            "Unknown component placeholders rendered",
            registry=self.registry,
        )
        self.tree_issues_total = Counter(
            "viewkit_tree_issues_total",
            "Structural issues reported by the tree validator",
            ["code"],
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "viewkit_errors_total",
            "Total number of errors",
            ["error_type", "component"],
            registry=self.registry,
        )

        # System metrics
        self.uptime = Gauge(
            "viewkit_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_action(self, path: str, outcome: str, duration: float) -> None:
        """Record one execute_action call (path: direct|tracked)."""
        self.actions_total.labels(path=path, outcome=outcome).inc()
        self.action_duration.labels(path=path).observe(duration)

    def set_pending_changes(self, count: int) -> None:
        """Set the pending change gauge."""
        self.pending_changes.set(count)

    def record_generation(self, status: str, duration: float) -> None:
        """Record a generation request."""
        self.generation_requests_total.labels(status=status).inc()
        self.generation_duration.observe(duration)

    def record_render(self, source: str, placeholders: int = 0) -> None:
        """Record a rendered tree (source: template|generated|session)."""
        self.renders_total.labels(source=source).inc()
        if placeholders:
            self.render_placeholders_total.inc(placeholders)

    def record_tree_issue(self, code: str) -> None:
        """Record a validator issue."""
        self.tree_issues_total.labels(code=code).inc()

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
