"""
Core metrics collection for AccessAudit using Prometheus
"""
from prometheus_client import CollectorRegistry, Counter, Histogram, Info, generate_latest

from core.config import settings
from core.logging import get_logger

# Create a global registry for the application
REGISTRY = CollectorRegistry()

app_info = Info("accessaudit_app", "AccessAudit application information", registry=REGISTRY)

audits_run = Counter(
    "accessaudit_audits_total",
    "Total number of audits run",
    ["mode", "status"],
    registry=REGISTRY,
)

audit_duration = Histogram(
    "accessaudit_audit_duration_seconds",
    "Time taken to complete an audit",
    ["mode"],
    buckets=(1.0, 5.0, 10.0, 30.0, 60.0, 180.0, 300.0),
    registry=REGISTRY,
)

analyzer_runs = Counter(
    "accessaudit_analyzer_runs_total",
    "Total analyzer executions",
    ["analyzer", "status"],
    registry=REGISTRY,
)

issues_found = Counter(
    "accessaudit_issues_total",
    "Total issues detected",
    ["tool", "severity"],
    registry=REGISTRY,
)

scores_computed = Counter(
    "accessaudit_scores_total",
    "Total scores computed",
    ["rating"],
    registry=REGISTRY,
)


class MetricsCollector:
    """Helper class for collecting metrics"""

    def __init__(self):
        self.logger = get_logger("metrics")
        self.enabled = settings.prometheus_enabled

        app_info.info({"version": settings.app_version, "environment": settings.environment})

    def track_audit(self, mode: str, duration: float, status: str = "success"):
        """Track a finished (or failed) audit"""
        if not self.enabled:
            return
        audits_run.labels(mode=mode, status=status).inc()
        if status == "success":
            audit_duration.labels(mode=mode).observe(duration)

    def track_analyzer(self, analyzer: str, status: str = "success"):
        """Track one analyzer execution"""
        if not self.enabled:
            return
        analyzer_runs.labels(analyzer=analyzer, status=status).inc()

    def track_issue(self, tool: str, severity: str):
        """Track a detected issue"""
        if not self.enabled:
            return
        issues_found.labels(tool=tool, severity=severity).inc()

    def track_score(self, rating: str):
        """Track a computed score"""
        if not self.enabled:
            return
        scores_computed.labels(rating=rating).inc()

    def get_metrics(self) -> bytes:
        """Get current metrics in Prometheus format"""
        return generate_latest(REGISTRY)


# Global metrics collector instance
metrics = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance"""
    return metrics
