"""
Prometheus metrics for the advisor booking service.

Service timings come from ``@BaseService.measure_operation``; booking and
notification counters are incremented by the services that own the events.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Custom registry so repeated imports in tests never collide with the default one
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "advisor_booking_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "advisor_booking_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "advisor_booking_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_attempts_total = Counter(
    "advisor_booking_booking_attempts_total",
    "Booking creation attempts by outcome",
    ["outcome"],
    registry=REGISTRY,
)

notifications_total = Counter(
    "advisor_booking_notifications_total",
    "Notification dispatch outcomes",
    ["email_type", "status"],
    registry=REGISTRY,
)

reminder_scheduler_running = Gauge(
    "advisor_booking_reminder_scheduler_running",
    "1 while the in-process reminder scheduler is armed",
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_booking_attempt(outcome: str) -> None:
        booking_attempts_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_notification(email_type: str, status: str) -> None:
        notifications_total.labels(email_type=email_type, status=status).inc()

    @staticmethod
    def set_scheduler_running(running: bool) -> None:
        reminder_scheduler_running.set(1 if running else 0)

    @staticmethod
    def get_metrics() -> bytes:
        """Metrics data in Prometheus text format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
