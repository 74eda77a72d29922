"""Prometheus metrics for checkout outcomes, remote call health and cart durability"""

from prometheus_client import Counter, Histogram

# Checkout metrics
checkout_session_counter = Counter(
    "club_checkout_sessions_total",
    "Checkout session requests",
    ["outcome"],  # created | rejected | invalid_cart | error
)

checkout_line_items_histogram = Histogram(
    "club_checkout_line_items",
    "Distinct products per checkout session request",
    buckets=[1, 2, 3, 5, 10, 20],
)

# Club services metrics
remote_call_latency_histogram = Histogram(
    "club_remote_call_latency_seconds",
    "Club services response time",
    ["service"],  # catalog | payments | transactions
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

remote_call_failures_counter = Counter(
    "club_remote_call_failures_total",
    "Failed club services calls",
    ["service"],
)

# Local durability
cart_persistence_failures_counter = Counter(
    "club_cart_persistence_failures_total",
    "Cart storage operations that failed and were skipped",
    ["operation"],  # load | save | clear
)


def record_checkout(outcome: str, line_items: int = 0) -> None:
    """Record checkout outcome and, for submitted requests, the cart breadth"""
    checkout_session_counter.labels(outcome=outcome).inc()

    if line_items > 0:
        checkout_line_items_histogram.observe(line_items)
