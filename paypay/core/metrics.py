"""
Prometheus metrics for PayPay gateway calls.

Counters are registered in the default prometheus_client registry so a host
application exposing /metrics picks them up without extra wiring.
"""

from prometheus_client import Counter, Histogram

gateway_requests = Counter(
    "paypay_requests_total",
    "Total number of PayPay gateway requests",
    ["service", "outcome"],
)

gateway_latency = Histogram(
    "paypay_request_latency_seconds",
    "Time taken for a PayPay gateway round trip",
    ["service"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)


class Outcome:
    """Label values for paypay_requests_total"""

    SUCCESS = "success"
    BUSINESS_FAILURE = "business_failure"
    TRANSPORT_ERROR = "transport_error"
    INVALID_SIGNATURE = "invalid_signature"
    DECRYPTION_ERROR = "decryption_error"
    BAD_RESPONSE = "bad_response"


def record_request(service: str, outcome: str, duration: float | None = None):
    gateway_requests.labels(service=service, outcome=outcome).inc()
    if duration is not None:
        gateway_latency.labels(service=service).observe(duration)
