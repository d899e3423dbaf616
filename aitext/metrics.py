from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

# Keep metrics module-level singletons
jobs_submitted_total = Counter("jobs_submitted_total", "Total jobs accepted for generation")
jobs_rejected_total = Counter("jobs_rejected_total", "Submissions rejected because of invalid input")
request_latency_seconds = Histogram("request_latency_seconds", "HTTP request latency seconds")

# Dispatcher metrics
jobs_completed_total = Counter("jobs_completed_total", "Jobs that finished with generated text")
jobs_failed_total = Counter("jobs_failed_total", "Jobs that ended in FAILED")
provider_call_latency_seconds = Histogram(
    "provider_call_latency_seconds",
    "Provider call latency seconds",
    buckets=(0.5, 1, 2.5, 5, 10, 20, 30, 60, 120),
)
jobs_pending = Gauge("jobs_pending", "Jobs waiting for the dispatcher")
dispatcher_running = Gauge("dispatcher_running", "1 while the dispatcher loop is running")


def metrics_response():
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
