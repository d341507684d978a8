"""
Prometheus metrics.

Exposed at /metrics. Endpoint labels use the route template so that
resource IDs never become label values.
"""
from prometheus_client import Counter, Histogram, Gauge


# Request metrics
REQUEST_COUNT = Counter(
    "solosuccess_requests_total",
    "Total requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "solosuccess_request_latency_seconds",
    "Request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0],
)

# Authentication metrics
AUTH_LOGIN_TOTAL = Counter(
    "auth_login_total",
    "Total login attempts",
    ["success"],
)

# Chat metrics
CHAT_COMPLETIONS = Counter(
    "chat_completions_total",
    "Total chat completions",
    ["agent_id", "status"],
)

CHAT_TOKENS_USED_TOTAL = Counter(
    "chat_tokens_used_total",
    "Total tokens used by chat agents",
    ["agent_id", "token_type"],
)

ACTIVE_STREAMS = Gauge(
    "active_streams",
    "Number of active streaming chat connections",
)

# Competitive intelligence metrics
ALERTS_CREATED = Counter(
    "competitor_alerts_created_total",
    "Competitor alerts created",
    ["alert_type", "source"],
)

SCRAPING_RUNS = Counter(
    "scraping_runs_total",
    "Scraping job executions",
    ["job_type", "outcome"],
)

SCRAPING_DURATION_SECONDS = Histogram(
    "scraping_duration_seconds",
    "Scraping fetch duration in seconds",
    ["job_type"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

PROCESSOR_CYCLES = Counter(
    "social_processor_cycles_total",
    "Social media processor cycles",
    ["status"],
)

COMPETITORS_ANALYZED = Counter(
    "social_competitors_analyzed_total",
    "Competitors analysed by the social media processor",
)
