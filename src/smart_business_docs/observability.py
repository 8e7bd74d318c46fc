"""Prometheus metrics shared by the API and the conversation services."""

import re

from prometheus_client import CollectorRegistry, Counter, Histogram

_ID_SEGMENT = re.compile(r"^[0-9a-fA-F-]{32,36}$")

# Registry for isolated metric collection
CUSTOM_REGISTRY = CollectorRegistry()

REQUESTS = Counter("requests_total", "Total requests by path", ["path"], registry=CUSTOM_REGISTRY)
ERRORS = Counter("errors_total", "Total failed requests by path", ["path"], registry=CUSTOM_REGISTRY)

LLM_LATENCY = Histogram(
    "llm_generation_seconds",
    "Latency of generative AI calls in seconds",
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
    registry=CUSTOM_REGISTRY,
)
LLM_FAILURES = Counter(
    "llm_failures_total",
    "Failed generative AI calls",
    ["reason"],
    registry=CUSTOM_REGISTRY,
)
DOCUMENTS_READY = Counter(
    "documents_ready_total",
    "Turns that passed the document readiness gate",
    registry=CUSTOM_REGISTRY,
)


def path_label(path: str) -> str:
    """Replace id segments so labels stay low-cardinality."""
    segments = [
        "{id}" if _ID_SEGMENT.match(segment) else segment
        for segment in path.split("?")[0].split("/")
        if segment
    ]
    return "/" + "/".join(segments)
