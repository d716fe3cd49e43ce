"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


REQUEST_COUNTER = Counter(
	"familyhub_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"familyhub_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

AUDIT_WRITES = Counter(
	"familyhub_audit_writes_total",
	"Audit records written, by outcome",
	["result"],
)

FILE_OPERATIONS = Counter(
	"familyhub_file_operations_total",
	"Upload lifecycle operations, by outcome",
	["op", "result"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def audit_write(ok: bool) -> None:
	AUDIT_WRITES.labels(result="ok" if ok else "failed").inc()


def file_op(op: str, ok: bool = True) -> None:
	FILE_OPERATIONS.labels(op=op, result="ok" if ok else "failed").inc()
