"""Central registry for Prometheus metrics used across the portal."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram


REQUEST_COUNTER = Counter(
	"portal_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"portal_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"portal_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

SOCKET_EVENTS = Counter(
	"portal_socketio_events_total",
	"Socket.IO events emitted per namespace",
	["namespace", "event"],
)

IDENTITY_SIGN_INS = Counter(
	"portal_identity_sign_ins_total",
	"Identity provider sign-in attempts",
	["method", "result"],
)

IDENTITY_FALLBACKS = Counter(
	"portal_identity_fallbacks_total",
	"Sessions started with a locally generated identity",
)

PROFILE_BOOTSTRAPS = Counter(
	"portal_profile_bootstraps_total",
	"Profile opens by outcome (created, existing, failed)",
	["result"],
)

SNAPSHOTS_DELIVERED = Counter(
	"portal_snapshots_delivered_total",
	"Full-list snapshots delivered by realtime feeds",
	["feed"],
)

SNAPSHOTS_STALE = Counter(
	"portal_snapshots_stale_total",
	"Snapshots discarded because the feed was re-scoped",
	["feed"],
)

SUBSCRIPTION_ERRORS = Counter(
	"portal_subscription_errors_total",
	"Realtime listener failures",
	["feed"],
)

ACTIVE_SUBSCRIPTIONS = Gauge(
	"portal_subscriptions_active",
	"Open realtime listeners per feed",
	["feed"],
)

COMMANDS = Counter(
	"portal_commands_total",
	"Mutation command outcomes",
	["command", "status"],
)

REDIS_UP = Gauge("portal_redis_up", "Document store reachability (1 up, 0 down)")


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).dec()


def socket_event(namespace: str, event: str) -> None:
	SOCKET_EVENTS.labels(namespace=namespace, event=event).inc()


def inc_sign_in(method: str, result: str) -> None:
	IDENTITY_SIGN_INS.labels(method=method, result=result).inc()


def inc_identity_fallback() -> None:
	IDENTITY_FALLBACKS.inc()


def inc_profile_bootstrap(result: str) -> None:
	PROFILE_BOOTSTRAPS.labels(result=result).inc()


def inc_snapshot(feed: str) -> None:
	SNAPSHOTS_DELIVERED.labels(feed=feed).inc()


def inc_stale_snapshot(feed: str) -> None:
	SNAPSHOTS_STALE.labels(feed=feed).inc()


def inc_subscription_error(feed: str) -> None:
	SUBSCRIPTION_ERRORS.labels(feed=feed).inc()


def subscription_opened(feed: str) -> None:
	ACTIVE_SUBSCRIPTIONS.labels(feed=feed).inc()


def subscription_closed(feed: str) -> None:
	ACTIVE_SUBSCRIPTIONS.labels(feed=feed).dec()


def inc_command(command: str, status: str) -> None:
	COMMANDS.labels(command=command, status=status).inc()


def mark_redis(ok: bool) -> None:
	REDIS_UP.set(1 if ok else 0)
