"""Operations endpoints: store readiness probe and Prometheus metrics."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from redis.exceptions import RedisError

from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ops"])


@router.get("/health/ready")
async def health_ready(request: Request) -> Response:
	dashboard = getattr(request.app.state, "dashboard", None)
	if dashboard is None or dashboard.store is None:
		return JSONResponse({"status": "starting", "store": "unknown"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
	try:
		await dashboard.store.client.ping()
	except RedisError:
		obs_metrics.mark_redis(False)
		logger.warning("ops.store_unreachable", exc_info=True)
		return JSONResponse({"status": "degraded", "store": "down"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
	obs_metrics.mark_redis(True)
	return JSONResponse({"status": "ok", "store": "up", "ready": dashboard.ready})


@router.get("/metrics")
async def prometheus_metrics() -> Response:
	payload = generate_latest()
	return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
