"""
HTTP handler — Serves the rotation snapshot as JSON.
Uses aiohttp.web, same stack as the REST client.
Every request recomputes from live reads; caching is left to the edge via
Cache-Control.
"""

from __future__ import annotations
import json
import math
from typing import TYPE_CHECKING
from aiohttp import web
import logging

if TYPE_CHECKING:
    from config import ServerConfig
    from core.pipeline import RotationPipeline

logger = logging.getLogger(__name__)


def _finite(value):
    """JSON has no NaN/Infinity; map them to null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def json_response(data, status=200, headers=None):
    if isinstance(data, dict) and "rows" in data:
        data = dict(data, rows=[{k: _finite(v) for k, v in r.items()} for r in data["rows"]])
    return web.Response(
        text=json.dumps(data),
        content_type="application/json",
        status=status,
        headers=headers,
    )


class SnapshotServer:
    """Web server exposing GET /api/snapshot."""

    def __init__(self, pipeline: "RotationPipeline", config: "ServerConfig"):
        self.pipeline = pipeline
        self.config = config
        self.app = web.Application()
        self._setup_routes()
        self.app.on_cleanup.append(self._on_cleanup)

    def _setup_routes(self):
        self.app.router.add_get("/api/snapshot", self._api_snapshot)
        self.app.router.add_get("/health", self._health)

    def run(self):
        """Blocking: serve until interrupted."""
        logger.info(f"[API] Serving on http://{self.config.host}:{self.config.port}/api/snapshot")
        web.run_app(self.app, host=self.config.host, port=self.config.port, access_log=None, print=None)

    async def _on_cleanup(self, app: web.Application):
        await self.pipeline.close()

    # ─── Routes ───

    async def _api_snapshot(self, request: web.Request) -> web.Response:
        """Ranked rows, or {"error": true, "message": ...} with status 500."""
        try:
            snapshot = await self.pipeline.run()
            return json_response(
                snapshot.to_dict(),
                headers={"Cache-Control": self.config.cache_control},
            )
        except Exception as e:
            logger.error(f"[API] Snapshot failed: {e}", exc_info=True)
            return json_response({"error": True, "message": str(e) or "Unknown error"}, status=500)

    async def _health(self, request: web.Request) -> web.Response:
        return json_response({"status": "ok"})
