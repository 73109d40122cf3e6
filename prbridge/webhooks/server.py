"""Webhook HTTP server using aiohttp."""

from __future__ import annotations

import json
from typing import Any

from aiohttp import web

from prbridge.config import ServerConfig
from prbridge.core.errors import REQUEST_BODY_REQUIRED, NotifierError
from prbridge.core.service import WebhookService
from prbridge.utils.logging import get_logger
from prbridge.webhooks.payloads import parse_event

log = get_logger(__name__)

GITHUB_EVENT_HEADER = "X-GitHub-Event"


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"status": status, "message": message}, status=status)


class WebhookServer:
    """Receives GitHub webhooks and hands them to the WebhookService."""

    def __init__(self, config: ServerConfig, service: WebhookService) -> None:
        self._config = config
        self._service = service
        self._runner: web.AppRunner | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        app = self.build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.bind, self._config.port)
        await site.start()
        log.info(
            "webhook_server_started",
            bind=self._config.bind,
            port=self._config.port,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        log.info("webhook_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/health", self._handle_health)
        app.router.add_post("/webhooks/{service_key}/github", self._handle_github)
        return app

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "service": "prbridge"})

    async def _handle_github(self, request: web.Request) -> web.Response:
        service_key = request.match_info["service_key"]
        kind = request.headers.get(GITHUB_EVENT_HEADER, "")

        body = await request.read()
        if not body:
            return _error(400, REQUEST_BODY_REQUIRED)

        try:
            payload: Any = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error(400, REQUEST_BODY_REQUIRED)
        if not isinstance(payload, dict) or not payload:
            return _error(400, REQUEST_BODY_REQUIRED)

        if kind == "ping":
            return web.json_response({"status": "pong"})

        log.info("webhook_received", service_key=service_key, github_event=kind, action=payload.get("action"))

        try:
            event = parse_event(kind, payload)
            result = await self._service.github(service_key, event)
        except NotifierError as e:
            log.warning(
                "webhook_failed",
                service_key=service_key,
                status=int(e.status),
                error=e.message,
            )
            return _error(int(e.status), e.message)
        except Exception:
            log.exception("webhook_error", service_key=service_key, github_event=kind)
            return _error(500, "Internal server error")

        if result is None:
            return web.json_response({"status": "suppressed"})
        return web.json_response({"status": "sent", "message_id": result.get("message_id")})
