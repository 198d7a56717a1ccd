"""Application initialization orchestrator."""

from __future__ import annotations

import asyncio
import os
import signal
from contextlib import suppress
from typing import Optional

from aiohttp import web as aiohttp_web
from aiohttp_wsgi import WSGIHandler

from config import Config, load_config
from core.logger import get_logger

logger = get_logger(__name__)


class ApplicationInitializer:
    """Serves the portal's Flask app from the asyncio loop.

    The loop that runs the aiohttp server is also the loop webhook deliveries
    are scheduled on, so it is registered with the async runner first.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.flask_app = None
        self.web_runner: Optional[aiohttp_web.AppRunner] = None
        self._stopped = asyncio.Event()

    async def initialize(self) -> None:
        """Register the main loop, then start the HTTP server."""
        from services import set_main_loop

        loop = asyncio.get_running_loop()
        set_main_loop(loop)
        self._install_signal_handlers(loop)
        await self._start_http_server()
        self._log_startup_summary()

    async def run(self) -> None:
        """Serve until a stop signal or cancellation."""
        try:
            await self._stopped.wait()
            logger.info("Stop requested, shutting down")
        except asyncio.CancelledError:
            logger.info("Cancelled, shutting down")
        finally:
            await self.shutdown()

    def stop(self) -> None:
        self._stopped.set()

    async def shutdown(self) -> None:
        """Stop accepting requests and detach the webhook loop."""
        from services import set_main_loop

        if self.web_runner is not None:
            with suppress(Exception):
                await self.web_runner.cleanup()
            self.web_runner = None
        set_main_loop(None)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            # Not available on Windows event loops
            with suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, self.stop)

    async def _start_http_server(self) -> None:
        from web import create_app

        self.flask_app = create_app(self.config)

        # Every path is handed to Flask; aiohttp only owns the socket
        aio_app = aiohttp_web.Application(client_max_size=self.config.max_content_length)
        aio_app.router.add_route("*", "/{path_info:.*}", WSGIHandler(self.flask_app))

        self.web_runner = aiohttp_web.AppRunner(aio_app, access_log=None)
        await self.web_runner.setup()

        # Hosting platforms hand out the port via PORT
        port_override = os.getenv("PORT")
        port = int(port_override) if port_override else self.config.web_port
        host = "0.0.0.0" if port_override else self.config.web_host

        await aiohttp_web.TCPSite(self.web_runner, host, port).start()
        logger.info(f"Portal API listening on http://{host}:{port}/api")

    def _log_startup_summary(self) -> None:
        notifier = self.flask_app.config["NOTIFIER"]
        enabled = sorted(event for event, url in notifier.urls.items() if url)
        logger.info(f"Environment: {self.config.environment}")
        logger.info(f"Staff allow-list: {len(self.config.staff_user_ids)} ids")
        logger.info(f"Webhooks enabled: {', '.join(enabled) or 'none'}")
        if not self.config.discord_client_id:
            logger.warning("DISCORD_CLIENT_ID is not set, Discord login will fail")
