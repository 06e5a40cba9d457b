"""HTTP server exposing the exporter's metrics."""

import asyncio
import traceback
from typing import Optional

from aiohttp import web

from pgbouncer_exporter.core.logging import logger
from pgbouncer_exporter.core.protocols.metrics_renderer import MetricsRenderer

_LANDING_PAGE = (
    "<html><head><title>Pgbouncer Exporter</title></head>"
    "<body><h1>Pgbouncer Exporter</h1>"
    "<p><a href='{path}'>Metrics</a></p>"
    "<p>Counter metrics carry the Prometheus <code>_total</code> suffix, for example "
    "<code>pgbouncer_stat_total_xact_count_total</code>.</p></body></html>"
)


class MetricsServer:
    """aiohttp server serving the telemetry path and a landing page.

    Rendering triggers a blocking scrape pass, so it runs in a worker thread
    and the event loop keeps answering other requests meanwhile.
    """

    def __init__(self, renderer: MetricsRenderer, telemetry_path: str = "/debug/metrics"):
        """Initialize the metrics server.

        Args:
            renderer: Serializes the collected metrics on every request.
            telemetry_path: URL path under which metrics are exposed.
        """
        self.renderer = renderer
        self.telemetry_path = telemetry_path
        self.app = web.Application()
        self.app.add_routes(
            [
                web.get(telemetry_path, self.metrics_handler),
                web.get("/", self.landing_handler),
            ]
        )
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(context_base="api", operation="metrics_server")

    async def metrics_handler(self, request: web.Request) -> web.Response:
        """Run one scrape pass and return it in the renderer's format."""
        try:
            body = await asyncio.to_thread(self.renderer.generate)
        except Exception as e:
            self.logger.error(f"Error rendering metrics: {e}\n{traceback.format_exc()}")
            return web.Response(text="Error\n", status=500)
        # content_type carries parameters, so it goes in the raw header.
        return web.Response(body=body, headers={"Content-Type": self.renderer.content_type})

    async def landing_handler(self, request: web.Request) -> web.Response:
        return web.Response(
            text=_LANDING_PAGE.format(path=self.telemetry_path),
            content_type="text/html",
            charset="utf-8",
        )

    async def start(self, host: str = "0.0.0.0", port: int = 9186) -> None:
        """Start the aiohttp server.

        Args:
            host: The host to listen on.
            port: The port to listen on.
        """
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, host=host, port=port)
        await self.site.start()
        self.logger.info(f"Starting Server: {host}:{port}{self.telemetry_path}")

    async def stop(self) -> None:
        """Stops the server gracefully."""
        if self.site:
            await self.site.stop()
        if self.runner:
            await self.runner.cleanup()
