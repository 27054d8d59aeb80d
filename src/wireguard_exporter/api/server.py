"""
WireGuard Exporter - API Server

Serves the rendered metrics to Prometheus.
"""
import asyncio
import logging
from typing import Optional

from aiohttp import web

from .. import __version__
from ..config import ExporterConfig, load_config
from ..errors import ExporterError
from ..executor.wireguard import WireGuardExecutor
from ..parser.wireguard import parse
from ..renderer.metrics import MetricsRenderer
from ..services.peer_names import load_peer_names

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

CONFIG_KEY = web.AppKey("config", ExporterConfig)
EXECUTOR_KEY = web.AppKey("executor", WireGuardExecutor)
RENDERER_KEY = web.AppKey("renderer", MetricsRenderer)

routes = web.RouteTableDef()


@routes.get("/")
async def index(request):
    """Health check and exporter info."""
    config = request.app[CONFIG_KEY]
    return web.json_response({
        "status": "ok",
        "version": __version__,
        "interfaces": config.interfaces,
    })


@routes.get("/metrics")
async def metrics(request):
    """Dump, parse and render WireGuard statistics."""
    config = request.app[CONFIG_KEY]
    executor = request.app[EXECUTOR_KEY]
    renderer = request.app[RENDERER_KEY]

    try:
        raw = await executor.dump()
        interfaces = parse(raw)
        # Reloaded per scrape so config edits show up without a restart
        names = None
        if config.peer_config_files:
            loop = asyncio.get_running_loop()
            names = await loop.run_in_executor(None, load_peer_names, config.peer_config_files)
    except ExporterError as e:
        logger.error(f"Scrape failed: {e}")
        return web.Response(status=500, text=f"{e}\n")

    payload = renderer.render(interfaces, names)
    return web.Response(body=payload.encode(), headers={"Content-Type": CONTENT_TYPE})


def create_app(config: Optional[ExporterConfig] = None) -> web.Application:
    """Create aiohttp application."""
    if config is None:
        config = load_config()

    app = web.Application()
    app[CONFIG_KEY] = config
    app[EXECUTOR_KEY] = WireGuardExecutor(
        wg_binary=config.wg_binary,
        prepend_sudo=config.prepend_sudo,
        interfaces=config.interfaces,
        timeout=config.command_timeout,
    )
    app[RENDERER_KEY] = MetricsRenderer()
    app.add_routes(routes)
    return app


async def run_server(config: ExporterConfig, stop_event: asyncio.Event):
    """Run the exporter until ``stop_event`` is set."""
    app = create_app(config)
    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, config.api_host, config.api_port)
    await site.start()

    logger.info(f"Exporter listening on {config.api_host}:{config.api_port}")

    try:
        await stop_event.wait()
    finally:
        await runner.cleanup()
