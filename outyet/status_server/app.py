"""FastAPI app for GET / (answer page), GET /status (JSON) and GET /debug/vars (metrics).

The app only reads the poller through is_confirmed(); polling itself runs on the poller's own thread."""

import html
import logging
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from outyet.config.settings import get_poll_config, get_server_config
from outyet.core.metrics import MetricsSink, get_metrics
from outyet.poller.prober import HttpProber
from outyet.poller.status import PollingStatus, PollTarget

logger = logging.getLogger(__name__)

_PAGE_TEMPLATE: Optional[Template] = None
_FALLBACK_PAGE = "<!DOCTYPE html><html><body><h2>Is Go ${version} out yet?</h2><h1>${answer}</h1></body></html>"


def _load_page_template() -> Template:
    global _PAGE_TEMPLATE
    if _PAGE_TEMPLATE is not None:
        return _PAGE_TEMPLATE
    p = Path(__file__).resolve().parent / "templates" / "index.html"
    if p.exists():
        _PAGE_TEMPLATE = Template(p.read_text(encoding="utf-8"))
    else:
        logger.warning("Page template not found at %s; using built-in page", p)
        _PAGE_TEMPLATE = Template(_FALLBACK_PAGE)
    return _PAGE_TEMPLATE


def render_page(version: str, url: str, confirmed: bool) -> str:
    """Answer page: a link to the change URL when confirmed, otherwise "No. :-(". Values are HTML-escaped."""
    if confirmed:
        answer = f'<a href="{html.escape(url, quote=True)}">YES!</a>'
    else:
        answer = "No. :-("
    return _load_page_template().safe_substitute(version=html.escape(version), answer=answer)


def create_app(
    status: PollingStatus,
    version: str,
    metrics: Optional[MetricsSink] = None,
) -> FastAPI:
    """Build FastAPI app around an (already constructed) PollingStatus. Does not start polling."""
    metrics = metrics if metrics is not None else get_metrics()
    app = FastAPI(title="outyet", description=f"Is Go {version} out yet?")

    @app.get("/", response_class=HTMLResponse)
    def get_page() -> str:
        """Serve the answer page for the current poll state."""
        return render_page(version, status.target.url, status.is_confirmed())

    @app.get("/status")
    def get_status() -> Dict[str, Any]:
        """Return version, change URL and whether the tag has been seen."""
        return {
            "version": version,
            "url": status.target.url,
            "confirmed": status.is_confirmed(),
        }

    @app.get("/debug/vars")
    def get_debug_vars() -> Dict[str, Any]:
        """Return metrics snapshot: hit_count, poll_count, poll_error_count, poll_error."""
        return metrics.snapshot()

    return app


def run_server(config: dict) -> None:
    """Build the poller from config, start polling, then serve (host/port from config.server) under uvicorn."""
    import uvicorn

    server_cfg = get_server_config(config)
    poll_cfg = get_poll_config(config)

    metrics = get_metrics()
    target = PollTarget(url=poll_cfg["url"], period=poll_cfg["period"])
    prober = HttpProber(timeout=poll_cfg["timeout"])
    status = PollingStatus(target, prober=prober, metrics=metrics)
    app = create_app(status, poll_cfg["version"], metrics=metrics)
    status.start()

    host, port = server_cfg["host"], server_cfg["port"]
    logger.info("outyet on %s:%s (version=%s, url=%s)", host, port, poll_cfg["version"], target.url)
    try:
        uvicorn.run(app, host=host, port=int(port), log_level="info")
    finally:
        status.stop()
        status.join(timeout=poll_cfg["timeout"])
        prober.close()
        metrics.log_snapshot()
