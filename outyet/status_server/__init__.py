"""HTTP status server: HTML answer page, GET /status, GET /debug/vars."""

from outyet.status_server.app import create_app, render_page, run_server

__all__ = ["create_app", "render_page", "run_server"]
