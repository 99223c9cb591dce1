"""
HTTP endpoint for Prometheus to scrape.

    GET /metrics   text exposition of the registry (path is configurable)
    GET /          small landing page linking to the metrics path
"""

from __future__ import annotations

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Tuple

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_client.registry import CollectorRegistry

log = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>jstat Exporter</title></head>
<body>
<h1>jstat Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Split "host:port" (host optional, as in ":9010") into (host, port)."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {address!r}, expected [host]:port")
    return host.strip("[]") or "0.0.0.0", int(port)


def make_handler(registry: CollectorRegistry, metrics_path: str = "/metrics"):

    class _MetricsHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            path = self.path.split("?", 1)[0]
            if path == metrics_path:
                body = generate_latest(registry)
                content_type = CONTENT_TYPE_LATEST
            elif path == "/":
                body = LANDING_PAGE.format(path=metrics_path).encode()
                content_type = "text/html; charset=utf-8"
            else:
                self.send_response(404)
                self.end_headers()
                return

            self.send_response(200)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            log.debug("%s - %s", self.address_string(), format % args)

    return _MetricsHandler


def make_server(
    registry: CollectorRegistry,
    listen_address: str = ":9010",
    metrics_path: str = "/metrics",
) -> ThreadingHTTPServer:
    host, port = parse_listen_address(listen_address)
    server = ThreadingHTTPServer((host, port), make_handler(registry, metrics_path))
    server.daemon_threads = True
    return server


def serve(
    registry: CollectorRegistry,
    listen_address: str = ":9010",
    metrics_path: str = "/metrics",
):
    server = make_server(registry, listen_address, metrics_path)
    log.info("Starting server on %s, metrics at %s", listen_address, metrics_path)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
        log.info("Server stopped")
