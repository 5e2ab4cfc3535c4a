# ceph_osd_exporter/exporters/http_handler.py - HTTP request handler
"""
Serves the metrics endpoint and a landing page linking to it.
"""

import logging
from http.server import BaseHTTPRequestHandler

from prometheus_client import CONTENT_TYPE_LATEST

from .. import __version__

LANDING_PAGE = """<html>
<head><title>Ceph OSD Exporter</title></head>
<body>
<h1>Ceph OSD Exporter</h1>
<p>Prometheus Exporter for Ceph OSD</p>
<p>Version: {version}</p>
<ul><li><a href="{path}">Metrics</a></li></ul>
</body>
</html>
"""

logger = logging.getLogger(__name__)


class MetricsHandler(BaseHTTPRequestHandler):

    def __init__(self, exporter, *args, **kwargs):
        self.exporter = exporter
        super().__init__(*args, **kwargs)

    def _send(self, status: int, content_type: str, body: bytes):
        self.send_response(status)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        path = self.path.split('?', 1)[0]
        telemetry_path = self.exporter.telemetry_path

        if path == telemetry_path:
            self._send(200, CONTENT_TYPE_LATEST, self.exporter.get_metrics())
        elif path == '/' and telemetry_path not in ('', '/'):
            body = LANDING_PAGE.format(version=__version__, path=telemetry_path)
            self._send(200, 'text/html; charset=utf-8', body.encode('utf-8'))
        else:
            self._send(404, 'text/plain; charset=utf-8', b'Not Found\n')

    def log_message(self, format, *args):
        """Route access logs to the module logger"""
        logger.debug(f"{self.address_string()} - {format % args}")
