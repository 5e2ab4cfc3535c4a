# ceph_osd_exporter/exporters/prometheus.py - Prometheus metrics exporter
"""
Exports OSD metrics in Prometheus format.
Provides HTTP endpoint for Prometheus to scrape.
"""

from http.server import ThreadingHTTPServer
from typing import Optional
import logging

from prometheus_client import CollectorRegistry, generate_latest

from .. import __version__
from ..ceph.filesystem import Filesystem
from ..collector.fragmentation import FragmentationCollector
from ..utils.config import Config
from .http_handler import MetricsHandler


class PrometheusExporter:
    """
    Exports metrics to Prometheus.

    Owns a private registry with the OSD collectors and exposes it over
    HTTP for Prometheus to scrape.
    """

    def __init__(self, config: Optional[Config] = None,
                 filesystem: Optional[Filesystem] = None):
        """
        Initialize the Prometheus exporter.

        Args:
            config: Exporter configuration (defaults if not given)
            filesystem: Filesystem to discover admin sockets on
        """
        self.config = config or Config()
        self.logger = logging.getLogger(__name__)

        self.listen_address = self.config.get('exporter.listen_address', '0.0.0.0')
        self.port = int(self.config.get('exporter.port', 9282))
        self.telemetry_path = self.config.get('exporter.telemetry_path', '/metrics')

        self.registry = CollectorRegistry()
        self.registry.register(FragmentationCollector(
            filesystem=filesystem,
            run_dir=self.config.get('ceph.run_dir', '/var/run/ceph'),
            timeout=self.config.get('ceph.socket_timeout'),
        ))

        self.server = None

    def get_metrics(self) -> bytes:
        """
        Run one collection.

        Returns:
            Metrics in Prometheus text format
        """
        return generate_latest(self.registry)

    def get_metrics_text(self) -> str:
        return self.get_metrics().decode('utf-8')

    def create_server(self) -> ThreadingHTTPServer:
        """
        Bind the HTTP server without serving yet.

        Returns:
            Bound server
        """
        def handler(*args, **kwargs):
            return MetricsHandler(self, *args, **kwargs)

        self.server = ThreadingHTTPServer((self.listen_address, self.port), handler)
        return self.server

    def start(self):
        """
        Start the HTTP server and block until interrupted.
        """
        self.logger.info(f"Starting ceph_osd_exporter (version={__version__})")

        try:
            server = self.create_server()
        except OSError as e:
            self.logger.error(f"Error starting HTTP server: {e}")
            raise

        host, port = server.server_address[:2]
        self.logger.info(f"Metrics available at http://{host}:{port}{self.telemetry_path}")

        try:
            server.serve_forever()
        except KeyboardInterrupt:
            self.logger.info("Shutting down...")
        finally:
            server.server_close()
