# ceph_osd_exporter/collector/fragmentation.py - Fragmentation rating collector
"""
Collects the BlueStore allocator fragmentation rating of every OSD.

Sockets are rediscovered and queried on every scrape. A socket that
fails is logged and skipped so the remaining OSDs are still reported.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from prometheus_client.core import GaugeMetricFamily

from ..ceph.admin_socket import AdminSocketCommand
from ..ceph.discovery import DEFAULT_RUN_DIR, get_all_admin_sockets
from ..ceph.errors import CephError, DiscoveryError, SchemaError
from ..ceph.filesystem import Filesystem, OSFilesystem

METRIC_NAME = 'ceph_osd_fragmentation_rating'
METRIC_HELP = 'Fragmentation rating of the OSD'

FRAGMENTATION_COMMAND = AdminSocketCommand(prefix='bluestore allocator score block')
FRAGMENTATION_FIELD = 'fragmentation_rating'


@dataclass(frozen=True)
class MetricSample:
    """Single gauge value labeled with the OSD id."""
    osd: str
    value: float


class FragmentationCollector:
    """
    Custom Prometheus collector for OSD fragmentation.

    Holds configuration only. Every collect() call walks the run
    directory and queries each admin socket once.
    """

    def __init__(self, filesystem: Optional[Filesystem] = None,
                 run_dir: str = DEFAULT_RUN_DIR,
                 timeout: Optional[float] = None):
        """
        Initialize the collector.

        Args:
            filesystem: Filesystem to discover sockets on
            run_dir: Directory holding the admin sockets
            timeout: Per-operation admin socket timeout in seconds
        """
        self.filesystem = filesystem or OSFilesystem()
        self.run_dir = run_dir
        self.timeout = timeout

        self.logger = logging.getLogger(__name__)

    def _new_family(self) -> GaugeMetricFamily:
        return GaugeMetricFamily(METRIC_NAME, METRIC_HELP, labels=['osd'])

    def describe(self) -> List[GaugeMetricFamily]:
        # Registering without describe() would trigger a full collect()
        return [self._new_family()]

    def collect_samples(self) -> List[MetricSample]:
        """
        Query every admin socket currently on disk.

        Returns:
            One sample per socket that answered with a usable rating
        """
        try:
            sockets = get_all_admin_sockets(self.filesystem, self.run_dir)
        except DiscoveryError as e:
            self.logger.error(f"Failed to get admin sockets: {e}")
            return []

        samples = []
        for admin_socket in sockets:
            try:
                response = admin_socket.send_command(FRAGMENTATION_COMMAND, timeout=self.timeout)
            except CephError as e:
                self.logger.error(
                    f"Failed to get fragmentation status of osd.{admin_socket.osd}: {e}"
                )
                continue

            try:
                rating = response.get_float(FRAGMENTATION_FIELD)
            except SchemaError as e:
                self.logger.error(
                    f"Failed to parse fragmentation rating of osd.{admin_socket.osd} "
                    f"({admin_socket.path}): {e}, response: {e.response}"
                )
                continue

            samples.append(MetricSample(osd=admin_socket.osd, value=rating))

        return samples

    def collect(self) -> Iterator[GaugeMetricFamily]:
        family = self._new_family()
        for sample in self.collect_samples():
            family.add_metric([sample.osd], sample.value)
        yield family
