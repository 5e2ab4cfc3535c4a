# ceph_osd_exporter/ceph/discovery.py - Admin socket discovery
"""
Finds the admin sockets of every OSD running on this host.

OSD daemons create ceph-osd.<id>.asok either directly in the run
directory or, for containerized deployments, one level down in a
directory named after the cluster FSID.
"""

import logging
import os
from typing import List, Optional

from .admin_socket import AdminSocket
from .errors import DiscoveryError
from .filesystem import Filesystem, OSFilesystem

DEFAULT_RUN_DIR = "/var/run/ceph"

SOCKET_PREFIX = "ceph-osd."
SOCKET_SUFFIX = ".asok"

logger = logging.getLogger(__name__)


def is_osd_admin_socket(name: str) -> bool:
    """Check whether a base name looks like an OSD admin socket."""
    return name.startswith(SOCKET_PREFIX) and name.endswith(SOCKET_SUFFIX)


def get_all_admin_sockets(filesystem: Optional[Filesystem] = None,
                          run_dir: str = DEFAULT_RUN_DIR) -> List[AdminSocket]:
    """
    Scan run_dir recursively for OSD admin sockets.

    Args:
        filesystem: Filesystem to scan (local disk by default)
        run_dir: Directory to start from

    Returns:
        One AdminSocket per matching entry, in walk order

    Raises:
        DiscoveryError: If any part of the tree could not be listed
    """
    filesystem = filesystem or OSFilesystem()
    sockets = []

    try:
        for dirpath, _, filenames in filesystem.walk(run_dir):
            for name in filenames:
                if is_osd_admin_socket(name):
                    sockets.append(AdminSocket(path=os.path.join(dirpath, name)))
    except OSError as e:
        raise DiscoveryError(f"failed to scan admin sockets: {e}") from e

    logger.debug(f"Found {len(sockets)} admin socket(s) under {run_dir}")
    return sockets
