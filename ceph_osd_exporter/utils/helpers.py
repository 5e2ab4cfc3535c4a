# ceph_osd_exporter/utils/helpers.py - Helper functions
"""
Prerequisite checks run by the `check` command.
"""

import os
import logging
from typing import List, Tuple

from ..ceph.discovery import get_all_admin_sockets
from ..ceph.errors import DiscoveryError


logger = logging.getLogger(__name__)


def check_run_dir_exists(run_dir: str) -> bool:
    """
    Check that the admin socket directory exists.

    Args:
        run_dir: Admin socket directory

    Returns:
        True if run_dir is a directory
    """
    return os.path.isdir(run_dir)


def check_run_dir_readable(run_dir: str) -> bool:
    """
    Check that the admin socket directory can be listed.

    Args:
        run_dir: Admin socket directory

    Returns:
        True if the current user may read and enter run_dir
    """
    return os.access(run_dir, os.R_OK | os.X_OK)


def check_sockets_present(run_dir: str) -> bool:
    """
    Check that at least one OSD admin socket is present.

    Args:
        run_dir: Admin socket directory

    Returns:
        True if discovery finds one or more sockets
    """
    try:
        return len(get_all_admin_sockets(run_dir=run_dir)) > 0
    except DiscoveryError as e:
        logger.warning(str(e))
        return False


def check_prerequisites(run_dir: str) -> List[Tuple[str, bool]]:
    """
    Run all prerequisite checks.

    Args:
        run_dir: Admin socket directory

    Returns:
        List of (check name, passed) pairs
    """
    return [
        (f"Run directory {run_dir} exists", check_run_dir_exists(run_dir)),
        (f"Run directory {run_dir} readable", check_run_dir_readable(run_dir)),
        ("OSD admin sockets found", check_sockets_present(run_dir)),
    ]
