# ceph_osd_exporter/__init__.py
"""
Prometheus exporter for Ceph OSD admin socket metrics.
"""

__version__ = "0.1.0"
