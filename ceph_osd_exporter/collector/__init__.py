# ceph_osd_exporter/collector/__init__.py - Metric collection module
"""
Prometheus collectors that query OSD admin sockets on each scrape.

This module provides:
- fragmentation.py: BlueStore allocator fragmentation rating
"""
