# ceph_osd_exporter/exporters/__init__.py - Exporters module
"""
Exposition of collected metrics.

This module provides:
- prometheus.py: Registry wiring and HTTP server
- http_handler.py: Request handler for the metrics and landing pages
"""
