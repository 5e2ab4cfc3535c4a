# ceph_osd_exporter/ceph/__init__.py - Ceph admin socket module
"""
Access to Ceph daemon admin sockets.

This module provides:
- filesystem.py: Filesystem interface used for discovery
- discovery.py: Locating OSD admin sockets on the host
- admin_socket.py: Admin socket protocol client
- response.py: Typed view over decoded responses
- errors.py: Error hierarchy
"""
