"""
WireGuard Exporter - Prometheus metrics for WireGuard peers
"""
__version__ = "1.0.0"
