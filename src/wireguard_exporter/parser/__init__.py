"""
WireGuard Exporter - Status Dump Parsing
"""
from .wireguard import (
    Endpoint,
    InterfaceTable,
    LocalEndpoint,
    RemoteEndpoint,
    parse,
)

__all__ = [
    "Endpoint",
    "InterfaceTable",
    "LocalEndpoint",
    "RemoteEndpoint",
    "parse",
]
