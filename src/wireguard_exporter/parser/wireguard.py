"""WireGuard Exporter - Status Dump Parser

Parses the tab separated output of ``wg show all dump``. The interface
record carries 5 fields, every peer record carries 9::

    wg0  <public-key>  <private-key>  51820  off
    wg0  <public-key>  (none)  1.2.3.4:5678  10.0.0.2/32  1555771458  10288508  139524160  off
"""
import ipaddress
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from ..errors import FormatError

logger = logging.getLogger(__name__)

EMPTY = "(none)"

LOCAL_FIELDS = 5
REMOTE_FIELDS = 9

U16_MAX = (1 << 16) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


@dataclass(frozen=True)
class LocalEndpoint:
    """The interface's own record."""

    public_key: str
    private_key: str
    local_port: int
    persistent_keepalive: bool


@dataclass(frozen=True)
class RemoteEndpoint:
    """A peer record."""

    public_key: str
    remote_ip: Optional[str]
    remote_port: Optional[int]
    local_ip: str
    local_subnet: str
    latest_handshake: int
    sent_bytes: int
    received_bytes: int
    persistent_keepalive: bool


Endpoint = Union[LocalEndpoint, RemoteEndpoint]
InterfaceTable = Mapping[str, Tuple[Endpoint, ...]]


def to_optional(token: str) -> Optional[str]:
    """Map the ``(none)`` placeholder to None."""
    if token == EMPTY:
        return None
    return token


def to_bool(token: str) -> bool:
    return token != "off"


def parse_unsigned(token: str, name: str, maximum: int, line_number: int) -> int:
    """Decode a non-negative decimal integer no larger than ``maximum``."""
    if not (token.isascii() and token.isdigit()):
        raise FormatError(f"{name} is not an unsigned integer: {token!r}", line_number)
    value = int(token)
    if value > maximum:
        raise FormatError(f"{name} out of range: {token}", line_number)
    return value


def parse_socket(token: str, line_number: int) -> Tuple[Optional[str], Optional[int]]:
    """Split ``ip:port`` (or ``[ipv6]:port``) into its parts.

    Returns ``(None, None)`` for the placeholder.
    """
    value = to_optional(token)
    if value is None:
        return None, None

    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise FormatError(f"endpoint is not ip:port: {token!r}", line_number)
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        raise FormatError(f"invalid endpoint address: {token!r}", line_number) from None

    return str(ip), parse_unsigned(port, "endpoint port", U16_MAX, line_number)


def parse_address(token: str, line_number: int) -> Tuple[str, str]:
    """Split ``ip/prefix`` into the ip and the text up to the next slash."""
    parts = token.split("/")
    if len(parts) < 2:
        raise FormatError(f"allowed ips is not ip/prefix: {token!r}", line_number)
    return parts[0], parts[1]


def _parse_local(tokens: List[str], line_number: int) -> LocalEndpoint:
    return LocalEndpoint(
        public_key=tokens[1],
        private_key=tokens[2],
        local_port=parse_unsigned(tokens[3], "listen port", U16_MAX, line_number),
        persistent_keepalive=to_bool(tokens[4]),
    )


def _parse_remote(tokens: List[str], line_number: int) -> RemoteEndpoint:
    if len(tokens) != REMOTE_FIELDS:
        raise FormatError(
            f"expected {LOCAL_FIELDS} or {REMOTE_FIELDS} fields, got {len(tokens)}",
            line_number,
        )

    remote_ip, remote_port = parse_socket(tokens[3], line_number)
    local_ip, local_subnet = parse_address(tokens[4], line_number)

    return RemoteEndpoint(
        public_key=tokens[1],
        remote_ip=remote_ip,
        remote_port=remote_port,
        local_ip=local_ip,
        local_subnet=local_subnet,
        latest_handshake=parse_unsigned(tokens[5], "latest handshake", U64_MAX, line_number),
        sent_bytes=parse_unsigned(tokens[6], "sent bytes", U128_MAX, line_number),
        received_bytes=parse_unsigned(tokens[7], "received bytes", U128_MAX, line_number),
        persistent_keepalive=to_bool(tokens[8]),
    )


def parse(text: str) -> InterfaceTable:
    """Parse a status dump into a read-only ``{interface: (endpoint, ...)}`` table.

    Raises:
        FormatError: if any line is malformed. Nothing is returned for the
            lines that did parse.
    """
    logger.debug(f"parse() called with {len(text)} bytes")
    interfaces: Dict[str, List[Endpoint]] = {}

    for line_number, line in enumerate(text.split("\n"), start=1):
        tokens = [t for t in line.rstrip("\r").split("\t") if t]
        if not tokens:
            continue
        logger.debug(f"line {line_number}: {tokens}")

        # Row shape is decided by field count alone
        if len(tokens) == LOCAL_FIELDS:
            endpoint = _parse_local(tokens, line_number)
        else:
            endpoint = _parse_remote(tokens, line_number)

        interfaces.setdefault(tokens[0], []).append(endpoint)

    logger.debug(f"parsed {len(interfaces)} interfaces")
    return MappingProxyType({name: tuple(eps) for name, eps in interfaces.items()})
