"""
WireGuard Exporter - Peer Friendly Names

Reads friendly names from WireGuard configuration files. A peer is named
by a comment inside its [Peer] section:

    [Peer]
    # friendly_name = laptop
    PublicKey = 2S7mA0vEMethCNQrJpJKE81/JmhgtB+tHHLYQhgM6kk=
    AllowedIPs = 10.70.0.2/32
"""
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..errors import ExporterError, FormatError

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^\[(\w+)\]$")
FRIENDLY_NAME_RE = re.compile(r"^#\s*friendly_name\s*=\s*(.*)$")
PUBLIC_KEY_RE = re.compile(r"^PublicKey\s*=\s*(\S+)$", re.IGNORECASE)


def parse_peer_names(text: str) -> Dict[str, Optional[str]]:
    """Map each peer's public key to its friendly name (or None)."""
    names: Dict[str, Optional[str]] = {}

    in_peer = False
    public_key: Optional[str] = None
    friendly_name: Optional[str] = None
    section_line = 0

    def close_section():
        if not in_peer:
            return
        if public_key is None:
            raise FormatError("[Peer] section without PublicKey", section_line)
        names[public_key] = friendly_name

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        section = SECTION_RE.match(line)
        if section:
            close_section()
            in_peer = section.group(1).lower() == "peer"
            public_key = None
            friendly_name = None
            section_line = line_number
            continue

        if not in_peer:
            continue

        match = FRIENDLY_NAME_RE.match(line)
        if match:
            friendly_name = match.group(1).strip() or None
            continue

        match = PUBLIC_KEY_RE.match(line)
        if match:
            public_key = match.group(1)

    close_section()
    return names


def load_peer_names(paths: Iterable[str]) -> Dict[str, Optional[str]]:
    """Load and merge friendly names from several config files.

    Later files override earlier ones for the same public key.
    """
    names: Dict[str, Optional[str]] = {}
    for path in paths:
        try:
            text = Path(path).read_text()
        except OSError as e:
            raise ExporterError(f"Cannot read peer config {path}: {e}") from e

        try:
            entries = parse_peer_names(text)
        except FormatError as e:
            raise FormatError(f"{path}: {e}") from e

        for public_key in entries.keys() & names.keys():
            logger.warning(f"Peer {public_key} defined again in {path}")
        names.update(entries)
        logger.debug(f"Loaded {len(entries)} peers from {path}")

    return names
