"""
WireGuard Exporter - Configuration
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_PORT = 9586


@dataclass
class ExporterConfig:
    """Exporter configuration."""
    # HTTP listener
    api_host: str = "0.0.0.0"
    api_port: int = DEFAULT_PORT

    # Status dump command
    wg_binary: str = "wg"
    prepend_sudo: bool = False
    command_timeout: int = 10

    # Interfaces to export (empty means all)
    interfaces: List[str] = field(default_factory=list)

    # WireGuard config files carrying "# friendly_name = ..." comments
    peer_config_files: List[str] = field(default_factory=list)

    verbose: bool = False


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _as_list(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [item.strip() for item in value if item and item.strip()]


def load_config(config_path: Optional[str] = None) -> ExporterConfig:
    """Load configuration from file or environment."""
    # Try config file first
    if config_path is None:
        config_path = os.environ.get("WG_EXPORTER_CONFIG", "config.json")

    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file) as f:
            data = json.load(f)

        return ExporterConfig(
            api_host=data.get("api_host", "0.0.0.0"),
            api_port=int(data.get("api_port", DEFAULT_PORT)),
            wg_binary=data.get("wg_binary", "wg"),
            prepend_sudo=_as_bool(data.get("prepend_sudo", False)),
            command_timeout=int(data.get("command_timeout", 10)),
            interfaces=_as_list(data.get("interfaces")),
            peer_config_files=_as_list(data.get("peer_config_files")),
            verbose=_as_bool(data.get("verbose", False)),
        )

    # Fall back to environment variables
    return ExporterConfig(
        api_host=os.environ.get("WG_EXPORTER_HOST", "0.0.0.0"),
        api_port=int(os.environ.get("WG_EXPORTER_PORT", str(DEFAULT_PORT))),
        wg_binary=os.environ.get("WG_EXPORTER_WG_BINARY", "wg"),
        prepend_sudo=_as_bool(os.environ.get("WG_EXPORTER_SUDO", "false")),
        command_timeout=int(os.environ.get("WG_EXPORTER_TIMEOUT", "10")),
        interfaces=_as_list(os.environ.get("WG_EXPORTER_INTERFACES")),
        peer_config_files=_as_list(os.environ.get("WG_EXPORTER_PEER_CONFIGS")),
        verbose=_as_bool(os.environ.get("WG_EXPORTER_VERBOSE", "false")),
    )
