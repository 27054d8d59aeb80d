"""WireGuard Exporter - Prometheus Metrics Renderer"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader

from ..parser.wireguard import Endpoint, RemoteEndpoint

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


@dataclass(frozen=True)
class MetricFamily:
    name: str
    type: str
    help: str


SENT_BYTES_TOTAL = MetricFamily(
    "wireguard_sent_bytes_total", "counter", "Bytes sent to the peer"
)
RECEIVED_BYTES_TOTAL = MetricFamily(
    "wireguard_received_bytes_total", "counter", "Bytes received from the peer"
)
LATEST_HANDSHAKE_SECONDS = MetricFamily(
    "wireguard_latest_handshake_seconds", "gauge", "Seconds from the last handshake"
)

# "inteface" is the label name existing dashboards and alerts query on
INTERFACE_LABEL = "inteface"


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_labels(labels: Sequence[Tuple[str, str]]) -> str:
    """Format label pairs as ``{k="v",...}``, keeping their order."""
    inner = ",".join(f'{key}="{escape_label_value(value)}"' for key, value in labels)
    return "{" + inner + "}"


class MetricsRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(loader=FileSystemLoader(str(template_dir)), trim_blocks=True, lstrip_blocks=True)

    def _labels(
        self,
        interface: str,
        endpoint: RemoteEndpoint,
        names: Optional[Mapping[str, Optional[str]]],
    ) -> List[Tuple[str, str]]:
        labels = [
            (INTERFACE_LABEL, interface),
            ("public_key", endpoint.public_key),
            ("local_ip", endpoint.local_ip),
            ("local_subnet", endpoint.local_subnet),
        ]

        # Only add friendly_name when the lookup has a meaningful value
        if names is not None:
            friendly_name = names.get(endpoint.public_key)
            if friendly_name:
                labels.append(("friendly_name", friendly_name))

        return labels

    def render(
        self,
        interfaces: Mapping[str, Sequence[Endpoint]],
        names: Optional[Mapping[str, Optional[str]]] = None,
    ) -> str:
        """Render the interface table as Prometheus exposition text.

        Samples are grouped per metric family. The table is walked once,
        filling one buffer per family; the buffers are emitted in fixed
        family order afterwards.
        """
        sent_bytes: List[str] = []
        received_bytes: List[str] = []
        latest_handshake: List[str] = []

        for interface, endpoints in interfaces.items():
            for endpoint in endpoints:
                # Only peers are exported
                if not isinstance(endpoint, RemoteEndpoint):
                    continue

                labels = format_labels(self._labels(interface, endpoint, names))
                sent_bytes.append(f"{SENT_BYTES_TOTAL.name}{labels} {endpoint.sent_bytes}")
                received_bytes.append(f"{RECEIVED_BYTES_TOTAL.name}{labels} {endpoint.received_bytes}")
                latest_handshake.append(f"{LATEST_HANDSHAKE_SECONDS.name}{labels} {endpoint.latest_handshake}")

        logger.debug(f"Rendered {len(sent_bytes)} peers")

        return self.env.get_template("metrics.prom.j2").render(
            blocks=[
                (SENT_BYTES_TOTAL, sent_bytes),
                (RECEIVED_BYTES_TOTAL, received_bytes),
                (LATEST_HANDSHAKE_SECONDS, latest_handshake),
            ]
        )


def render(
    interfaces: Mapping[str, Sequence[Endpoint]],
    names: Optional[Mapping[str, Optional[str]]] = None,
) -> str:
    """Render with a default ``MetricsRenderer``."""
    return MetricsRenderer().render(interfaces, names)
