"""
WireGuard Exporter - Server API Tests

Tests for the exporter HTTP endpoints.
"""
import pytest
from unittest.mock import AsyncMock, patch

from wireguard_exporter.api.server import EXECUTOR_KEY, create_app
from wireguard_exporter.errors import CommandError

PEER_CONF = """\
[Peer]
# friendly_name = kevin
PublicKey = 2S7mA0vEMethCNQrJpJKE81/JmhgtB+tHHLYQhgM6kk=
AllowedIPs = 10.70.0.2/32
"""


class TestHealthEndpoint:
    """Tests for the / health endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_success(self, aiohttp_client, exporter_config):
        """Test health check returns ok status."""
        exporter_config.interfaces = ["wg0"]
        client = await aiohttp_client(create_app(exporter_config))

        resp = await client.get("/")
        assert resp.status == 200

        data = await resp.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert data["interfaces"] == ["wg0"]


class TestMetricsEndpoint:
    """Tests for the /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_success(self, aiohttp_client, exporter_config, dump_text):
        """Test metrics are rendered from the dump."""
        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(return_value=dump_text)):
            client = await aiohttp_client(app)

            resp = await client.get("/metrics")

            assert resp.status == 200
            assert resp.headers["Content-Type"].startswith("text/plain; version=0.0.4")
            body = await resp.text()
            assert body.startswith("# HELP wireguard_sent_bytes_total Bytes sent to the peer\n")
            assert "wireguard_latest_handshake_seconds{" in body
            assert "friendly_name" not in body

    @pytest.mark.asyncio
    async def test_metrics_with_peer_names(self, aiohttp_client, exporter_config, dump_text, tmp_path):
        """Test friendly names are loaded from peer config files."""
        conf = tmp_path / "wg0.conf"
        conf.write_text(PEER_CONF)
        exporter_config.peer_config_files = [str(conf)]

        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(return_value=dump_text)):
            client = await aiohttp_client(app)

            resp = await client.get("/metrics")

            assert resp.status == 200
            body = await resp.text()
            assert body.count('friendly_name="kevin"') == 3

    @pytest.mark.asyncio
    async def test_metrics_command_failure(self, aiohttp_client, exporter_config):
        """Test a failing dump command returns 500."""
        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(side_effect=CommandError("wg not found"))):
            client = await aiohttp_client(app)

            resp = await client.get("/metrics")

            assert resp.status == 500
            assert "wg not found" in await resp.text()

    @pytest.mark.asyncio
    async def test_metrics_malformed_dump(self, aiohttp_client, exporter_config):
        """Test an unparsable dump returns 500."""
        bad = "wg0\tkey\t(none)\t(none)\t10.0.0.2/32\tnever\t0\t0\toff\n"
        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(return_value=bad)):
            client = await aiohttp_client(app)

            resp = await client.get("/metrics")

            assert resp.status == 500

    @pytest.mark.asyncio
    async def test_metrics_runs_subprocess(self, aiohttp_client, exporter_config, mock_subprocess):
        """Test the scrape runs the wg dump command."""
        client = await aiohttp_client(create_app(exporter_config))

        resp = await client.get("/metrics")

        assert resp.status == 200
        mock_subprocess.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_metrics_missing_peer_config(self, aiohttp_client, exporter_config, dump_text, tmp_path):
        """Test an unreadable peer config file returns 500."""
        exporter_config.peer_config_files = [str(tmp_path / "missing.conf")]

        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(return_value=dump_text)):
            client = await aiohttp_client(app)

            resp = await client.get("/metrics")

            assert resp.status == 500
            assert "missing.conf" in await resp.text()

    @pytest.mark.asyncio
    async def test_metrics_loads_names_off_loop(self, aiohttp_client, exporter_config, dump_text):
        """Test peer config files are read through the loop's executor."""
        exporter_config.peer_config_files = ["/etc/wireguard/wg0.conf"]
        names = {"2S7mA0vEMethCNQrJpJKE81/JmhgtB+tHHLYQhgM6kk=": "kevin"}

        app = create_app(exporter_config)
        with patch.object(app[EXECUTOR_KEY], "dump", AsyncMock(return_value=dump_text)):
            with patch("wireguard_exporter.api.server.load_peer_names", return_value=names) as mock_load:
                client = await aiohttp_client(app)

                resp = await client.get("/metrics")

                assert resp.status == 200
                assert 'friendly_name="kevin"' in await resp.text()
                mock_load.assert_called_once_with(["/etc/wireguard/wg0.conf"])
