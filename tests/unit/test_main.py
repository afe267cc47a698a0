"""Unit tests for the service entry point."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from order_pipeline.domain.exceptions import BrokerConnectionException, ConfigurationException
from order_pipeline.domain.models import ServiceConfiguration
from order_pipeline.main import main, run


@pytest.fixture
def nats_config():
    return ServiceConfiguration(
        broker_url="nats://unreachable:4222",
        connect_retry_interval=0.0,
    )


@pytest.mark.asyncio
class TestRun:
    """Test startup sequencing."""

    async def test_unreachable_broker_binds_no_listener(self, nats_config):
        """Test a failed connection exits 1 before any HTTP server exists."""
        with (
            patch("order_pipeline.infrastructure.nats_broker.nats") as mock_nats,
            patch("order_pipeline.main.uvicorn") as mock_uvicorn,
        ):
            mock_nats.connect = AsyncMock(side_effect=OSError("connection refused"))

            exit_code = await run(nats_config)

        assert exit_code == 1
        assert mock_nats.connect.await_count == 10
        mock_uvicorn.Server.assert_not_called()
        mock_uvicorn.Config.assert_not_called()

    async def test_serves_after_consumers_start(self, memory_config):
        """Test the server starts once the pipeline is consuming, then the broker closes."""
        with (
            patch("order_pipeline.main.uvicorn") as mock_uvicorn,
            patch("order_pipeline.main.InfrastructureFactory.create_broker") as create_broker,
        ):
            broker = AsyncMock()
            create_broker.return_value = broker
            mock_uvicorn.Server.return_value.serve = AsyncMock()

            exit_code = await run(memory_config)

        assert exit_code == 0
        broker.connect.assert_awaited_once()
        assert broker.subscribe.await_count == 3
        mock_uvicorn.Server.return_value.serve.assert_awaited_once()
        broker.close.assert_awaited_once()

    async def test_broker_closed_when_server_fails(self, memory_config):
        """Test the broker is released even if serving fails."""
        with (
            patch("order_pipeline.main.uvicorn") as mock_uvicorn,
            patch("order_pipeline.main.InfrastructureFactory.create_broker") as create_broker,
        ):
            broker = AsyncMock()
            create_broker.return_value = broker
            mock_uvicorn.Server.return_value.serve = AsyncMock(side_effect=OSError("port in use"))

            with pytest.raises(OSError):
                await run(memory_config)

        broker.close.assert_awaited_once()


class TestMain:
    """Test the console entry point."""

    def test_invalid_configuration_exits_1(self):
        """Test a configuration error stops the process."""
        config_port = MagicMock()
        config_port.load_configuration.side_effect = ConfigurationException("bad PORT")

        with (
            patch(
                "order_pipeline.main.InfrastructureFactory.create_configuration_port",
                return_value=config_port,
            ),
            patch("order_pipeline.main.setup_logging"),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 1

    def test_broker_failure_exits_1(self, nats_config):
        """Test the process exit status follows run()."""
        config_port = MagicMock()
        config_port.load_configuration.return_value = nats_config

        with (
            patch(
                "order_pipeline.main.InfrastructureFactory.create_configuration_port",
                return_value=config_port,
            ),
            patch("order_pipeline.main.setup_logging"),
            patch("order_pipeline.main.run", new=AsyncMock(return_value=1)),
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 1


def test_broker_connection_exception_carries_attempts():
    """Test the fatal startup error records how many attempts were made."""
    exc = BrokerConnectionException("unreachable", attempts=10)

    assert exc.attempts == 10
    assert exc.error_code == "BROKER_CONNECTION_ERROR"
