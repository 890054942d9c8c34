"""paho callbacks -> bridge events."""

import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock

import paho.mqtt.client as mqtt
import pytest

from mqtt_influx.core.exceptions import ProtocolError
from mqtt_influx.protocols import (
    ConnectionState,
    InboundMessage,
    LinkEvent,
    MQTTClient,
    ProtocolClientConfig,
    TransportFault,
)
from tests.conftest import build_config


SUCCESS = SimpleNamespace(is_failure=False, value=0)
FAILURE = SimpleNamespace(is_failure=True, value=128)


@pytest.fixture
def client_config() -> ProtocolClientConfig:
    return ProtocolClientConfig(host="localhost", port=1883, topic="sensors/#", client_id="test-bridge")


async def _next(client: MQTTClient):
    return await asyncio.wait_for(client.next_event(), timeout=1.0)


def test_config_from_bridge_config():
    config = build_config([], mqtt_client_id="bridge-7")
    params = ProtocolClientConfig.from_bridge_config(config)

    assert (params.host, params.port, params.topic) == ("localhost", 1883, "sensors/kitchen")
    assert params.client_id == "bridge-7"
    assert params.qos == 1
    assert params.keepalive == 5


@pytest.mark.asyncio
async def test_message_becomes_inbound_event(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()

    client._on_message(None, None, SimpleNamespace(topic="sensors/a", payload=b'{"t": 1}', qos=1, retain=0))

    event = await _next(client)
    assert event == InboundMessage(topic="sensors/a", payload=b'{"t": 1}', qos=1, retain=False)


@pytest.mark.asyncio
async def test_unexpected_disconnect_is_transport_fault(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()

    client._on_disconnect(None, None, None, FAILURE)

    event = await _next(client)
    assert isinstance(event, TransportFault)
    assert isinstance(event.error, ProtocolError)
    assert client.connection_state is ConnectionState.RECONNECTING


@pytest.mark.asyncio
async def test_clean_disconnect_emits_nothing(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()

    client._on_disconnect(None, None, None, SUCCESS)
    await asyncio.sleep(0)

    assert client._events.empty()
    assert client.connection_state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_reconnect_resubscribes(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()
    client.client = MagicMock()
    client.client.subscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 7)
    client.subscribed = True

    client._on_connect(None, None, {}, SUCCESS)

    client.client.subscribe.assert_called_once_with("sensors/#", 1)
    assert isinstance(await _next(client), LinkEvent)
    assert client.is_connected()


@pytest.mark.asyncio
async def test_refused_reconnect_is_transport_fault(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()
    client.subscribed = True

    client._on_connect(None, None, {}, FAILURE)

    assert isinstance(await _next(client), TransportFault)
    assert client.connection_state is ConnectionState.ERROR


@pytest.mark.asyncio
async def test_refused_subscription_is_transport_fault(client_config):
    client = MQTTClient(client_config)
    client._bind_loop()

    client._on_subscribe(None, None, 1, [FAILURE])

    assert isinstance(await _next(client), TransportFault)


@pytest.mark.asyncio
async def test_start_rejects_missing_topic():
    client = MQTTClient(ProtocolClientConfig(host="localhost", port=1883, topic="", client_id="x"))

    with pytest.raises(ProtocolError, match="topic is required"):
        await client.start()

    assert client.connection_state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_next_event_before_start(client_config):
    with pytest.raises(ProtocolError, match="not been started"):
        await MQTTClient(client_config).next_event()


@pytest.mark.asyncio
async def test_full_event_queue_drops_and_logs(caplog):
    client = MQTTClient(ProtocolClientConfig(
        host="localhost", port=1883, topic="sensors/#", client_id="test-bridge", queue_size=2,
    ))
    client._bind_loop()

    for n in range(3):
        client._on_message(None, None, SimpleNamespace(topic="sensors/a", payload=str(n).encode(), qos=1, retain=0))
    await asyncio.sleep(0)

    assert client._events.qsize() == 2
    assert (await _next(client)).payload == b"0"
    assert (await _next(client)).payload == b"1"
    assert "Event queue full" in caplog.text
