# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import asyncio
import json
import logging
import pytest
from azure.iot.device import exceptions as device_exceptions
from azure.iot.device.aio import IoTHubDeviceClient, ProvisioningDeviceClient
from iotc import exceptions
from iotc.aio import IoTCClient
from iotc.models import (
    IOTCConnectType,
    IOTCConnectionErrorCode,
    IOTCEvents,
    OperationStatus,
    Result,
)

pytestmark = pytest.mark.asyncio
logging.basicConfig(level=logging.DEBUG)

fake_device_id = "thermostat-01"
fake_scope_id = "0ne0000FFFF"
fake_group_key = "c29tZSBncm91cCBrZXkgbWF0ZXJpYWw="
fake_derived_key = "ovESdzZg7gVz+jBC+e2GWyCyL9VUrYWrlrZHGTjZqjc="
fake_hostname = "iotc-1234.azure-devices.net"


@pytest.fixture
def hub_client(mocker):
    hub_client = mocker.MagicMock()
    hub_client.connected = True
    hub_client.connect = mocker.AsyncMock()
    hub_client.shutdown = mocker.AsyncMock()
    hub_client.send_message = mocker.AsyncMock()
    hub_client.patch_twin_reported_properties = mocker.AsyncMock()
    hub_client.send_method_response = mocker.AsyncMock()
    hub_client.get_twin = mocker.AsyncMock(
        return_value={"desired": {"$version": 1}, "reported": {}}
    )
    return hub_client


@pytest.fixture
def hub_client_class(mocker, hub_client):
    hub_client_class = mocker.MagicMock()
    hub_client_class.create_from_symmetric_key.return_value = hub_client
    hub_client_class.create_from_connection_string.return_value = hub_client
    return hub_client_class


@pytest.fixture
def provisioning_client(mocker, registration_result):
    provisioning_client = mocker.MagicMock()
    provisioning_client.register = mocker.AsyncMock(return_value=registration_result)
    return provisioning_client


@pytest.fixture
def provisioning_client_class(mocker, provisioning_client):
    provisioning_client_class = mocker.MagicMock()
    provisioning_client_class.create_from_symmetric_key.return_value = provisioning_client
    return provisioning_client_class


@pytest.fixture
def client(hub_client_class, provisioning_client_class):
    return IoTCClient(
        fake_device_id,
        fake_scope_id,
        IOTCConnectType.SYMM_KEY,
        fake_group_key,
        hub_client_class=hub_client_class,
        provisioning_client_class=provisioning_client_class,
    )


@pytest.mark.describe("IoTCClient (Asynchronous) - Instantiation")
class TestIoTCClientInstantiation(object):
    @pytest.mark.it("Uses the device library's asynchronous clients by default")
    async def test_default_classes(self):
        client = IoTCClient(fake_device_id, fake_scope_id, IOTCConnectType.SYMM_KEY, fake_group_key)

        assert client._hub_client_class is IoTHubDeviceClient
        assert client._provisioning_client_class is ProvisioningDeviceClient


@pytest.mark.describe("IoTCClient (Asynchronous) - .connect()")
class TestIoTCClientConnect(object):
    @pytest.mark.it("Registers, then connects to the assigned hub")
    async def test_connect(self, client, hub_client, hub_client_class, provisioning_client):
        assert await client.connect() == Result(200)

        assert provisioning_client.register.await_count == 1
        hub_kwargs = hub_client_class.create_from_symmetric_key.call_args[1]
        assert hub_kwargs["symmetric_key"] == fake_derived_key
        assert hub_kwargs["hostname"] == fake_hostname
        assert hub_client.connect.await_count == 1
        assert client.is_connected()

    @pytest.mark.it("Raises an IoTCConnectionError if the device is not assigned to a hub")
    async def test_not_assigned(self, client, hub_client_class, registration_result):
        registration_result.status = "disabled"

        with pytest.raises(exceptions.IoTCConnectionError) as e_info:
            await client.connect()
        assert e_info.value.code is IOTCConnectionErrorCode.PROVISIONING_FAILED
        assert hub_client_class.create_from_symmetric_key.call_count == 0

    @pytest.mark.it("Raises device library failures as IoT Central exceptions")
    async def test_connect_error(self, client, hub_client):
        hub_client.connect.side_effect = device_exceptions.CredentialError()

        with pytest.raises(exceptions.IoTCConnectionError) as e_info:
            await client.connect()
        assert e_info.value.code is IOTCConnectionErrorCode.BAD_CREDENTIALS

    @pytest.mark.it("Calls back with the outcome instead of raising when given a callback")
    @pytest.mark.parametrize("callback_kind", ["function", "coroutine function"])
    async def test_callback(self, mocker, client, hub_client, callback_kind):
        hub_client.connect.side_effect = device_exceptions.ConnectionFailedError()
        if callback_kind == "function":
            callback = mocker.MagicMock(return_value=None)
        else:
            callback = mocker.AsyncMock()

        assert await client.connect(callback) is None

        error, result = callback.call_args[0]
        assert isinstance(error, exceptions.IoTCConnectionError)
        assert error.code is IOTCConnectionErrorCode.COMMUNICATION_ERROR
        assert result is None

    @pytest.mark.it("Dispatches desired properties not yet acknowledged to async listeners")
    async def test_desired_sync(self, mocker, client, hub_client):
        hub_client.get_twin.return_value = {
            "desired": {"$version": 2, "fanSpeed": 5},
            "reported": {},
        }
        listener = mocker.AsyncMock()
        client.on(IOTCEvents.PROPERTIES, listener)

        await client.connect()

        assert listener.await_count == 1
        prop = listener.await_args[0][0]
        assert (prop.name, prop.value, prop.version) == ("fanSpeed", 5, 2)

    @pytest.mark.it("Raises an IoTCClientError after the client has been disconnected")
    async def test_after_disconnect(self, client, hub_client):
        await client.connect()
        assert await client.disconnect() == Result(200)

        assert hub_client.shutdown.await_count == 1
        with pytest.raises(exceptions.IoTCClientError):
            await client.connect()

    @pytest.mark.it("Calls back with an IoTCClientError after the client has been disconnected")
    async def test_after_disconnect_callback(self, mocker, client, hub_client):
        await client.connect()
        await client.disconnect()
        callback = mocker.MagicMock(return_value=None)

        assert await client.connect(callback) is None

        error, result = callback.call_args[0]
        assert isinstance(error, exceptions.IoTCClientError)
        assert result is None
        assert hub_client.connect.await_count == 1

    @pytest.mark.it("Guards connecting with an asyncio lock rather than a thread lock")
    async def test_connect_lock(self, client):
        await client.connect()

        assert isinstance(client._connect_lock, asyncio.Lock)
        assert not hasattr(client, "_client_lock")


@pytest.mark.describe("IoTCClient (Asynchronous) - Send operations")
class TestIoTCClientSend(object):
    @pytest.mark.it(".send_telemetry() sends a JSON message tagged with its interface")
    async def test_send_telemetry(self, client, hub_client):
        await client.connect()
        assert await client.send_telemetry({"temperature": 21.5}, "sensor") == Result(200)

        message = hub_client.send_message.await_args[0][0]
        assert json.loads(message.data) == {"temperature": 21.5}
        assert message.custom_properties == {"$.sub": "sensor"}

    @pytest.mark.it(".send_telemetry() raises an IoTCConnectionError before the client connects")
    async def test_not_connected(self, client):
        with pytest.raises(exceptions.IoTCConnectionError):
            await client.send_telemetry({"temperature": 21.5})

    @pytest.mark.it(".send_telemetry() calls back with the ValueError for an unknown interface")
    async def test_unknown_interface_callback(self, mocker, client, hub_client, capability_model):
        await client.connect()
        client.set_capability_model(capability_model)
        callback = mocker.AsyncMock()

        result = await client.send_telemetry({"temperature": 21.5}, "thermostat", callback=callback)

        assert result is None
        error, result = callback.call_args[0]
        assert isinstance(error, ValueError)
        assert result is None
        assert hub_client.send_message.await_count == 0

    @pytest.mark.it(".send_property() calls back with the TypeError for a payload that is not a dict")
    async def test_not_dict_callback(self, mocker, client, hub_client):
        await client.connect()
        callback = mocker.MagicMock(return_value=None)

        assert await client.send_property("1.0.2", callback=callback) is None

        assert isinstance(callback.call_args[0][0], TypeError)
        assert hub_client.patch_twin_reported_properties.await_count == 0

    @pytest.mark.it(".send_property() patches the reported properties")
    async def test_send_property(self, client, hub_client):
        await client.connect()
        assert await client.send_property({"firmwareVersion": "1.0.2"}, "deviceInfo") == Result(
            200
        )

        assert hub_client.patch_twin_reported_properties.await_args[0][0] == {
            "deviceInfo": {"__t": "c", "firmwareVersion": "1.0.2"}
        }

    @pytest.mark.it(".send_state() and .send_event() are deprecated")
    @pytest.mark.parametrize("method", ["send_state", "send_event"])
    async def test_deprecated(self, client, hub_client, method):
        await client.connect()
        with pytest.warns(DeprecationWarning):
            coro = getattr(client, method)({"status": "on"})
        assert await coro == Result(200)


@pytest.mark.describe("IoTCClient (Asynchronous) - Handlers")
class TestIoTCClientHandlers(object):
    @pytest.mark.it("Dispatches commands to listeners, which can acknowledge them")
    async def test_command(self, mocker, client, hub_client, method_request):
        await client.connect()
        commands = []

        async def listener(command):
            commands.append(command)
            await command.acknowledge(OperationStatus.SUCCESS, "Rebooting")

        client.on(IOTCEvents.COMMANDS, listener)

        await hub_client.on_method_request_received(method_request("reboot", None, "9"))

        assert commands[0].name == "reboot"
        method_response = hub_client.send_method_response.await_args[0][0]
        assert (method_response.request_id, method_response.status) == ("9", 200)
        assert method_response.payload == "Rebooting"

    @pytest.mark.it("Responds with 404 when nothing listens for a command")
    async def test_unhandled_command(self, client, hub_client, method_request):
        await client.connect()

        await hub_client.on_method_request_received(method_request("reboot"))

        assert hub_client.send_method_response.await_args[0][0].status == 404

    @pytest.mark.it("Dispatches desired properties, which can be reported back")
    async def test_property(self, mocker, client, hub_client):
        await client.connect()
        listener = mocker.MagicMock(return_value=None)
        client.on(IOTCEvents.PROPERTIES, listener)

        await hub_client.on_twin_desired_properties_patch_received({"$version": 6, "fanSpeed": 3})
        prop = listener.call_args[0][0]
        await prop.report(OperationStatus.FAILURE)

        assert hub_client.patch_twin_reported_properties.await_args[0][0] == {
            "fanSpeed": {"value": 3, "ac": 500, "av": 6}
        }

    @pytest.mark.it("Logs listener failures and keeps dispatching")
    async def test_listener_raises(self, mocker, client, hub_client, unexpected_exception):
        await client.connect()
        failing = mocker.AsyncMock(side_effect=unexpected_exception)
        listener = mocker.MagicMock(return_value=None)
        client.on(IOTCEvents.CONNECTION_STATUS, failing)
        client.on(IOTCEvents.CONNECTION_STATUS, listener)

        await hub_client.on_connection_state_change()

        assert failing.await_count == 1
        assert listener.call_args == mocker.call(True)
