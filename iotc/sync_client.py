# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the user-facing synchronous IoT Central device client.
"""
from __future__ import annotations  # Needed for annotation bug < 3.10
import logging
import threading
import deprecation
from azure.iot.device import IoTHubDeviceClient, ProvisioningDeviceClient
from typing import Any, Callable, Dict, Optional
from iotc import constant
from .abstract_client import AbstractIoTCClient
from .common import handle_exceptions
from .common.callback_adapter import run_with_callback
from .models import IOTCEvents, Result

logger = logging.getLogger(__name__)

SendCallback = Callable[[Optional[Exception], Optional[Result]], None]


class IoTCClient(AbstractIoTCClient):
    """A synchronous IoT Central device client.

    Every operation blocks until it completes and returns a :class:`iotc.Result`, unless a
    ``callback`` is given: the operation then runs in the background, the callback is called
    with ``(error, result)`` once it completes, and the call returns None.
    """

    _hub_client_class = IoTHubDeviceClient
    _provisioning_client_class = ProvisioningDeviceClient

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._client_lock = threading.Lock()

    ##############
    # CONNECTION #
    ##############
    def connect(self, callback: Optional[SendCallback] = None) -> Optional[Result]:
        """Provision the device if needed, then connect it to its IoT Hub.

        :param callback: Optional function called with ``(error, result)`` on completion.

        :raises: :class:`iotc.exceptions.IoTCConnectionError` if registration or connection
            fails. The error's code tells why.
        :raises: :class:`iotc.exceptions.IoTCClientError` if the client has been disconnected
            or there is an unexpected failure.
        """
        return run_with_callback(self._connect, callback)

    def _connect(self) -> Result:
        self._check_usable()
        with self._client_lock:
            if self._hub_client is None:
                device_key = self._device_key()
                if self._requires_provisioning():
                    logger.info("Registering with Provisioning Service...")
                    provisioning_client = self._create_provisioning_client(device_key)
                    registration_result = provisioning_client.register()
                    self._on_registration_complete(registration_result, device_key)
                self._hub_client = self._create_hub_client(device_key)

            logger.info("Connecting to Hub...")
            self._hub_client.connect()
            logger.info("Successfully connected to Hub")

        self._sync_desired_properties()
        return Result(200)

    def _sync_desired_properties(self) -> None:
        try:
            twin = self._hub_client.get_twin()
        except Exception:
            logger.warning(
                "Could not retrieve twin, skipping desired properties sync", exc_info=True
            )
            return
        pending = self._pending_desired_properties(twin)
        if len(pending) > 1:
            logger.info("Dispatching desired properties received while offline")
            self._on_twin_patch_received(pending)

    def disconnect(self, callback: Optional[SendCallback] = None) -> Optional[Result]:
        """Disconnect the device. The client cannot be reused afterwards.

        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return run_with_callback(self._disconnect, callback)

    def _disconnect(self) -> Result:
        logger.info("Disconnecting from Hub...")
        with self._client_lock:
            self._shut_down = True
            if self._hub_client is not None:
                self._hub_client.shutdown()
        logger.info("Successfully disconnected from Hub")
        return Result(200)

    ########
    # SEND #
    ########
    def send_telemetry(
        self,
        payload: Any,
        interface_name: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None,
        timestamp=None,
        callback: Optional[SendCallback] = None,
    ) -> Optional[Result]:
        """Send a telemetry message, optionally on behalf of an interface.

        :param payload: JSON compatible message content.
        :param str interface_name: The interface the telemetry belongs to (OPTIONAL)
        :param dict properties: Custom message properties (OPTIONAL)
        :param timestamp: Creation time to set instead of the time of sending, as an ISO 8601
            string or a datetime (OPTIONAL)
        :param callback: Optional function called with ``(error, result)`` on completion.

        :raises: ValueError if the interface is not known to the client.
        :raises: :class:`iotc.exceptions.IoTCConnectionError` if the client is not connected.
        """
        return run_with_callback(
            self._send_telemetry, callback, payload, interface_name, properties, timestamp
        )

    @deprecation.deprecated(
        deprecated_in="2.0.0",
        current_version=constant.VERSION,
        details="We recommend that you use .send_telemetry() instead",
    )
    def send_state(
        self, payload: Any, timestamp=None, callback: Optional[SendCallback] = None
    ) -> Optional[Result]:
        """Send a state message.

        :param payload: JSON compatible state content.
        :param timestamp: Creation time to set instead of the time of sending (OPTIONAL)
        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return run_with_callback(self._send_telemetry, callback, payload, timestamp=timestamp)

    @deprecation.deprecated(
        deprecated_in="2.0.0",
        current_version=constant.VERSION,
        details="We recommend that you use .send_telemetry() instead",
    )
    def send_event(
        self, payload: Any, timestamp=None, callback: Optional[SendCallback] = None
    ) -> Optional[Result]:
        """Send an event message.

        :param payload: JSON compatible event content.
        :param timestamp: Creation time to set instead of the time of sending (OPTIONAL)
        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return run_with_callback(self._send_telemetry, callback, payload, timestamp=timestamp)

    def send_property(
        self,
        payload: Dict[str, Any],
        interface_name: Optional[str] = None,
        callback: Optional[SendCallback] = None,
    ) -> Optional[Result]:
        """Report properties, optionally on behalf of an interface.

        :param dict payload: Mapping of property names to values.
        :param str interface_name: The interface the properties belong to (OPTIONAL)
        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return run_with_callback(self._send_property, callback, payload, interface_name)

    def _send_telemetry(
        self, payload, interface_name=None, properties=None, timestamp=None
    ) -> Result:
        self._validate_interface(interface_name)
        message = self._create_message(payload, interface_name, properties, timestamp)
        return self._send_message(message)

    def _send_property(self, payload, interface_name=None) -> Result:
        patch = self._create_reported_patch(payload, interface_name)
        return self._patch_reported_properties(patch)

    def _send_message(self, message) -> Result:
        self._check_connected()
        logger.info("Sending message to Hub...")
        logger.debug("Message content: {}".format(message.data))
        self._hub_client.send_message(message)
        logger.info("Successfully sent message to Hub")
        return Result(200)

    def _patch_reported_properties(self, patch) -> Result:
        self._check_connected()
        logger.info("Patching reported properties...")
        logger.debug("Reported properties patch: {}".format(patch))
        self._hub_client.patch_twin_reported_properties(patch)
        logger.info("Successfully patched reported properties")
        return Result(200)

    def _send_method_response(self, method_response) -> Result:
        self._check_connected()
        logger.info("Sending response for command {}".format(method_response.request_id))
        self._hub_client.send_method_response(method_response)
        logger.info("Successfully sent command response")
        return Result(200)

    #############
    # RESPONSES #
    #############
    def _report_property(self, prop, status, message, callback):
        return run_with_callback(self._send_property_report, callback, prop, status, message)

    def _acknowledge_command(self, command, status, message, callback):
        return run_with_callback(
            self._send_command_response, callback, command, status, message
        )

    def _update_command(self, command, status, message, callback):
        return run_with_callback(
            self._send_command_update, callback, command, status, message
        )

    def _send_property_report(self, prop, status, message) -> Result:
        patch = self._create_property_report(prop, status, message)
        return self._patch_reported_properties(patch)

    def _send_command_response(self, command, status, message) -> Result:
        method_response = self._create_method_response(command, status, message)
        return self._send_method_response(method_response)

    def _send_command_update(self, command, status, message) -> Result:
        update = self._create_command_update_message(command, status, message)
        return self._send_message(update)

    ############
    # HANDLERS #
    ############
    def _on_twin_patch_received(self, patch) -> None:
        logger.debug("Desired properties patch received: {}".format(patch))
        for prop in self._create_properties(patch):
            handlers = self._property_handlers(prop)
            if not handlers:
                logger.info("No listener for property {}".format(prop.name))
            for handler in handlers:
                try:
                    handler(prop)
                except Exception as e:
                    handle_exceptions.handle_background_exception(e)

    def _on_method_request_received(self, method_request) -> None:
        logger.info("Command {} received".format(method_request.name))
        command, handlers = self._create_command(method_request)
        if not handlers:
            method_response = self._create_unhandled_command_response(command)
            try:
                self._send_method_response(method_response)
            except Exception as e:
                handle_exceptions.handle_background_exception(e)
            return
        for handler in handlers:
            try:
                handler(command)
            except Exception as e:
                handle_exceptions.handle_background_exception(e)

    def _on_connection_state_change(self) -> None:
        connected = self.is_connected()
        logger.info("Connection State - {}".format("Connected" if connected else "Disconnected"))
        for handler in list(self._listeners[IOTCEvents.CONNECTION_STATUS]):
            try:
                handler(connected)
            except Exception as e:
                handle_exceptions.handle_background_exception(e)
