# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the abstract IoT Central client shared by the synchronous and
asynchronous clients.
"""
from __future__ import annotations  # Needed for annotation bug < 3.10
import abc
import datetime
import json
import logging
from azure.iot.device import Message, MethodResponse
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from iotc import constant, capability_model, credentials, exceptions, log
from .config import IoTCClientConfig
from .models import (
    CommonInterface,
    HttpProxyOptions,
    InterfaceMap,
    IoTCCommand,
    IoTCProperty,
    IOTCConnectType,
    IOTCConnectionErrorCode,
    IOTCEvents,
    OperationStatus,
)
from .models.enums import coerce_enum
from .models.properties import create_reported_properties_patch, is_component

logger = logging.getLogger(__name__)


def _validate_kwargs(**kwargs) -> None:
    """Helper function to validate user provided kwargs.
    Raises TypeError if an invalid option has been provided"""
    valid_kwargs = [
        "model_id",
        "global_endpoint",
        "transport",
        "proxy_options",
        "keep_alive",
    ]

    for kwarg in kwargs:
        if kwarg not in valid_kwargs:
            raise TypeError("Unsupported keyword argument: '{}'".format(kwarg))


def _status_code(status: Union[OperationStatus, int]) -> int:
    if isinstance(status, bool):
        raise TypeError("Invalid type for 'status'")
    if isinstance(status, int):
        return status
    return coerce_enum(OperationStatus, status).value


def _format_timestamp(timestamp: Union[str, datetime.datetime]) -> str:
    if isinstance(timestamp, datetime.datetime):
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return timestamp.isoformat() + "Z"
    if isinstance(timestamp, str):
        return timestamp
    raise TypeError("Timestamp must be an ISO 8601 string or a datetime")


def _split_method_name(method_name: str) -> Tuple[Optional[str], str]:
    tokens = method_name.split(constant.COMMAND_NAME_SEPARATOR, 1)
    if len(tokens) > 1:
        return tokens[0], tokens[1]
    return None, tokens[0]


class AbstractIoTCClient(abc.ABC):
    """A superclass representing a generic IoT Central device client.
    This class needs to be extended for the synchronous and asynchronous clients.
    """

    # Overridden in child classes with the device library's sync or async clients
    _hub_client_class: Any = None
    _provisioning_client_class: Any = None

    def __init__(
        self,
        device_id: str,
        scope_id: Optional[str],
        cred_type: Union[IOTCConnectType, str],
        key_or_cert: Any,
        hub_client_class: Any = None,
        provisioning_client_class: Any = None,
        **kwargs,
    ) -> None:
        """Initializer for an IoT Central client.

        :param str device_id: The id of the device.
        :param str scope_id: The ID scope of the IoT Central application.
        :param cred_type: How the device authenticates.
        :type cred_type: :class:`iotc.IOTCConnectType` or str
        :param key_or_cert: The group key, device key, connection string, or X509 details.
        :param hub_client_class: The IoT Hub device client class to connect with. Defaults to
            the device library's IoTHubDeviceClient.
        :param provisioning_client_class: The provisioning client class to register with.
            Defaults to the device library's ProvisioningDeviceClient.

        :param str model_id: The id of the device model.
        :param str global_endpoint: The hostname of the provisioning service.
        :param transport: The transport protocol (MQTT or MQTT over websockets).
        :param proxy_options: Details of proxy configuration.
        :param int keep_alive: Maximum period in seconds between MQTT communications.

        :raises: TypeError if given an unsupported parameter.
        :raises: ValueError if a value is missing or not recognised.
        """
        _validate_kwargs(**kwargs)
        self._config = IoTCClientConfig(device_id, scope_id, cred_type, key_or_cert, **kwargs)
        if hub_client_class is not None:
            self._hub_client_class = hub_client_class
        if provisioning_client_class is not None:
            self._provisioning_client_class = provisioning_client_class

        self._interfaces: InterfaceMap = {}
        self._listeners: Dict[IOTCEvents, List[Callable]] = {event: [] for event in IOTCEvents}
        self._hub_client = None
        self._hostname: Optional[str] = None
        self._connection_string: Optional[str] = None
        self._shut_down = False

    ##################
    # CONFIGURATION #
    ##################
    @property
    def interfaces(self) -> InterfaceMap:
        """The interfaces known to the client, keyed by name"""
        return dict(self._interfaces)

    @property
    def device_id(self) -> Optional[str]:
        return self._config.device_id

    def _check_configurable(self) -> None:
        if self._hub_client is not None or self._shut_down:
            raise exceptions.IoTCClientError("Cannot change settings once the client has connected")

    def get_connection_string(self) -> Optional[str]:
        """Get the connection string of the assigned IoT Hub.

        :returns: The connection string, or None if the device has not been provisioned yet.
        """
        return self._connection_string

    def set_protocol(self, transport) -> None:
        """Set the transport protocol for the client.

        :param transport: "mqtt" or "mqtt_ws". Legacy "amqp", "amqp_ws" and "http" are
            replaced by their MQTT counterpart.
        :type transport: :class:`iotc.IOTCTransport` or str
        """
        self._check_configurable()
        self._config.transport = IoTCClientConfig.sanitize_transport(transport)
        logger.info("Transport set to {}".format(self._config.transport.value))

    def set_model_id(self, model_id: str) -> None:
        """Set the id of the device model, used by IoT Central for automatic approval."""
        self._check_configurable()
        self._config.model_id = model_id
        logger.info("Model id set to {}".format(model_id))

    def set_global_endpoint(self, endpoint: str) -> None:
        """Set the provisioning service endpoint.

        :param str endpoint: hostname without protocol
        """
        self._check_configurable()
        if not endpoint:
            raise ValueError("Endpoint must be a non-empty hostname")
        self._config.global_endpoint = endpoint
        logger.info("Global endpoint set to {}".format(endpoint))

    def set_proxy(self, options: Union[HttpProxyOptions, Dict[str, Any]]) -> None:
        """Set the network proxy for the connection.

        :param options: An HttpProxyOptions, or a mapping of the form
            {"host_address", "port", "credentials": {"username", "password"}}
        """
        self._check_configurable()
        self._config.proxy_options = IoTCClientConfig.sanitize_proxy_options(options)
        if self._config.proxy_options is None:
            logger.info("Proxy cleared")
        else:
            logger.info("Proxy set to {}".format(self._config.proxy_options.host_address))

    def set_capability_model(self, model: Dict[str, Any]) -> None:
        """Set the capability model of the device.

        The interfaces it implements are added to the interfaces already known to the client.

        :param dict model: The parsed JSON capability model.
        """
        interfaces = capability_model.parse(model)
        self._interfaces.update(interfaces)
        logger.info("Capability model set with interfaces: {}".format(list(interfaces)))

    def add_interface(self, interface: Union[CommonInterface, Dict[str, Any]]) -> None:
        """Add an interface to the interfaces known to the client.

        :param interface: A CommonInterface, or a mapping of the form
            {"name", "id", "properties", "commands", "telemetry"}
        """
        if not isinstance(interface, CommonInterface):
            interface = CommonInterface.create_from_definition(interface)
        self._interfaces[interface.name] = interface
        logger.info("Interface {} added".format(interface.name))

    def set_logging(self, log_level) -> None:
        """Set the log level of the client.

        :param log_level: The log level (disabled, api_only, all). Logging is not restricted
            by default.
        :type log_level: :class:`iotc.IOTCLogLevel` or str
        """
        log_level = log.set_log_level(log_level)
        logger.info("Log level set to {}".format(log_level.value))

    def on(self, event_name, callback: Callable) -> None:
        """Listen for an event.

        PROPERTIES listeners receive an :class:`iotc.IoTCProperty`, COMMANDS listeners an
        :class:`iotc.IoTCCommand`, and CONNECTION_STATUS listeners a bool telling whether the
        client is connected.

        :param event_name: The event to listen to.
        :type event_name: :class:`iotc.IOTCEvents` or str
        :param callback: The function (or, with the asynchronous client, coroutine function)
            to run when the event triggers.
        """
        event = coerce_enum(IOTCEvents, event_name)
        if not callable(callback):
            raise TypeError("Callback must be callable")
        self._listeners[event].append(callback)
        logger.debug("Listener added for {}".format(event.value))

    def is_connected(self) -> bool:
        """Check if the client is connected"""
        if self._hub_client is None or self._shut_down:
            return False
        return bool(self._hub_client.connected)

    ##############
    # CONNECTION #
    ##############
    def _check_usable(self) -> None:
        if self._shut_down:
            raise exceptions.IoTCClientError("Client has already been shut down")

    def _check_connected(self) -> None:
        self._check_usable()
        if self._hub_client is None:
            raise exceptions.IoTCConnectionError(
                "Client is not connected to IoT Central", IOTCConnectionErrorCode.NO_CONNECTION
            )

    def _device_key(self) -> Optional[str]:
        if self._config.cred_type is IOTCConnectType.SYMM_KEY:
            return credentials.compute_derived_symmetric_key(
                self._config.key, self._config.device_id
            )
        if self._config.cred_type is IOTCConnectType.DEVICE_KEY:
            return self._config.key
        return None

    def _create_provisioning_client(self, device_key: Optional[str]):
        config = self._config
        if config.cred_type is IOTCConnectType.X509_CERT:
            provisioning_client = self._provisioning_client_class.create_from_x509_certificate(
                provisioning_host=config.global_endpoint,
                registration_id=config.device_id,
                id_scope=config.scope_id,
                x509=config.x509,
                **config.get_client_kwargs()
            )
        else:
            provisioning_client = self._provisioning_client_class.create_from_symmetric_key(
                provisioning_host=config.global_endpoint,
                registration_id=config.device_id,
                id_scope=config.scope_id,
                symmetric_key=device_key,
                **config.get_client_kwargs()
            )
        if config.model_id:
            provisioning_client.provisioning_payload = {
                constant.PROVISIONING_MODEL_ID_KEY: config.model_id
            }
        return provisioning_client

    def _on_registration_complete(self, registration_result, device_key: Optional[str]) -> None:
        """Record the hub a registration assigned the device to.

        :raises: :class:`iotc.exceptions.IoTCConnectionError` if the device was not assigned.
        """
        status = getattr(registration_result, "status", None)
        if status != constant.ASSIGNED_STATUS:
            raise exceptions.IoTCConnectionError(
                "Device registration failed with status '{}'".format(status),
                IOTCConnectionErrorCode.PROVISIONING_FAILED,
            )
        registration_state = registration_result.registration_state
        self._hostname = registration_state.assigned_hub
        if registration_state.device_id:
            self._config.device_id = registration_state.device_id
        self._connection_string = credentials.create_connection_string(
            self._hostname,
            self._config.device_id,
            symmetric_key=device_key,
            x509=device_key is None,
        )
        logger.info(
            "Device {} assigned to hub {}".format(self._config.device_id, self._hostname)
        )

    def _hub_client_kwargs(self) -> Dict[str, Any]:
        kwargs = self._config.get_client_kwargs()
        if self._config.model_id:
            kwargs["product_info"] = self._config.model_id
        if self._config.keep_alive:
            kwargs["keep_alive"] = self._config.keep_alive
        return kwargs

    def _create_hub_client(self, device_key: Optional[str]):
        config = self._config
        if config.cred_type is IOTCConnectType.CONNECTION_STRING:
            values = credentials.parse_connection_string(config.key)
            self._hostname = values[credentials.HOST_NAME]
            config.device_id = values[credentials.DEVICE_ID]
            self._connection_string = config.key
            hub_client = self._hub_client_class.create_from_connection_string(
                config.key, **self._hub_client_kwargs()
            )
        elif config.cred_type is IOTCConnectType.X509_CERT:
            hub_client = self._hub_client_class.create_from_x509_certificate(
                x509=config.x509,
                hostname=self._hostname,
                device_id=config.device_id,
                **self._hub_client_kwargs()
            )
        else:
            hub_client = self._hub_client_class.create_from_symmetric_key(
                symmetric_key=device_key,
                hostname=self._hostname,
                device_id=config.device_id,
                **self._hub_client_kwargs()
            )
        hub_client.on_method_request_received = self._on_method_request_received
        hub_client.on_twin_desired_properties_patch_received = self._on_twin_patch_received
        hub_client.on_connection_state_change = self._on_connection_state_change
        return hub_client

    ############
    # MESSAGES #
    ############
    def _requires_provisioning(self) -> bool:
        return self._config.cred_type is not IOTCConnectType.CONNECTION_STRING

    def _validate_interface(self, interface_name: Optional[str]) -> None:
        if interface_name is None or not self._interfaces:
            return
        if interface_name not in self._interfaces:
            raise ValueError("Interface '{}' is not defined".format(interface_name))

    def _create_message(
        self,
        payload: Any,
        interface_name: Optional[str] = None,
        properties: Optional[Dict[str, Any]] = None,
        timestamp: Optional[Union[str, datetime.datetime]] = None,
    ) -> Message:
        message = Message(
            json.dumps(payload),
            content_encoding=constant.JSON_CONTENT_ENCODING,
            content_type=constant.JSON_CONTENT_TYPE,
        )
        if properties:
            for key, value in properties.items():
                message.custom_properties[key] = value
        if interface_name is not None:
            message.custom_properties[constant.COMPONENT_PROPERTY_NAME] = interface_name
        if timestamp is not None:
            message.custom_properties[constant.CREATION_TIME_PROPERTY_NAME] = _format_timestamp(
                timestamp
            )
        return message

    def _create_command_update_message(
        self, command: IoTCCommand, status: Union[OperationStatus, int], message: Any
    ) -> Message:
        return self._create_message(
            message, properties=command.update_properties(_status_code(status))
        )

    def _create_reported_patch(
        self, payload: Dict[str, Any], interface_name: Optional[str] = None
    ) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise TypeError("Property payload must be a dict")
        self._validate_interface(interface_name)
        return create_reported_properties_patch(payload, interface_name)

    def _create_property_report(
        self, prop: IoTCProperty, status: Union[OperationStatus, int], message: Any
    ) -> Dict[str, Any]:
        return prop.to_reported_patch(_status_code(status), message)

    def _create_method_response(
        self, command: IoTCCommand, status: Union[OperationStatus, int], message: Any
    ) -> MethodResponse:
        return MethodResponse(
            request_id=command.request_id, status=_status_code(status), payload=message
        )

    ############
    # INCOMING #
    ############
    def _create_properties(self, patch: Dict[str, Any]) -> List[IoTCProperty]:
        """Turn a desired properties patch into the property requests to dispatch"""
        version = patch.get(constant.TWIN_VERSION_KEY)
        requests = []
        for key, value in patch.items():
            if key.startswith("$"):
                continue
            interface = self._interfaces.get(key)
            if interface is not None or is_component(value):
                if not isinstance(value, dict):
                    logger.warning("Ignoring malformed property patch for interface {}".format(key))
                    continue
                for name, prop_value in value.items():
                    if name == constant.COMPONENT_MARKER_KEY:
                        continue
                    if interface is not None and interface.properties:
                        if not interface.has_property(name):
                            logger.warning(
                                "Ignoring property {} not declared on interface {}".format(
                                    name, key
                                )
                            )
                            continue
                    requests.append(
                        IoTCProperty(
                            key,
                            interface.interface_id if interface is not None else None,
                            name,
                            prop_value,
                            version,
                            self._report_property,
                        )
                    )
            else:
                requests.append(
                    IoTCProperty(None, None, key, value, version, self._report_property)
                )
        return requests

    def _property_handlers(self, prop: IoTCProperty) -> List[Callable]:
        interface = self._interfaces.get(prop.interface_name) if prop.interface_name else None
        if interface is not None and interface.property_callback is not None:
            return [interface.property_callback]
        return list(self._listeners[IOTCEvents.PROPERTIES])

    def _create_command(self, method_request) -> Tuple[IoTCCommand, List[Callable]]:
        """Turn a method request into a command and the handlers it should be dispatched to.

        No handlers are returned when the command is not declared on its interface.
        """
        interface_name, command_name = _split_method_name(method_request.name)
        interface = self._interfaces.get(interface_name) if interface_name else None
        command = IoTCCommand(
            interface_name,
            interface.interface_id if interface is not None else None,
            command_name,
            method_request.payload,
            method_request.request_id,
            self._acknowledge_command,
            self._update_command,
        )
        if interface is not None:
            if interface.commands and not interface.has_command(command_name):
                logger.warning(
                    "Command {} is not declared on interface {}".format(
                        command_name, interface_name
                    )
                )
                return command, []
            if interface.command_callback is not None:
                return command, [interface.command_callback]
        return command, list(self._listeners[IOTCEvents.COMMANDS])

    def _create_unhandled_command_response(self, command: IoTCCommand) -> MethodResponse:
        logger.warning("No listener for command {}, responding as not found".format(command.name))
        return MethodResponse(
            request_id=command.request_id,
            status=constant.COMMAND_NOT_HANDLED_STATUS,
            payload={"message": "Command {} not handled".format(command.method_name)},
        )

    def _pending_desired_properties(self, twin: Dict[str, Any]) -> Dict[str, Any]:
        """Return a patch of the desired properties IoT Central has not seen acknowledged"""
        desired = twin.get("desired", {})
        reported = twin.get("reported", {})
        pending = {constant.TWIN_VERSION_KEY: desired.get(constant.TWIN_VERSION_KEY)}

        def acknowledged(reported_section, name, value):
            ack = reported_section.get(name)
            return isinstance(ack, dict) and "ac" in ack and ack.get("value") == value

        for key, value in desired.items():
            if key.startswith("$"):
                continue
            if key in self._interfaces or is_component(value):
                if not isinstance(value, dict):
                    continue
                reported_component = reported.get(key, {})
                if not isinstance(reported_component, dict):
                    reported_component = {}
                component = {
                    name: prop_value
                    for name, prop_value in value.items()
                    if name != constant.COMPONENT_MARKER_KEY
                    and not acknowledged(reported_component, name, prop_value)
                }
                if component:
                    pending[key] = create_reported_properties_patch(component, key)[key]
            elif not acknowledged(reported, key, value):
                pending[key] = value
        return pending

    ####################
    # ABSTRACT METHODS #
    ####################
    @abc.abstractmethod
    def connect(self, callback=None):
        pass

    @abc.abstractmethod
    def disconnect(self, callback=None):
        pass

    @abc.abstractmethod
    def send_telemetry(
        self, payload, interface_name=None, properties=None, timestamp=None, callback=None
    ):
        pass

    @abc.abstractmethod
    def send_state(self, payload, timestamp=None, callback=None):
        pass

    @abc.abstractmethod
    def send_event(self, payload, timestamp=None, callback=None):
        pass

    @abc.abstractmethod
    def send_property(self, payload, interface_name=None, callback=None):
        pass

    @abc.abstractmethod
    def _report_property(self, prop, status, message, callback):
        pass

    @abc.abstractmethod
    def _acknowledge_command(self, command, status, message, callback):
        pass

    @abc.abstractmethod
    def _update_command(self, command, status, message, callback):
        pass

    @abc.abstractmethod
    def _on_method_request_received(self, method_request):
        pass

    @abc.abstractmethod
    def _on_twin_patch_received(self, patch):
        pass

    @abc.abstractmethod
    def _on_connection_state_change(self):
        pass
