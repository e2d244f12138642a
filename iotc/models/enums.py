# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the enumerations exposed by the IoT Central device client.
"""
from enum import Enum


class IOTCConnectType(Enum):
    """Kind of credential the device authenticates with"""

    SYMM_KEY = "symm_key"
    DEVICE_KEY = "device_key"
    X509_CERT = "x509_cert"
    CONNECTION_STRING = "connection_string"


class IOTCTransport(Enum):
    MQTT = "mqtt"
    MQTT_WS = "mqtt_ws"


class IOTCEvents(Enum):
    PROPERTIES = "properties"
    COMMANDS = "commands"
    CONNECTION_STATUS = "connection_status"


class IOTCLogLevel(Enum):
    DISABLED = "disabled"
    API_ONLY = "api_only"
    ALL = "all"


class OperationStatus(Enum):
    SUCCESS = 200
    FAILURE = 500


class IOTCConnectionErrorCode(Enum):
    """Reason attached to an :class:`iotc.exceptions.IoTCConnectionError`"""

    BAD_CREDENTIALS = "bad_credentials"
    COMMUNICATION_ERROR = "communication_error"
    CONNECTION_DROPPED = "connection_dropped"
    NO_CONNECTION = "no_connection"
    PROVISIONING_FAILED = "provisioning_failed"
    SERVICE_ERROR = "service_error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


# Transports the wrapped device library no longer offers, and what they fall back to
LEGACY_TRANSPORTS = {
    "amqp": IOTCTransport.MQTT,
    "http": IOTCTransport.MQTT,
    "amqp_ws": IOTCTransport.MQTT_WS,
}


def coerce_enum(enum_cls, value):
    """Return the member of enum_cls matching value, which may be a member, its value or its name.

    :raises: ValueError if value does not identify a member.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        for member in enum_cls:
            if member.name.lower() == lowered or str(member.value).lower() == lowered:
                return member
    else:
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise ValueError("Invalid {}: {!r}".format(enum_cls.__name__, value))
