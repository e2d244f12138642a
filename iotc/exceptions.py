# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define IoT Central user-facing exceptions to be shared across package"""
from azure.iot.device import exceptions as device_exceptions
from .models.enums import IOTCConnectionErrorCode


class IoTCError(Exception):
    """Base class for all failures raised by the IoT Central client"""

    pass


class IoTCClientError(IoTCError):
    """Represents a failure from the IoT Central client itself"""

    pass


class IoTCConnectionError(IoTCError):
    """Represents a failure to reach, or stay connected to, IoT Central

    :ivar code: The reason for the failure.
    :type code: :class:`iotc.IOTCConnectionErrorCode`
    """

    def __init__(self, message, code):
        super().__init__(message)
        self.code = code

    def __str__(self):
        return "{} ({})".format(super().__str__(), getattr(self.code, "value", self.code))


# Ordered: subclasses of ClientError in the wrapped library must come before ClientError itself
_CONNECTION_ERROR_MAP = [
    (
        device_exceptions.CredentialError,
        IOTCConnectionErrorCode.BAD_CREDENTIALS,
        "Credentials invalid, could not connect",
    ),
    (
        device_exceptions.ConnectionFailedError,
        IOTCConnectionErrorCode.COMMUNICATION_ERROR,
        "Could not connect to IoT Central",
    ),
    (
        device_exceptions.ConnectionDroppedError,
        IOTCConnectionErrorCode.CONNECTION_DROPPED,
        "Lost connection to IoT Central",
    ),
    (
        device_exceptions.NoConnectionError,
        IOTCConnectionErrorCode.NO_CONNECTION,
        "Client is not connected to IoT Central",
    ),
    (
        device_exceptions.OperationTimeout,
        IOTCConnectionErrorCode.TIMEOUT,
        "Could not complete operation before timeout",
    ),
    (
        device_exceptions.OperationCancelled,
        IOTCConnectionErrorCode.CANCELLED,
        "Operation was cancelled before completion",
    ),
    (
        device_exceptions.ServiceError,
        IOTCConnectionErrorCode.SERVICE_ERROR,
        "Error reported by the IoT Central service",
    ),
]


def translate_error(e):
    """Return the IoT Central exception corresponding to an exception raised by the device library.

    IoT Central exceptions and argument errors (ValueError, TypeError) are returned unchanged.
    """
    if isinstance(e, (IoTCError, ValueError, TypeError)):
        return e
    for device_error, code, message in _CONNECTION_ERROR_MAP:
        if isinstance(e, device_error):
            return IoTCConnectionError(message, code)
    if isinstance(e, device_exceptions.ClientError):
        return IoTCClientError("Error in the IoT Central client")
    return IoTCClientError("Unexpected failure")
