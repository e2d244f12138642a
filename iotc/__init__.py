"""Azure IoT Central Device Client

This library provides a simplified client for connecting devices to Azure IoT Central: device
provisioning, telemetry and properties, and command handling, on top of the Azure IoT Device
Library.
"""

from .sync_client import IoTCClient  # noqa: F401
from .capability_model import parse  # noqa: F401
from .exceptions import IoTCError, IoTCClientError, IoTCConnectionError  # noqa: F401
from .models import (  # noqa: F401
    IOTCConnectType,
    IOTCTransport,
    IOTCEvents,
    IOTCLogLevel,
    OperationStatus,
    IOTCConnectionErrorCode,
    CommonInterface,
    IoTCProperty,
    IoTCCommand,
    Result,
    HttpProxyOptions,
)
from .credentials import compute_derived_symmetric_key  # noqa: F401
from . import models  # noqa: F401
from . import exceptions  # noqa: F401
