"""IoT Central Device Client Models

This package provides object models for use within the IoT Central device client.
"""

from .enums import (  # noqa: F401
    IOTCConnectType,
    IOTCTransport,
    IOTCEvents,
    IOTCLogLevel,
    OperationStatus,
    IOTCConnectionErrorCode,
)
from .interface import CommonInterface, InterfaceMap  # noqa: F401
from .properties import IoTCProperty, WritablePropertyResponse  # noqa: F401
from .commands import IoTCCommand  # noqa: F401
from .result import Result  # noqa: F401
from .proxy_options import HttpProxyOptions  # noqa: F401
