"""IoT Central Device Client - Asynchronous

This package provides the asynchronous IoT Central device client, for use with native Python
coroutines.
"""

from .async_client import IoTCClient  # noqa: F401
