"""Azure IoT Central Device Client common

This package provides shared modules for use with the IoT Central device client.

INTERNAL USAGE ONLY
"""
