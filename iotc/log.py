# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module controls how much the IoT Central client logs.

The client logs through the standard logging module, under the "iotc" logger. No handlers are
installed here; applications configure output as usual, e.g. with logging.basicConfig().
"""
import logging
from .models.enums import IOTCLogLevel, coerce_enum

PACKAGE_LOGGER_NAME = "iotc"
DEVICE_LIBRARY_LOGGER_NAME = "azure.iot.device"

_LEVELS = {
    IOTCLogLevel.DISABLED: logging.CRITICAL + 1,
    IOTCLogLevel.API_ONLY: logging.INFO,
    IOTCLogLevel.ALL: logging.DEBUG,
}


def set_log_level(log_level):
    """Set the verbosity of the client's logging.

    DISABLED silences the client, API_ONLY logs calls into the client, and ALL logs everything,
    including the wrapped device library.

    :param log_level: The log level.
    :type log_level: :class:`iotc.IOTCLogLevel` or str
    :returns: The IOTCLogLevel applied.
    :raises: ValueError if log_level is not recognised.
    """
    log_level = coerce_enum(IOTCLogLevel, log_level)
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(_LEVELS[log_level])
    if log_level is IOTCLogLevel.ALL:
        logging.getLogger(DEVICE_LIBRARY_LOGGER_NAME).setLevel(logging.DEBUG)
    else:
        logging.getLogger(DEVICE_LIBRARY_LOGGER_NAME).setLevel(logging.NOTSET)
    return log_level
