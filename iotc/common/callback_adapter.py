# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for running blocking client operations either to completion or in
the background with a completion callback.
"""
import logging
import threading
from iotc import exceptions
from . import handle_exceptions

logger = logging.getLogger(__name__)


def _name(fn):
    return getattr(fn, "__name__", "operation")


def handle_result(fn, *args, **kwargs):
    """Call fn, re-raising failures of the device library as IoT Central exceptions."""
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        translated = exceptions.translate_error(e)
        if translated is e:
            raise
        raise translated from e


def invoke_callback(callback, error, result):
    """Call a user completion callback, logging anything it raises."""
    try:
        callback(error, result)
    except Exception as e:
        handle_exceptions.handle_background_exception(e)


def run_with_callback(fn, callback, *args, **kwargs):
    """Run a blocking operation.

    Without a callback, runs fn in the calling thread and returns its result (or raises).
    With a callback, runs fn in a new thread, calls back with ``(error, result)`` once it
    completes, and returns None immediately.
    """
    if callback is None:
        return handle_result(fn, *args, **kwargs)

    if not callable(callback):
        raise TypeError("Callback must be callable")

    def run_in_background():
        try:
            result = handle_result(fn, *args, **kwargs)
        except Exception as e:
            logger.debug("Operation {} completed with error {}".format(_name(fn), e))
            invoke_callback(callback, e, None)
        else:
            logger.debug("Operation {} completed with result {}".format(_name(fn), result))
            invoke_callback(callback, None, result)

    thread = threading.Thread(target=run_in_background, name="iotc-" + _name(fn))
    thread.daemon = True
    thread.start()
    return None
