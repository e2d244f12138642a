# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for running coroutine client operations and user handlers that
may be either functions or coroutines.
"""
import inspect
import logging
from iotc import exceptions
from . import handle_exceptions

logger = logging.getLogger(__name__)


def _name(fn):
    return getattr(fn, "__name__", "operation")


async def handle_result(coro_fn, *args, **kwargs):
    """Await coro_fn, re-raising failures of the device library as IoT Central exceptions."""
    try:
        return await coro_fn(*args, **kwargs)
    except Exception as e:
        translated = exceptions.translate_error(e)
        if translated is e:
            raise
        raise translated from e


async def call_handler(handler, *args):
    """Call a handler that may be a function or a coroutine function, and return its result."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def invoke_callback(callback, error, result):
    try:
        await call_handler(callback, error, result)
    except Exception as e:
        handle_exceptions.handle_background_exception(e)


async def run_with_callback(coro_fn, callback, *args, **kwargs):
    """Await an operation.

    Without a callback, returns the operation's result (or raises). With a callback, which may
    be a function or a coroutine function, calls back with ``(error, result)`` and returns None.
    """
    if callback is None:
        return await handle_result(coro_fn, *args, **kwargs)

    if not callable(callback):
        raise TypeError("Callback must be callable")

    try:
        result = await handle_result(coro_fn, *args, **kwargs)
    except Exception as e:
        logger.debug("Operation {} completed with error {}".format(_name(coro_fn), e))
        await invoke_callback(callback, e, None)
    else:
        logger.debug("Operation {} completed with result {}".format(_name(coro_fn), result))
        await invoke_callback(callback, None, result)
    return None
