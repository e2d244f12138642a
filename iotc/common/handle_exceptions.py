# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import logging

logger = logging.getLogger(__name__)


def handle_background_exception(e):
    """
    Function which handles exceptions that are caught in a background thread. This is
    typically called when a user-supplied listener or completion callback raises, since those
    run inside a non-application thread in response to non-user-initiated actions, so there's
    nobody else to catch them.

    :param Error e: Exception object raised from inside a background thread
    """
    logger.error(msg="Exception caught in background thread.  Unable to handle.", exc_info=e)
