# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for deriving device credentials and hub connection strings
"""
import base64
import binascii
import hashlib
import hmac

CS_DELIMITER = ";"
CS_VAL_SEPARATOR = "="

HOST_NAME = "HostName"
DEVICE_ID = "DeviceId"
SHARED_ACCESS_KEY = "SharedAccessKey"
X509 = "x509"


def compute_derived_symmetric_key(group_key, device_id):
    """Derive a device key from an enrollment group key.

    The device key is the HMAC-SHA256 of the device id, keyed with the decoded group key.

    :param group_key: Enrollment group symmetric key (base64 encoded)
    :type group_key: str or bytes
    :param str device_id: The id of the device (its registration id)
    :returns: The derived device key (base64 encoded)
    :rtype: str
    """
    try:
        group_key = group_key.encode("utf-8")
    except AttributeError:
        # If byte string, no need to encode
        pass

    try:
        signing_key = base64.b64decode(group_key, validate=True)
    except (binascii.Error, TypeError) as e:
        raise ValueError("Invalid Symmetric Key") from e

    hmac_digest = hmac.HMAC(
        key=signing_key, msg=device_id.encode("utf-8"), digestmod=hashlib.sha256
    ).digest()
    return base64.b64encode(hmac_digest).decode("utf-8")


def create_connection_string(hostname, device_id, symmetric_key=None, x509=False):
    """Return an IoT Hub device connection string.

    :param str hostname: The hostname of the assigned IoT Hub
    :param str device_id: The id of the device
    :param str symmetric_key: The device key, for symmetric key authentication
    :param bool x509: True for certificate authentication
    :raises: ValueError if neither or both of symmetric_key and x509 are given
    """
    if bool(symmetric_key) == bool(x509):
        raise ValueError("One of either 'symmetric_key' or 'x509' must be provided")
    parts = [(HOST_NAME, hostname), (DEVICE_ID, device_id)]
    if symmetric_key:
        parts.append((SHARED_ACCESS_KEY, symmetric_key))
    else:
        parts.append((X509, "true"))
    return CS_DELIMITER.join(key + CS_VAL_SEPARATOR + value for key, value in parts)


def parse_connection_string(connection_string):
    """Return a dictionary of values contained in a given connection string"""
    try:
        cs_args = connection_string.split(CS_DELIMITER)
    except (AttributeError, TypeError):
        raise TypeError("Connection String must be of type str")
    try:
        d = dict(arg.split(CS_VAL_SEPARATOR, 1) for arg in cs_args if arg)
    except ValueError:
        raise ValueError("Invalid Connection String - Unable to parse")
    if HOST_NAME not in d or DEVICE_ID not in d:
        raise ValueError("Invalid Connection String - Missing HostName or DeviceId")
    return d
