# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the iotc package
"""

VERSION = "2.0.0"
DEFAULT_GLOBAL_ENDPOINT = "global.azure-devices-provisioning.net"
ASSIGNED_STATUS = "assigned"

# Message and twin conventions used by IoT Central / Plug and Play
JSON_CONTENT_TYPE = "application/json"
JSON_CONTENT_ENCODING = "utf-8"
COMPONENT_PROPERTY_NAME = "$.sub"
COMPONENT_MARKER_KEY = "__t"
COMPONENT_MARKER_VALUE = "c"
TWIN_VERSION_KEY = "$version"
CREATION_TIME_PROPERTY_NAME = "iothub-creation-time-utc"
COMMAND_NAME_PROPERTY_NAME = "iothub-command-name"
COMMAND_REQUEST_ID_PROPERTY_NAME = "iothub-command-request-id"
COMMAND_STATUS_PROPERTY_NAME = "iothub-command-statuscode"
COMMAND_NAME_SEPARATOR = "*"
PROVISIONING_MODEL_ID_KEY = "modelId"

# Status used when no listener handles an incoming command
COMMAND_NOT_HANDLED_STATUS = 404
