# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes related to IoT Central properties.
"""
from iotc import constant


def WritablePropertyResponse(value, ack_code, ack_description=None, ack_version=None):
    response = {"value": value, "ac": ack_code, "av": ack_version}
    if ack_description is not None:
        response["ad"] = ack_description
    return response


def create_reported_properties_patch(properties, interface_name=None):
    """Return a twin patch reporting the given properties, under a component if one is named.

    :param dict properties: Mapping of property names to the values to report.
    :param str interface_name: The name of the interface the properties belong to (OPTIONAL)
    """
    if interface_name is None:
        return dict(properties)
    component = {constant.COMPONENT_MARKER_KEY: constant.COMPONENT_MARKER_VALUE}
    component.update(properties)
    return {interface_name: component}


def is_component(value):
    return (
        isinstance(value, dict)
        and value.get(constant.COMPONENT_MARKER_KEY) == constant.COMPONENT_MARKER_VALUE
    )


class IoTCProperty(object):
    """Represents a request from IoT Central to update a writable property.

    :ivar str interface_name: The interface the property belongs to, None for root properties.
    :ivar str interface_id: The identifier of that interface, if known.
    :ivar str name: The name of the property.
    :ivar value: The requested value.
    :ivar int version: The desired properties version the request came with.
    """

    def __init__(self, interface_name, interface_id, name, value, version, reporter):
        self.interface_name = interface_name
        self.interface_id = interface_id
        self.name = name
        self.value = value
        self.version = version
        self._reporter = reporter

    def __repr__(self):
        return "IoTCProperty(interface_name={!r}, name={!r}, value={!r}, version={!r})".format(
            self.interface_name, self.name, self.value, self.version
        )

    def report(self, status, message=None, callback=None):
        """Acknowledge the request by reporting the property back with a status.

        With the synchronous client this blocks (or, when a callback is given, returns None and
        calls back with (error, result)). With the asynchronous client it returns a coroutine.

        :param status: The outcome of applying the value.
        :type status: :class:`iotc.OperationStatus` or int
        :param str message: Optional description of the outcome.
        :param callback: Optional function called with (error, result) on completion.
        """
        return self._reporter(self, status, message, callback)

    def to_reported_patch(self, status_code, message=None):
        """Return the twin patch acknowledging this request"""
        response = WritablePropertyResponse(
            value=self.value,
            ack_code=status_code,
            ack_description=message,
            ack_version=self.version,
        )
        return create_reported_properties_patch({self.name: response}, self.interface_name)
