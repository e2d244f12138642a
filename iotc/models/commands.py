# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes related to IoT Central commands.
"""
from iotc import constant


class IoTCCommand(object):
    """Represents a request from IoT Central to execute a command.

    :ivar str interface_name: The interface the command belongs to, None for root commands.
    :ivar str interface_id: The identifier of that interface, if known.
    :ivar str name: The name of the command.
    :ivar value: The JSON payload being sent with the request.
    :ivar str request_id: The request id.
    """

    def __init__(self, interface_name, interface_id, name, value, request_id, responder, updater):
        self.interface_name = interface_name
        self.interface_id = interface_id
        self.name = name
        self.value = value
        self.request_id = request_id
        self._responder = responder
        self._updater = updater

    def __repr__(self):
        return "IoTCCommand(interface_name={!r}, name={!r}, request_id={!r})".format(
            self.interface_name, self.name, self.request_id
        )

    @property
    def method_name(self):
        """The direct method name the command was received on"""
        if self.interface_name is None:
            return self.name
        return self.interface_name + constant.COMMAND_NAME_SEPARATOR + self.name

    def acknowledge(self, status, message=None, callback=None):
        """Respond to the command request.

        :param status: The outcome of the command.
        :type status: :class:`iotc.OperationStatus` or int
        :param message: Optional JSON compatible payload sent with the response.
        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return self._responder(self, status, message, callback)

    def update(self, status, message=None, callback=None):
        """Send a progress update for a long-running command.

        The update travels as a telemetry message tagged with the command name and request id.

        :param status: The current outcome of the command.
        :type status: :class:`iotc.OperationStatus` or int
        :param message: Optional JSON compatible payload describing progress.
        :param callback: Optional function called with ``(error, result)`` on completion.
        """
        return self._updater(self, status, message, callback)

    def update_properties(self, status_code):
        """Return the custom message properties tagging an update of this command"""
        properties = {
            constant.COMMAND_NAME_PROPERTY_NAME: self.name,
            constant.COMMAND_REQUEST_ID_PROPERTY_NAME: self.request_id,
            constant.COMMAND_STATUS_PROPERTY_NAME: str(status_code),
        }
        if self.interface_name is not None:
            properties[constant.COMPONENT_PROPERTY_NAME] = self.interface_name
        return properties
