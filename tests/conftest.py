# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
from azure.iot.device import MethodRequest

"""
NOTE: tests needing some kind of non-specific, arbitrary exception should use one of the
following fixtures. Raising Exception directly to test arbitrary exceptions can hide other errors
caught by an "except Exception" block, so use a subclass that is not defined anywhere else.
"""


@pytest.fixture
def unexpected_exception():
    class UnexpectedException(Exception):
        pass

    e = UnexpectedException()
    return e


#####################
# SHARED TEST DATA #
#####################

fake_device_id = "thermostat-01"
fake_hostname = "iotc-1234.azure-devices.net"


@pytest.fixture
def capability_model():
    return {
        "@id": "urn:contoso:device:1",
        "@type": "CapabilityModel",
        "implements": [
            {
                "@type": "InterfaceInstance",
                "name": "sensor",
                "@id": "urn:contoso:sensor:1",
                "schema": {
                    "@type": "Interface",
                    "contents": [
                        {"@type": "Telemetry", "name": "temperature"},
                        {"@type": ["Telemetry", "Humidity"], "name": "humidity"},
                        {"@type": "Property", "name": "fanSpeed", "writable": True},
                        {"@type": "Property", "name": "serialNumber"},
                        {"@type": "Command", "name": "reboot"},
                    ],
                },
            },
            {
                "@type": "InterfaceInstance",
                "name": "deviceInfo",
                "@id": "urn:azureiot:DeviceManagement:DeviceInformation:1",
                "schema": {
                    "@type": "Interface",
                    "contents": [
                        {"@type": "Property", "name": "manufacturer"},
                        {"@type": "Property", "name": "firmwareVersion"},
                    ],
                },
            },
        ],
    }


@pytest.fixture
def method_request():
    def _make(name, payload=None, request_id="1"):
        return MethodRequest(request_id=request_id, name=name, payload=payload)

    return _make


@pytest.fixture
def registration_result(mocker):
    result = mocker.MagicMock()
    result.status = "assigned"
    result.registration_state.assigned_hub = fake_hostname
    result.registration_state.device_id = fake_device_id
    return result
