# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import os
import random
import time
from iotc import IoTCClient, IOTCConnectType, IOTCEvents, IOTCLogLevel, OperationStatus
from iotc.capability_model import load

# The group key should never be stored in code. For the sake of simplicity we're using environment
# variables here.
device_id = os.getenv("IOTC_DEVICE_ID")
scope_id = os.getenv("IOTC_SCOPE_ID")
group_key = os.getenv("IOTC_GROUP_KEY")

client = IoTCClient(device_id, scope_id, IOTCConnectType.SYMM_KEY, group_key)
client.set_logging(IOTCLogLevel.API_ONLY)
client.set_model_id("urn:contoso:thermostat_device:1")
model_path = os.path.join(os.path.dirname(__file__), "iotc_capability_model.json")
for interface in load(model_path).values():
    client.add_interface(interface)


def on_property(prop):
    print("Received {} = {} (version {})".format(prop.name, prop.value, prop.version))
    prop.report(OperationStatus.SUCCESS, "Applied")


def on_command(command):
    print("Received command {} with {}".format(command.name, command.value))
    if command.name == "reboot":
        command.acknowledge(OperationStatus.SUCCESS, "Rebooting")
    else:
        command.acknowledge(OperationStatus.FAILURE, "Unknown command")


client.on(IOTCEvents.PROPERTIES, on_property)
client.on(IOTCEvents.COMMANDS, on_command)
client.on(IOTCEvents.CONNECTION_STATUS, lambda connected: print("Connected: {}".format(connected)))

# connect the client.
client.connect()
client.send_property({"manufacturer": "Contoso", "firmwareVersion": "1.0.2"}, "deviceInfo")

try:
    while True:
        client.send_telemetry({"temperature": 20 + random.random() * 5}, "sensor")
        time.sleep(5)
except KeyboardInterrupt:
    print("User initiated exit")
finally:
    # finally, disconnect the client
    client.disconnect()
