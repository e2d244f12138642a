# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import os
import asyncio
import json
import random
from iotc import IOTCConnectType, IOTCEvents, OperationStatus
from iotc.aio import IoTCClient


async def on_property(prop):
    print("Received {}.{} = {}".format(prop.interface_name, prop.name, prop.value))
    await prop.report(OperationStatus.SUCCESS, "Applied")


async def on_command(command):
    print("Received command {}".format(command.method_name))
    await command.acknowledge(OperationStatus.SUCCESS, "Starting")
    # Long running commands report their progress with updates
    await asyncio.sleep(2)
    await command.update(OperationStatus.SUCCESS, "Done")


async def send_recurring_telemetry(client):
    while True:
        await client.send_telemetry({"temperature": 20 + random.random() * 5}, "sensor")
        await asyncio.sleep(5)


async def run_until_interrupted(client):
    # Connect the client.
    await client.connect()
    try:
        await send_recurring_telemetry(client)
    finally:
        await client.disconnect()


def main():
    # Device credentials should never be stored in code. For the sake of simplicity we're using
    # environment variables here.
    client = IoTCClient(
        os.getenv("IOTC_DEVICE_ID"),
        os.getenv("IOTC_SCOPE_ID"),
        IOTCConnectType.SYMM_KEY,
        os.getenv("IOTC_GROUP_KEY"),
        model_id="urn:contoso:thermostat_device:1",
    )
    with open(os.path.join(os.path.dirname(__file__), "iotc_capability_model.json")) as fh:
        client.set_capability_model(json.load(fh))
    client.on(IOTCEvents.PROPERTIES, on_property)
    client.on(IOTCEvents.COMMANDS, on_command)

    print("IoT Central Device Client Recurring Telemetry Sample")
    print("Press Ctrl+C to exit")
    try:
        asyncio.run(run_until_interrupted(client))
    except KeyboardInterrupt:
        print("User initiated exit")
    except Exception:
        print("Unexpected exception!")
        raise


if __name__ == "__main__":
    main()
