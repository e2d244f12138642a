# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module parses device capability models into interface lookup tables.

A capability model is the parsed JSON of a model document such as::

    {
        "@id": "urn:contoso:device:1",
        "@type": "CapabilityModel",
        "implements": [
            {
                "@type": "InterfaceInstance",
                "name": "sensor",
                "@id": "urn:contoso:sensor:1",
                "schema": {
                    "contents": [
                        {"@type": "Telemetry", "name": "temperature"},
                        {"@type": "Property", "name": "fanSpeed", "writable": true},
                        {"@type": "Command", "name": "reboot"}
                    ]
                }
            }
        ]
    }
"""
import json
import logging
from typing import Any, Callable, Mapping, Optional
from .models.interface import CommonInterface, InterfaceMap

logger = logging.getLogger(__name__)

INTERFACE_INSTANCE_TYPE = "InterfaceInstance"
PROPERTY_TYPE = "Property"
COMMAND_TYPE = "Command"
TELEMETRY_TYPE = "Telemetry"

_CONTENT_TYPES = (PROPERTY_TYPE, COMMAND_TYPE, TELEMETRY_TYPE)


def _content_kind(item: Mapping[str, Any]) -> Optional[str]:
    """Return which of Property, Command or Telemetry a schema item declares, if any.

    "@type" may be a single string or a list of semantic types, e.g. ["Telemetry", "Temperature"]
    """
    item_type = item.get("@type")
    if isinstance(item_type, str):
        item_type = [item_type]
    elif not isinstance(item_type, list):
        return None
    for kind in item_type:
        if kind in _CONTENT_TYPES:
            return kind
    return None


def _parse_interface(
    instance: Mapping[str, Any],
    property_callback: Optional[Callable],
    command_callback: Optional[Callable],
) -> CommonInterface:
    interface = CommonInterface(
        instance["name"],
        instance.get("@id"),
        property_callback=property_callback,
        command_callback=command_callback,
    )
    schema = instance.get("schema")
    contents = schema.get("contents") if isinstance(schema, Mapping) else None
    if not contents:
        return interface

    for item in contents:
        if not isinstance(item, Mapping) or not item.get("name"):
            continue
        kind = _content_kind(item)
        if kind == PROPERTY_TYPE:
            interface.add_property(item["name"], bool(item.get("writable", False)))
        elif kind == COMMAND_TYPE:
            interface.add_command(item["name"])
        elif kind == TELEMETRY_TYPE:
            interface.add_telemetry(item["name"])
    return interface


def parse(
    capability_model: Optional[Mapping[str, Any]],
    property_callback: Optional[Callable] = None,
    command_callback: Optional[Callable] = None,
) -> InterfaceMap:
    """Build a mapping from interface name to :class:`CommonInterface` from a capability model.

    Only entries of "implements" typed "InterfaceInstance" with a non-empty name are considered.
    Their "schema.contents" items typed "Property", "Command" or "Telemetry" are collected, and
    everything else is skipped.

    :param capability_model: The parsed JSON capability model.
    :param property_callback: Handler attached to every interface for property requests.
    :param command_callback: Handler attached to every interface for command requests.
    :returns: The interfaces, keyed by name. A later interface replaces an earlier namesake.
    """
    interfaces = {}
    if not capability_model or not isinstance(capability_model, Mapping):
        return interfaces
    implements = capability_model.get("implements")
    if not implements:
        return interfaces

    for instance in implements:
        if not isinstance(instance, Mapping):
            continue
        if instance.get("@type") != INTERFACE_INSTANCE_TYPE:
            continue
        name = instance.get("name")
        if not isinstance(name, str) or len(name) == 0:
            continue
        interface = _parse_interface(instance, property_callback, command_callback)
        if name in interfaces:
            logger.warning("Interface '{}' declared more than once, keeping the last".format(name))
        interfaces[name] = interface
        logger.debug(
            "Parsed interface '{}': {} properties, {} commands, {} telemetry".format(
                name,
                len(interface.properties),
                len(interface.commands),
                len(interface.telemetry),
            )
        )
    return interfaces


def load(
    source,
    property_callback: Optional[Callable] = None,
    command_callback: Optional[Callable] = None,
) -> InterfaceMap:
    """Read a capability model from a file path or a file object and parse it.

    :raises: ValueError if the file does not contain valid JSON.
    """
    if hasattr(source, "read"):
        capability_model = json.load(source)
    else:
        with open(source, "r", encoding="utf-8") as fh:
            capability_model = json.load(fh)
    return parse(capability_model, property_callback, command_callback)
