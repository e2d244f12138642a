# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the in-memory description of a device model interface.
"""
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional


class CommonInterface(object):
    """Lookup tables for the properties, commands and telemetry declared by one interface.

    :ivar str name: The name of the interface instance (the component name).
    :ivar str interface_id: The identifier of the interface definition, if known.
    :ivar property_callback: Optional handler for writable property requests on this interface.
    :ivar command_callback: Optional handler for command requests on this interface.
    """

    def __init__(
        self,
        name: str,
        interface_id: Optional[str] = None,
        property_callback: Optional[Callable] = None,
        command_callback: Optional[Callable] = None,
    ) -> None:
        if not name:
            raise ValueError("Interface name must be a non-empty string")
        self.name = name
        self.interface_id = interface_id
        self.property_callback = property_callback
        self.command_callback = command_callback
        self._properties: List[str] = []
        self._writable_properties = set()
        self._commands: List[str] = []
        self._telemetry: List[str] = []

    def __repr__(self) -> str:
        return "CommonInterface(name={!r}, interface_id={!r})".format(self.name, self.interface_id)

    @property
    def properties(self) -> List[str]:
        return list(self._properties)

    @property
    def writable_properties(self) -> List[str]:
        return [name for name in self._properties if name in self._writable_properties]

    @property
    def commands(self) -> List[str]:
        return list(self._commands)

    @property
    def telemetry(self) -> List[str]:
        return list(self._telemetry)

    def add_property(self, name: str, writable: bool = False) -> None:
        if name not in self._properties:
            self._properties.append(name)
        if writable:
            self._writable_properties.add(name)

    def add_command(self, name: str) -> None:
        if name not in self._commands:
            self._commands.append(name)

    def add_telemetry(self, name: str) -> None:
        if name not in self._telemetry:
            self._telemetry.append(name)

    def has_property(self, name: str) -> bool:
        return name in self._properties

    def is_writable(self, name: str) -> bool:
        return name in self._writable_properties

    def has_command(self, name: str) -> bool:
        return name in self._commands

    def has_telemetry(self, name: str) -> bool:
        return name in self._telemetry

    @classmethod
    def create_from_definition(
        cls,
        definition: Mapping[str, Any],
        property_callback: Optional[Callable] = None,
        command_callback: Optional[Callable] = None,
    ) -> "CommonInterface":
        """Create an interface from a plain mapping.

        :param definition: A mapping with a "name", an "id", and optional "properties",
            "commands" and "telemetry" lists of names. Properties created this way are writable.
        :raises: ValueError if the definition has no name.
        """
        interface = cls(
            definition.get("name"),
            definition.get("id"),
            property_callback=property_callback,
            command_callback=command_callback,
        )
        for name in _names(definition.get("properties")):
            interface.add_property(name, writable=True)
        for name in _names(definition.get("commands")):
            interface.add_command(name)
        for name in _names(definition.get("telemetry")):
            interface.add_telemetry(name)
        return interface


def _names(values: Optional[Iterable[str]]) -> Iterable[str]:
    return values or []


InterfaceMap = Dict[str, CommonInterface]
