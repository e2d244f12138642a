# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import io
import json
import logging
import pytest
from iotc.capability_model import parse, load
from iotc.models import CommonInterface

logging.basicConfig(level=logging.DEBUG)


def interface_instance(name, contents=None, interface_id="urn:contoso:iface:1"):
    instance = {"@type": "InterfaceInstance", "name": name, "@id": interface_id, "schema": {}}
    if contents is not None:
        instance["schema"]["contents"] = contents
    return instance


@pytest.mark.describe("parse()")
class TestParse(object):
    @pytest.mark.it("Returns an empty map when the model is empty or implements nothing")
    @pytest.mark.parametrize(
        "model",
        [
            pytest.param(None, id="None"),
            pytest.param({}, id="Empty model"),
            pytest.param({"implements": []}, id="Empty implements"),
            pytest.param({"@id": "urn:contoso:device:1"}, id="No implements"),
        ],
    )
    def test_empty(self, model):
        assert parse(model) == {}

    @pytest.mark.it("Creates one CommonInterface per InterfaceInstance, keyed by name")
    def test_keys_by_name(self, capability_model):
        interfaces = parse(capability_model)

        assert set(interfaces) == {"sensor", "deviceInfo"}
        assert isinstance(interfaces["sensor"], CommonInterface)
        assert interfaces["sensor"].name == "sensor"
        assert interfaces["sensor"].interface_id == "urn:contoso:sensor:1"

    @pytest.mark.it("Collects telemetry, properties and commands from the schema contents")
    def test_collects_contents(self, capability_model):
        sensor = parse(capability_model)["sensor"]

        assert sensor.telemetry == ["temperature", "humidity"]
        assert sensor.properties == ["fanSpeed", "serialNumber"]
        assert sensor.commands == ["reboot"]

    @pytest.mark.it("Records whether each property is writable")
    def test_writable(self, capability_model):
        sensor = parse(capability_model)["sensor"]

        assert sensor.is_writable("fanSpeed")
        assert not sensor.is_writable("serialNumber")
        assert sensor.writable_properties == ["fanSpeed"]

    @pytest.mark.it("Accepts a list of semantic types as an item's @type")
    def test_semantic_types(self):
        model = {
            "implements": [
                interface_instance(
                    "env", [{"@type": ["Telemetry", "SemanticType/Temperature"], "name": "t"}]
                )
            ]
        }
        assert parse(model)["env"].telemetry == ["t"]

    @pytest.mark.it("Skips implements entries that are not InterfaceInstances")
    def test_skips_other_types(self):
        model = {
            "implements": [
                {"@type": "Interface", "name": "notAnInstance", "schema": {}},
                interface_instance("kept"),
            ]
        }
        assert list(parse(model)) == ["kept"]

    @pytest.mark.it("Skips InterfaceInstances without a name")
    @pytest.mark.parametrize("name", [None, ""], ids=["Missing", "Empty"])
    def test_skips_nameless(self, name):
        instance = interface_instance("placeholder")
        if name is None:
            del instance["name"]
        else:
            instance["name"] = name
        assert parse({"implements": [instance]}) == {}

    @pytest.mark.it("Creates an interface with no contents when the schema has none")
    @pytest.mark.parametrize("contents", [None, []], ids=["Missing", "Empty"])
    def test_no_contents(self, contents):
        interfaces = parse({"implements": [interface_instance("bare", contents)]})

        bare = interfaces["bare"]
        assert bare.properties == []
        assert bare.commands == []
        assert bare.telemetry == []

    @pytest.mark.it("Ignores schema items of other types and items without a name")
    def test_ignores_unknown_items(self):
        contents = [
            {"@type": "Relationship", "name": "parent"},
            {"@type": "Telemetry"},
            "not an item",
            {"@type": "Command", "name": "blink"},
        ]
        iface = parse({"implements": [interface_instance("i", contents)]})["i"]

        assert iface.commands == ["blink"]
        assert iface.telemetry == []
        assert iface.properties == []

    @pytest.mark.it("Keeps the last of two interfaces with the same name")
    def test_duplicate_names(self):
        model = {
            "implements": [
                interface_instance("dup", [{"@type": "Command", "name": "first"}], "urn:a:1"),
                interface_instance("dup", [{"@type": "Command", "name": "second"}], "urn:b:1"),
            ]
        }
        dup = parse(model)["dup"]

        assert dup.interface_id == "urn:b:1"
        assert dup.commands == ["second"]

    @pytest.mark.it("Attaches the given property and command callbacks to every interface")
    def test_callbacks(self, mocker, capability_model):
        property_callback = mocker.MagicMock()
        command_callback = mocker.MagicMock()

        interfaces = parse(capability_model, property_callback, command_callback)

        for interface in interfaces.values():
            assert interface.property_callback is property_callback
            assert interface.command_callback is command_callback

    @pytest.mark.it("Does not modify the capability model")
    def test_does_not_modify(self, capability_model):
        original = json.loads(json.dumps(capability_model))
        parse(capability_model)
        assert capability_model == original


@pytest.mark.describe("load()")
class TestLoad(object):
    @pytest.mark.it("Parses a capability model read from a file object")
    def test_file_object(self, capability_model):
        interfaces = load(io.StringIO(json.dumps(capability_model)))
        assert set(interfaces) == {"sensor", "deviceInfo"}

    @pytest.mark.it("Parses a capability model read from a file path")
    def test_path(self, tmp_path, capability_model):
        path = tmp_path / "model.json"
        path.write_text(json.dumps(capability_model), encoding="utf-8")

        interfaces = load(str(path))
        assert interfaces["deviceInfo"].properties == ["manufacturer", "firmwareVersion"]

    @pytest.mark.it("Raises a ValueError if the file is not valid JSON")
    def test_invalid_json(self):
        with pytest.raises(ValueError):
            load(io.StringIO("{not json"))
