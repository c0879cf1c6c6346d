import pytest

from diagramforge.compiler import generate_from_dict
from diagramforge.compiler.deserialiser import diagram_from_dict, node_from_dict
from diagramforge.compiler.schema import (
    ConfigurationError,
    SchemaError,
    require_component_name,
    validate_diagram,
)
from diagramforge.core.Diagram import Position
from diagramforge.core.Types import GenerationMode, NodeKind


def payload(**overrides):
    data = {
        "nodes": [
            {"id": "1", "type": "input", "position": {"x": 10, "y": 20},
             "data": {"label": "Email", "dataType": "email"}},
            {"id": "2", "type": "process",
             "data": {"functionName": "validate", "dataType": "email"}},
        ],
        "connections": [{"id": "e1", "source": "1", "target": "2"}],
        "settings": {"componentName": "Signup", "useTypeScript": True, "useHooks": True},
    }
    data.update(overrides)
    return data


class TestValidate:

    def test_valid_payload(self):
        validate_diagram(payload())

    def test_edges_key_is_accepted(self):
        data = payload()
        data["edges"] = data.pop("connections")
        validate_diagram(data)

    def test_missing_connections_is_fine(self):
        data = payload()
        del data["connections"]
        validate_diagram(data)

    @pytest.mark.parametrize("data, message", [
        ([], "JSON object"),
        ({"settings": {}}, "missing required field 'nodes'"),
        ({"nodes": {}, "settings": {}}, "nodes must be a list"),
        ({"nodes": [{"id": "1"}], "settings": {}}, "missing required field 'type'"),
        ({"nodes": [{"id": 1, "type": "input"}], "settings": {}}, "id must be a string"),
        ({"nodes": [{"id": "1", "type": "widget"}], "settings": {}}, "unknown node type"),
        ({"nodes": [], "connections": {}, "settings": {}}, "connections must be a list"),
        ({"nodes": [], "connections": [{"source": "a"}], "settings": {}}, "target"),
        ({"nodes": [], "settings": []}, "settings must be an object"),
        ({"nodes": [], "settings": {"useHooks": "yes"}}, "useHooks"),
        ({"nodes": [], "settings": {"mode": "graph"}}, "settings.mode"),
    ])
    def test_structural_errors(self, data, message):
        with pytest.raises(SchemaError, match=message):
            validate_diagram(data)

    def test_duplicate_ids(self):
        data = payload(nodes=[{"id": "1", "type": "input"}, {"id": "1", "type": "output"}])
        with pytest.raises(SchemaError, match="duplicate node id"):
            validate_diagram(data)

    def test_dangling_edges_pass_validation(self):
        validate_diagram(payload(connections=[{"source": "1", "target": "missing"}]))

    def test_unknown_data_type_warns(self):
        data = payload(nodes=[{"id": "1", "type": "input", "data": {"dataType": "date"}}])
        with pytest.warns(UserWarning, match="unknown dataType 'date'"):
            validate_diagram(data)

    @pytest.mark.parametrize("node, message", [
        ({"id": "1", "type": "input", "data": {"label": 42}}, "data.label must be a string"),
        ({"id": "1", "type": "process", "data": {"description": 7}}, "data.description must be a string"),
        ({"id": "1", "type": "process", "data": {"functionName": ["f"]}}, "data.functionName"),
        ({"id": "1", "type": "output", "data": {"componentName": {}}}, "data.componentName"),
        ({"id": "1", "type": "input", "data": {"dataType": ["email"]}}, "data.dataType"),
        ({"id": "1", "type": "input", "label": 3}, r"nodes\[0\].label must be a string"),
        ({"id": "1", "type": ["input"]}, "unknown node type"),
    ])
    def test_non_text_attributes(self, node, message):
        with pytest.raises(SchemaError, match=message):
            validate_diagram(payload(nodes=[node], connections=[]))

    def test_null_attributes_are_allowed(self):
        validate_diagram(payload(nodes=[
            {"id": "1", "type": "input", "data": None},
            {"id": "2", "type": "process", "data": {"label": None, "description": None}},
        ], connections=[]))

    def test_component_name_required(self):
        assert require_component_name("Form") == "Form"
        for bad in ("", "  ", None, 5):
            with pytest.raises(ConfigurationError):
                require_component_name(bad)


class TestDeserialise:

    def test_round_trip_to_dataclasses(self):
        nodes, edges, settings = diagram_from_dict(payload())
        assert [n.kind for n in nodes] == [NodeKind.INPUT, NodeKind.PROCESS]
        assert nodes[0].attributes.label == "Email"
        assert nodes[0].position.x == 10.0
        assert nodes[1].attributes.function_name == "validate"
        assert edges[0].source_node_id == "1"
        assert edges[0].target_node_id == "2"
        assert settings.component_name == "Signup"
        assert settings.mode is GenerationMode.FLAT

    def test_defaults(self):
        node = node_from_dict({"id": "n", "type": "output"})
        assert node.attributes.data_type == "string"
        assert node.attributes.label is None
        _, _, settings = diagram_from_dict({"nodes": [], "settings": {"componentName": "X"}})
        assert settings.use_typescript is True
        assert settings.use_hooks is True

    def test_top_level_label_is_used(self):
        node = node_from_dict({"id": "n", "type": "input", "label": "Phone", "data": {}})
        assert node.attributes.label == "Phone"

    def test_legacy_edge_keys(self):
        data = payload(connections=[{"sourceNodeId": "1", "targetNodeId": "2"}])
        _, edges, _ = diagram_from_dict(data)
        assert edges[0].source_node_id == "1"
        assert edges[0].id

    def test_generate_from_dict(self):
        source = generate_from_dict(payload())
        assert "result = validate(email);" in source
        assert source.endswith("export default Signup;")

    @pytest.mark.parametrize("position", [
        {"x": None, "y": 0},
        {"x": "left", "y": "top"},
        {"x": 10 ** 400, "y": []},
    ])
    def test_unreadable_position_falls_back_to_origin(self, position):
        node = node_from_dict({"id": "n", "type": "input", "position": position})
        assert node.position == Position()
        source = generate_from_dict(payload(nodes=[
            {"id": "1", "type": "input", "position": position, "data": {"label": "Email"}},
        ], connections=[]))
        assert "useState<string>" in source

    def test_generate_from_dict_without_name(self):
        with pytest.raises(ConfigurationError):
            generate_from_dict(payload(settings={"useHooks": True}))
