"""Tests for bankgen.emitter module."""

import pytest

from bankgen.emitter import (
    csharp_member_name,
    python_member_name,
    render,
    render_csharp,
    render_python,
)
from bankgen.identifiers import synthesize_identifiers
from bankgen.namespaces import Namespace

EVENT_PATHS = ["event:/Weapons/Fire", "event:/UI/Click", "event:/Music/Level 01"]


def load_generated(source: str, module_name: str = "fmod_generated") -> dict:
    """Execute generated Python source and return its namespace."""
    namespace = {"__name__": module_name}
    exec(compile(source, f"{module_name}.py", "exec"), namespace)
    return namespace


@pytest.fixture
def event_table():
    return synthesize_identifiers(EVENT_PATHS, Namespace.EVENT)


class TestRenderCsharp:
    """Tests for render_csharp function."""

    def test_enum_lists_every_identifier_in_order(self, event_table):
        source = render_csharp(event_table)
        assert "public enum FmodEventId" in source
        positions = [source.index(f"        {i},") for i in event_table.identifiers()]
        assert positions == sorted(positions)

    def test_map_entries(self, event_table):
        source = render_csharp(event_table)
        assert '[FmodEventId.Fire] = "event:/Weapons/Fire",' in source
        assert '[FmodEventId.Level01] = "event:/Music/Level 01",' in source
        assert "public static string GetPath(FmodEventId id) => _map[id];" in source

    def test_bus_type_names(self):
        table = synthesize_identifiers(["bus:/", "bus:/Music"], Namespace.BUS)
        source = render_csharp(table)
        assert "public enum FmodBusId" in source
        assert "public static class FmodBusDatabase" in source
        assert '[FmodBusId.Master] = "bus:/",' in source

    def test_member_named_like_enum_type_renamed(self):
        """A member cannot share the enum's name in C#; only the C# rendering changes."""
        table = synthesize_identifiers(["event:/fmod-event-id", "event:/UI/Click"], Namespace.EVENT)
        source = render_csharp(table)

        assert "        FmodEventId_," in source
        assert '[FmodEventId.FmodEventId_] = "event:/fmod-event-id",' in source
        assert "        FmodEventId," not in source
        assert table.path_for("FmodEventId") == "event:/fmod-event-id"

    def test_code_namespace(self, event_table):
        source = render_csharp(event_table, code_namespace="Game.Audio")
        assert "namespace Game.Audio" in source

    def test_string_escaping(self):
        table = synthesize_identifiers(['event:/Say "Hi"', "event:/Back\\slash"], Namespace.EVENT)
        source = render_csharp(table)
        assert '= "event:/Say \\"Hi\\"",' in source
        assert '= "event:/Back\\\\slash",' in source

    def test_banner_has_count_and_digest(self, event_table):
        source = render_csharp(event_table)
        assert source.startswith("// <auto-generated>")
        assert f"3 events, source digest {event_table.source_digest()}" in source


class TestRenderPython:
    """Tests for render_python function."""

    def test_generated_module_round_trips_paths(self, event_table):
        module = load_generated(render_python(event_table))
        enum_cls = module["FmodEventId"]
        get_path = module["get_path"]

        assert [member.name for member in enum_cls] == event_table.identifiers()
        for entry in event_table:
            assert get_path(enum_cls[entry.identifier]) == entry.path

    def test_keyword_identifiers_renamed(self):
        table = synthesize_identifiers(["event:/None", "event:/UI/True"], Namespace.EVENT)
        module = load_generated(render_python(table))
        enum_cls = module["FmodEventId"]

        assert module["get_path"](enum_cls.None_) == "event:/None"
        assert module["get_path"](enum_cls.True_) == "event:/UI/True"

    def test_underscore_identifiers_are_members(self):
        table = synthesize_identifiers(["event:/1 shot", "event:/2 shot"], Namespace.EVENT)
        module = load_generated(render_python(table))
        names = [member.name for member in module["FmodEventId"]]
        assert names == ["_1Shot", "_2Shot"]

    def test_paths_with_quotes(self):
        table = synthesize_identifiers(["event:/it's \"quoted\""], Namespace.EVENT)
        module = load_generated(render_python(table))
        assert module["get_path"](module["FmodEventId"].ItSQuoted) == "event:/it's \"quoted\""

    def test_bus_names(self):
        table = synthesize_identifiers(["bus:/", "bus:/Sfx"], Namespace.BUS)
        module = load_generated(render_python(table))
        assert module["get_path"](module["FmodBusId"].Master) == "bus:/"


class TestCsharpMemberName:
    """Tests for csharp_member_name function."""

    def test_enum_type_name(self):
        assert csharp_member_name("FmodBusId", "FmodBusId") == "FmodBusId_"

    def test_other_names_unchanged(self):
        assert csharp_member_name("FmodEventId", "FmodBusId") == "FmodEventId"
        assert csharp_member_name("Master", "FmodBusId") == "Master"


class TestPythonMemberName:
    """Tests for python_member_name function."""

    def test_keywords(self):
        assert python_member_name("None") == "None_"
        assert python_member_name("False") == "False_"

    def test_regular_names_unchanged(self):
        assert python_member_name("Fire") == "Fire"
        assert python_member_name("_3d") == "_3d"


class TestRender:
    """Tests for render dispatch."""

    def test_dispatch(self, event_table):
        assert render(event_table, "csharp") == render_csharp(event_table)
        assert render(event_table, "python") == render_python(event_table)

    def test_options_forwarded(self, event_table):
        assert "namespace Game.Audio" in render(event_table, "csharp", code_namespace="Game.Audio")

    def test_python_ignores_csharp_options(self, event_table):
        assert render(event_table, "python", code_namespace="Game.Audio") == render_python(event_table)

    def test_unsupported_language(self, event_table):
        with pytest.raises(ValueError, match="Unsupported output language"):
            render(event_table, "rust")
