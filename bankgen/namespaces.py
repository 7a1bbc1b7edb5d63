"""bankgen - Path namespaces.

FMOD exposes every object under a scheme-prefixed path (``event:/...``,
``bus:/...``). A Namespace bundles everything that differs between the
events and buses pipelines so the rest of the package stays generic.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath

from bankgen.config import LANGUAGE_PYTHON


class Namespace(str, Enum):
    """Path namespaces bankgen can generate identifiers for."""

    EVENT = "event"
    BUS = "bus"

    @property
    def prefix(self) -> str:
        """Scheme prefix including the root slash, e.g. ``event:/``."""
        return f"{self.value}:/"

    @property
    def root_placeholder(self) -> str:
        """Segment used when a path has nothing after the prefix.

        FMOD may report the master bus as a bare ``bus:/``.
        """
        return _ROOT_PLACEHOLDERS[self]

    @property
    def default_token(self) -> str:
        """Token used when a segment has no alphanumeric characters."""
        return _DEFAULT_TOKENS[self]

    @property
    def enum_name(self) -> str:
        return _TYPE_NAMES[self][0]

    @property
    def database_name(self) -> str:
        return _TYPE_NAMES[self][1]

    @property
    def plural(self) -> str:
        return _PLURALS[self]

    @property
    def default_output_dir(self) -> PurePosixPath:
        """Project-relative directory for the generated file."""
        return _OUTPUT_DIRS[self]

    def output_filename(self, language: str) -> str:
        """File name of the generated source for the given language."""
        if language == LANGUAGE_PYTHON:
            return f"fmod_{self.plural}.py"
        return f"Fmod{self.plural.capitalize()}.g.cs"


_ROOT_PLACEHOLDERS = {
    Namespace.EVENT: "Evt",
    Namespace.BUS: "Master",
}

_DEFAULT_TOKENS = {
    Namespace.EVENT: "Evt",
    Namespace.BUS: "Bus",
}

_TYPE_NAMES = {
    Namespace.EVENT: ("FmodEventId", "FmodEventDatabase"),
    Namespace.BUS: ("FmodBusId", "FmodBusDatabase"),
}

_OUTPUT_DIRS = {
    Namespace.EVENT: PurePosixPath("Assets/Game/Domains/Audio/Generated"),
    Namespace.BUS: PurePosixPath("Assets/Game/Domains/AudioManagement/Generated"),
}

_PLURALS = {
    Namespace.EVENT: "events",
    Namespace.BUS: "buses",
}
