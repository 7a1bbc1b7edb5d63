"""bankgen - Settings model.

Pydantic model for a fetch run's configuration. Settings are layered:
defaults < bankgen.json in the project root < BANKGEN_* environment
variables < explicit overrides (CLI flags).
"""

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from bankgen.config import (
    CONFIG_FILENAME,
    DEFAULT_CODE_NAMESPACE,
    DEFAULT_LANGUAGE,
    DEFAULT_PLATFORM,
    DEFAULT_SOURCE_BANK_PATH,
    ENV_PREFIX,
    get_max_channels,
    get_project_root,
)
from bankgen.namespaces import Namespace

# Settings that can be set through BANKGEN_<NAME> environment variables
_ENV_FIELDS = (
    "source_bank_path",
    "platform",
    "fallback_bank_dir",
    "backend",
    "language",
    "event_output_dir",
    "bus_output_dir",
    "code_namespace",
)


class FetchSettings(BaseModel):
    """Configuration of a fetch run."""

    model_config = ConfigDict(extra="forbid")

    project_root: Path = Field(..., description="Project root; base for relative paths")
    source_bank_path: str = Field(
        default=DEFAULT_SOURCE_BANK_PATH,
        min_length=1,
        description="FMOD bank build path, absolute or relative to project_root",
    )
    platform: str = Field(
        default=DEFAULT_PLATFORM,
        min_length=1,
        description="Build target tag, selects the platform bank sub-folder",
    )
    fallback_bank_dir: str | None = Field(
        default=None,
        min_length=1,
        description="Bank folder used when automatic discovery finds nothing",
    )
    backend: str | None = Field(
        default=None,
        pattern=r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$",
        description="Studio backend factory as 'module:callable'",
    )
    language: Literal["csharp", "python"] = Field(
        default=DEFAULT_LANGUAGE,
        description="Language of the generated source",
    )
    event_output_dir: str | None = Field(
        default=None,
        min_length=1,
        description="Output directory for generated event identifiers",
    )
    bus_output_dir: str | None = Field(
        default=None,
        min_length=1,
        description="Output directory for generated bus identifiers",
    )
    code_namespace: str = Field(
        default=DEFAULT_CODE_NAMESPACE,
        pattern=r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$",
        description="C# namespace of the generated types",
    )
    max_channels: int = Field(
        default_factory=get_max_channels,
        ge=1,
        description="Channel count for the offline studio system",
    )

    def output_dir(self, namespace: Namespace) -> Path:
        """Absolute output directory for a namespace."""
        configured = self.event_output_dir if namespace is Namespace.EVENT else self.bus_output_dir
        directory = Path(configured) if configured else Path(namespace.default_output_dir)
        if not directory.is_absolute():
            directory = self.project_root / directory
        return directory

    def output_path(self, namespace: Namespace) -> Path:
        """Absolute path of the generated file for a namespace."""
        return self.output_dir(namespace) / namespace.output_filename(self.language)


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a bankgen.json file.

    Raises:
        ValueError: If the file cannot be read or is not a JSON object.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Cannot read {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def load_settings(project_root: str | Path | None = None, **overrides: Any) -> FetchSettings:
    """Load settings for a project.

    Args:
        project_root: Project root. Defaults to BANKGEN_PROJECT_ROOT or the
            current directory.
        **overrides: Explicit values; None values are ignored.

    Returns:
        Validated FetchSettings.

    Raises:
        ValueError: If the config file is unreadable or malformed, or validation fails
            (pydantic.ValidationError is a ValueError).
    """
    root = Path(project_root).expanduser().resolve() if project_root else get_project_root()

    data: dict[str, Any] = {}
    config_path = root / CONFIG_FILENAME
    if config_path.is_file():
        data.update(_read_config_file(config_path))

    for name in _ENV_FIELDS:
        env_val = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if env_val:
            data[name] = env_val.strip()

    data.update({key: value for key, value in overrides.items() if value is not None})
    data["project_root"] = root
    return FetchSettings.model_validate(data)
