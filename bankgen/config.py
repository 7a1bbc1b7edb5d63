"""bankgen - Configuration constants.

Module-level defaults plus small environment helpers. Everything here can
be overridden per project through ``bankgen.json`` or ``BANKGEN_*``
environment variables (see bankgen.schemas.load_settings).
"""

import os
from pathlib import Path

# Prefix for every environment variable read by bankgen
ENV_PREFIX = "BANKGEN_"

# Per-project configuration file, looked up in the project root
CONFIG_FILENAME = "bankgen.json"

# Compiled bank files
BANK_EXTENSION = ".bank"
STRINGS_BANK_SUFFIX = ".strings.bank"

# Source bank path used when the project does not configure one
# (FMOD's default "Build" output folder next to the studio project)
DEFAULT_SOURCE_BANK_PATH = "Build"

# Platform tag -> build sub-folder. Anything not listed builds into "Desktop".
PLATFORM_FOLDERS = {
    "webgl": "WebGL",
}
DEFAULT_PLATFORM_FOLDER = "Desktop"
DEFAULT_PLATFORM = "desktop"

# Directory names never descended into by the brute-force bank search
# (engine caches, tool output, VCS metadata). Compared case-insensitively.
EXCLUDED_DIRECTORY_NAMES = (
    "Library",
    "Temp",
    "Obj",
    "Logs",
    "Packages",
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".venv",
)

# Offline studio system settings
DEFAULT_MAX_CHANNELS = 64
OFFLINE_INIT_FLAGS = "NORMAL"

# Namespace for generated C# sources
DEFAULT_CODE_NAMESPACE = "Lumenfish.Audio"

# Output languages
LANGUAGE_CSHARP = "csharp"
LANGUAGE_PYTHON = "python"
SUPPORTED_LANGUAGES = (LANGUAGE_CSHARP, LANGUAGE_PYTHON)
DEFAULT_LANGUAGE = LANGUAGE_CSHARP


def get_project_root() -> Path:
    """Get the project root from environment or the current directory.

    Environment variable BANKGEN_PROJECT_ROOT overrides the working
    directory, which is the default for a build-time tool.

    Returns:
        Absolute project root path.
    """
    env_val = os.environ.get(f"{ENV_PREFIX}PROJECT_ROOT")
    if env_val and env_val.strip():
        return Path(env_val.strip()).expanduser().resolve()
    return Path.cwd().resolve()


def get_max_channels() -> int:
    """Get the offline system channel count from environment or default.

    Environment variable BANKGEN_MAX_CHANNELS allows override. Invalid or
    non-positive values fall back to DEFAULT_MAX_CHANNELS.

    Returns:
        Channel count passed to the studio system's initialize().
    """
    env_val = os.environ.get(f"{ENV_PREFIX}MAX_CHANNELS")
    if env_val:
        try:
            channels = int(env_val)
            if channels > 0:
                return channels
        except ValueError:
            pass
    return DEFAULT_MAX_CHANNELS
