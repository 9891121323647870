"""
Settings loader — reads nativebuild.yml into BuildSettings.

The file is optional. Without one, defaults apply relative to the
working directory, which reproduces the zero-argument behaviour of
running the build from the package root. Environment variables
``NBUILD_SOURCE_DIR`` and ``NBUILD_PRESETS_FILE`` override the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from nativebuild.core.errors import ConfigError
from nativebuild.core.models.settings import BuildSettings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "nativebuild.yml"

_ENV_OVERRIDES = {
    "NBUILD_SOURCE_DIR": "source_dir",
    "NBUILD_PRESETS_FILE": "presets_file",
}


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for nativebuild.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to nativebuild.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> BuildSettings:
    """Load build settings.

    Args:
        path: Explicit path to nativebuild.yml. If None, searches upward;
            if nothing is found, defaults are used.
        environ: Environment to read overrides from (default: os.environ).

    Returns:
        Validated BuildSettings.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    environ = os.environ if environ is None else environ
    explicit = path is not None

    if path is None:
        path = find_settings_file()

    data: dict = {}
    if path is None:
        root = Path.cwd()
        logger.debug("No %s found, using defaults under %s", SETTINGS_FILE, root)
    else:
        if not path.is_file():
            if explicit:
                raise ConfigError(f"Config file not found: {path}")
        else:
            data = _read_yaml(path)
        root = path.parent.resolve()

    for env_key, field_name in _ENV_OVERRIDES.items():
        value = environ.get(env_key)
        if value:
            data[field_name] = value

    data.setdefault("base_dir", root)

    try:
        settings = BuildSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid build settings: {e}") from e

    logger.debug("Native source directory: %s", settings.source_path)
    return settings


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Settings may sit under a "build" key or at the top level
    section = data.get("build", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'build' to be a mapping in {path}")
    return dict(section)
