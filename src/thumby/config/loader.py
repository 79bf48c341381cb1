"""
Unified configuration loader with priority resolution.

Root directory (THUMBY_ROOT):
- macOS/Linux: ~/.thumby
- Windows: %APPDATA%\\thumby
- Override: THUMBY_ROOT environment variable

Setting priority (highest to lowest):
1. Environment variables (THUMBY_SAVE_IMAGES, THUMBY_STORE_INFO,
   THUMBY_IMAGE_LOCATION, THUMBY_IMAGE_FOLDER, THUMBY_YOUTUBE_API_KEY)
2. Project config (.thumby/config.yaml, searched upward from cwd)
3. User config ({root_dir}/config.yaml)
4. Defaults

Example config.yaml:

    save_images: true
    image_location: folder
    image_folder: attachments/thumbnails
    store_info: true
    youtube_api_key: ${YOUTUBE_API_KEY}
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from thumby.config.defaults import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# YAML key -> environment variable
_ENV_OVERRIDES = {
    "save_images": "THUMBY_SAVE_IMAGES",
    "store_info": "THUMBY_STORE_INFO",
    "image_location": "THUMBY_IMAGE_LOCATION",
    "image_folder": "THUMBY_IMAGE_FOLDER",
    "youtube_api_key": "THUMBY_YOUTUBE_API_KEY",
}

_VALID_KEYS = frozenset(
    {
        "save_images",
        "store_info",
        "image_location",
        "image_folder",
        "youtube_api_key",
        "request_timeout",
    }
)


class ConfigSource(Enum):
    """Source of the configuration value."""

    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


class ImageLocation(Enum):
    """Where saved thumbnails are placed."""

    DEFAULT_ATTACHMENT = "attachment"
    SPECIFIED_FOLDER = "folder"

    @classmethod
    def parse(cls, value: Any) -> ImageLocation:
        """Parse a config value (enum value or member name, any case).

        Raises:
            ValueError: If the value names no location.
        """
        if isinstance(value, ImageLocation):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown image_location {value!r}")


@dataclass(frozen=True)
class ThumbyConfig:
    """Resolved thumby configuration."""

    root_dir: Path
    save_images: bool = False
    image_location: ImageLocation = ImageLocation.DEFAULT_ATTACHMENT
    image_folder: str = ""
    store_info: bool = False
    youtube_api_key: str | None = field(default=None, repr=False)
    request_timeout: float = REQUEST_TIMEOUT
    source: ConfigSource = ConfigSource.DEFAULT

    def __repr__(self) -> str:
        return (
            f"ThumbyConfig(root_dir={self.root_dir!r}, "
            f"save_images={self.save_images!r}, "
            f"image_location={self.image_location.value!r}, "
            f"image_folder={self.image_folder!r}, "
            f"store_info={self.store_info!r}, "
            f"youtube_api_key={'set' if self.youtube_api_key else None!r}, "
            f"source={self.source.value!r})"
        )


@dataclass
class ConfigValidationResult:
    """Result of validating a config dict.

    Attributes:
        errors: Fatal issues that prevent correct operation.
        warnings: Non-fatal issues that may cause unexpected behavior.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if no errors were found."""
        return len(self.errors) == 0


def _interpolate_env_vars(value: Any) -> Any:
    """Replace ${ENV_VAR} patterns with environment variable values.

    Recursively processes strings, dicts, and lists. Missing env vars
    produce a warning and are replaced with empty string.
    """
    if isinstance(value, str):

        def _replace_match(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                logger.warning(
                    "Environment variable %s not set (referenced in config)",
                    var_name,
                )
                return ""
            return env_value

        return ENV_VAR_PATTERN.sub(_replace_match, value)
    elif isinstance(value, dict):
        return {k: _interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_interpolate_env_vars(v) for v in value]
    return value


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def _load_yaml_config(
    config_path: Path, interpolate: bool = True
) -> dict[str, Any] | None:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.
        interpolate: Resolve ${ENV_VAR} references. validate-config turns
            this off so it sees the file as written.

    Returns:
        Parsed config dict, or None if the file doesn't exist or fails
        to parse.
    """
    if not config_path.exists():
        return None

    import yaml

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return None

    if config is None:
        return {}
    if not isinstance(config, dict):
        logger.warning(f"Config file {config_path} is not a valid YAML dict")
        return None
    return _interpolate_env_vars(config) if interpolate else config


def _find_project_config() -> Path | None:
    """Find project-level config by walking up from cwd.

    Returns:
        Path to .thumby/config.yaml if found, None otherwise.
    """
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        config_path = parent / ".thumby" / "config.yaml"
        if config_path.exists():
            return config_path
    return None


def _get_root_dir() -> Path:
    """Get the thumby root directory.

    Priority:
    1. THUMBY_ROOT environment variable
    2. Platform-specific default:
       - Windows: %APPDATA%\\thumby
       - macOS/Linux: ~/.thumby

    Returns:
        Path to the root directory (may not exist yet).
    """
    env_root = os.environ.get("THUMBY_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "thumby"
        return Path.home() / "AppData" / "Roaming" / "thumby"
    return Path.home() / ".thumby"


def _get_user_config_path() -> Path:
    """Get the user-level config path ({root_dir}/config.yaml)."""
    return _get_root_dir() / "config.yaml"


def _read_env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, env_var in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            overrides[key] = value
    return overrides


def _coerce(values: dict[str, Any], origin: str) -> dict[str, Any]:
    """Coerce raw values to their field types, dropping invalid ones."""
    coerced: dict[str, Any] = {}
    for key, value in values.items():
        if key not in _VALID_KEYS or value is None:
            continue
        try:
            if key in ("save_images", "store_info"):
                coerced[key] = _parse_bool(value)
            elif key == "image_location":
                coerced[key] = ImageLocation.parse(value)
            elif key == "request_timeout":
                coerced[key] = float(value)
            else:
                coerced[key] = str(value).strip()
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid {key} from {origin}: {e}")
    if coerced.get("youtube_api_key") == "":
        coerced.pop("youtube_api_key")
    return coerced


def _resolve_config() -> ThumbyConfig:
    """Resolve configuration from all sources in priority order.

    Lower-priority layers are applied first and overridden key by key. The
    recorded source is the highest-priority layer that set anything.

    Returns:
        Resolved ThumbyConfig.
    """
    root_dir = _get_root_dir()
    settings: dict[str, Any] = {}
    source = ConfigSource.DEFAULT

    user_config_path = _get_user_config_path()
    user_config = _load_yaml_config(user_config_path)
    if user_config:
        layer = _coerce(user_config, str(user_config_path))
        if layer:
            logger.info(f"Using settings from user config {user_config_path}")
            settings.update(layer)
            source = ConfigSource.USER

    project_config_path = _find_project_config()
    if project_config_path:
        project_config = _load_yaml_config(project_config_path)
        if project_config:
            layer = _coerce(project_config, str(project_config_path))
            if layer:
                logger.info(
                    f"Using settings from project config {project_config_path}"
                )
                settings.update(layer)
                source = ConfigSource.PROJECT

    env_layer = _coerce(_read_env_overrides(), "environment")
    if env_layer:
        logger.info(f"Using settings from environment: {', '.join(sorted(env_layer))}")
        settings.update(env_layer)
        source = ConfigSource.ENV

    if "youtube_api_key" not in settings:
        fallback = os.environ.get("YOUTUBE_API_KEY")
        if fallback:
            settings["youtube_api_key"] = fallback

    return ThumbyConfig(root_dir=root_dir, source=source, **settings)


@lru_cache(maxsize=1)
def get_config() -> ThumbyConfig:
    """Get resolved thumby configuration.

    Results are cached - configuration is resolved once per process.
    To force re-resolution (e.g., after env change), use clear_config_cache().
    """
    return _resolve_config()


def clear_config_cache() -> None:
    """Clear the cached configuration.

    Call this if environment variables or config files have changed
    and you need to re-resolve the configuration.
    """
    get_config.cache_clear()


def _is_env_reference(value: Any) -> bool:
    return isinstance(value, str) and bool(ENV_VAR_PATTERN.search(value))


def validate_config(config_dict: Any) -> ConfigValidationResult:
    """Validate a parsed config dict.

    Checks for:
    - Structural issues (not a mapping)
    - Unknown keys
    - Values that cannot be coerced to their field type
    - A folder policy without a folder

    Values holding ${ENV_VAR} references are not type-checked.

    Args:
        config_dict: Parsed YAML config dict, before interpolation.

    Returns:
        ConfigValidationResult with errors and warnings.
    """
    result = ConfigValidationResult()

    if config_dict is None:
        return result

    if not isinstance(config_dict, dict):
        result.errors.append(
            "Config must be a YAML mapping (dict), "
            f"got {type(config_dict).__name__}"
        )
        return result

    for key in config_dict:
        if key not in _VALID_KEYS:
            result.warnings.append(
                f"Unknown key '{key}'. Valid keys: {', '.join(sorted(_VALID_KEYS))}"
            )

    # ${VAR} references are only resolved at load time
    typed = {k: v for k, v in config_dict.items() if not _is_env_reference(v)}

    for key in ("save_images", "store_info"):
        if key in typed:
            try:
                _parse_bool(typed[key])
            except ValueError:
                result.errors.append(
                    f"'{key}' must be a boolean, got {config_dict[key]!r}"
                )

    location = None
    if "image_location" in typed:
        try:
            location = ImageLocation.parse(config_dict["image_location"])
        except ValueError:
            valid = ", ".join(m.value for m in ImageLocation)
            result.errors.append(
                f"Invalid image_location {config_dict['image_location']!r}. "
                f"Valid values: {valid}"
            )

    location_known = "image_location" not in config_dict or "image_location" in typed
    if location_known and location is ImageLocation.SPECIFIED_FOLDER and not str(
        config_dict.get("image_folder") or ""
    ).strip():
        result.errors.append(
            "image_location 'folder' requires a non-empty image_folder"
        )
    elif (
        location_known
        and location is not ImageLocation.SPECIFIED_FOLDER
        and config_dict.get("image_folder")
    ):
        result.warnings.append(
            "image_folder is ignored unless image_location is 'folder'"
        )

    if "request_timeout" in typed:
        try:
            timeout = float(typed["request_timeout"])
        except (TypeError, ValueError):
            result.errors.append(
                f"'request_timeout' must be a number, got {config_dict['request_timeout']!r}"
            )
        else:
            if timeout <= 0:
                result.errors.append("'request_timeout' must be positive")

    api_key = config_dict.get("youtube_api_key")
    if isinstance(api_key, str) and api_key and not ENV_VAR_PATTERN.search(api_key):
        result.warnings.append(
            "youtube_api_key is stored in plain text; "
            "consider ${YOUTUBE_API_KEY} interpolation"
        )

    return result
