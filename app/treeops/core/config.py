"""User configuration for tree operations.

Holds the defaults the CLI applies when a flag is not given on the
command line. Configuration is stored in ~/.config/treeops/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from treeops.core.paths import ensure_config_dir, get_config_path
from treeops.filesystem.primitives import DEFAULT_DIRECTORY_PERMISSIONS
from treeops.models.criteria import SelectCriterionMode
from treeops.models.filters import FileTypeFilter
from treeops.models.permissions import format_octal, parse_mode

logger = logging.getLogger(__name__)


class TreeOpsConfig(BaseModel):
    """Default settings for tree operations.

    Attributes:
        copy_empty_directories: Create target directories for every visited
            source directory, even if nothing is copied into them.
        delete_empty_source_directories: Remove source directories emptied
            by a move.
        directory_permissions: Mode for directories created in target trees.
        include_symlinks: Select symbolic links in addition to regular files.
        include_other_files: Select other non-regular files as well.
        match_any: Combine selection criteria with OR instead of AND.
    """

    model_config = ConfigDict(extra="forbid")

    copy_empty_directories: Annotated[
        bool,
        Field(description="Create empty target directories"),
    ] = False
    delete_empty_source_directories: Annotated[
        bool,
        Field(description="Remove emptied source directories after a move"),
    ] = False
    directory_permissions: Annotated[
        int,
        Field(ge=0, le=0o7777, description="Mode for created directories"),
    ] = DEFAULT_DIRECTORY_PERMISSIONS
    include_symlinks: Annotated[
        bool,
        Field(description="Select symbolic links"),
    ] = False
    include_other_files: Annotated[
        bool,
        Field(description="Select devices, pipes and sockets"),
    ] = False
    match_any: Annotated[
        bool,
        Field(description="Select files matching any criterion"),
    ] = False

    @field_validator("directory_permissions", mode="before")
    @classmethod
    def validate_directory_permissions(cls, v: object) -> int:
        """Accept permissions as an int or an octal/symbolic string."""
        if isinstance(v, bool) or not isinstance(v, int | str):
            msg = "directory_permissions must be an integer or a mode string"
            raise ValueError(msg)
        return parse_mode(v)

    @property
    def combine(self) -> SelectCriterionMode:
        """Criteria combination mode implied by match_any."""
        return SelectCriterionMode.OR if self.match_any else SelectCriterionMode.AND

    def file_types(self) -> FileTypeFilter:
        """File type filter implied by the include_* settings."""
        return FileTypeFilter(
            include_regular=True,
            include_symlink=self.include_symlinks,
            include_other=self.include_other_files,
        )


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> TreeOpsConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TreeOpsConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return TreeOpsConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> TreeOpsConfig:
    """Load configuration, falling back to defaults if the file is missing.

    Parse and validation errors are not swallowed.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return TreeOpsConfig()


def save_config(config: TreeOpsConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The TreeOpsConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    if path is None:
        try:
            ensure_config_dir()
        except RuntimeError as e:
            raise ConfigError(str(e)) from e
        config_path = get_config_path()
    else:
        config_path = path
        config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    logger.debug("Saved config to %s", config_path)
    return config_path


def config_to_dict(config: TreeOpsConfig) -> dict[str, object]:
    """Convert TreeOpsConfig to a dictionary for TOML serialization.

    Directory permissions are written as an octal string so the file
    stays readable.

    Args:
        config: The TreeOpsConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    data: dict[str, object] = config.model_dump()
    data["directory_permissions"] = format_octal(config.directory_permissions)
    return data
