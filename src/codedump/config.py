"""
Global Configuration and Defaults.

This module centralizes the built-in defaults for a dump run (output file,
folders to scan, allow-lists) and the loader for the optional YAML config
file that overrides them.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "codebase_dump.txt"

# Config file discovered in the working directory when none is given
DEFAULT_CONFIG_PATH = Path(".codedump/config.yaml")
CONFIG_ENV_VAR = "CODEDUMP_CONFIG"

# --- Folders ---

# Relative to where the tool is run. Used only when no folders are passed.
DEFAULT_FOLDERS: Tuple[str, ...] = (
    "src/router",
    "src/stores",
    "src/App.vue",
)

# --- Allow-lists ---

# Always included when found inside a scanned folder, whatever the extension.
# Only the basename of each entry is compared.
INCLUDE_FILES: Tuple[str, ...] = (
    "README.md",
    "package.json",
    "requirements.txt",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "CMakeLists.txt",
    "Makefile",
    "Dockerfile",
    ".env.example",
)

# Glob patterns or exact basenames. Matching is case-sensitive.
CODE_EXTENSIONS: Tuple[str, ...] = (
    # Python / JavaScript / TypeScript
    "*.py",
    "*.js",
    "*.ts",
    "*.jsx",
    "*.tsx",
    # C family
    "*.java",
    "*.c",
    "*.cpp",
    "*.cc",
    "*.cxx",
    "*.h",
    "*.hpp",
    "*.cs",
    # Scripting
    "*.php",
    "*.rb",
    "*.go",
    "*.rs",
    "*.swift",
    "*.kt",
    "*.scala",
    # Shells
    "*.sh",
    "*.bash",
    "*.zsh",
    "*.fish",
    "*.ps1",
    # R / Objective-C / MATLAB / Perl / Lua / Vim
    "*.r",
    "*.R",
    "*.m",
    "*.mm",
    "*.pl",
    "*.pm",
    "*.lua",
    "*.vim",
    # Query / Markup / Styles
    "*.sql",
    "*.html",
    "*.htm",
    "*.css",
    "*.scss",
    "*.sass",
    "*.less",
    "*.xml",
    # Data / Config
    "*.json",
    "*.yaml",
    "*.yml",
    "*.toml",
    "*.ini",
    "*.conf",
    "*.config",
    # Docs
    "*.md",
    "*.txt",
    # Build files
    "*.dockerfile",
    "Dockerfile",
    "Makefile",
    "*.mk",
    "*.cmake",
    "*.gradle",
    "*.sbt",
    # Clojure / Elixir / Erlang / Dart
    "*.clj",
    "*.cljs",
    "*.ex",
    "*.exs",
    "*.erl",
    "*.hrl",
    "*.dart",
    # Fortran / Assembly
    "*.f90",
    "*.f95",
    "*.asm",
    "*.s",
)


class ConfigError(Exception):
    """Raised when the config file cannot be read or has invalid values."""


class DumpConfig(BaseModel):
    """
    Effective settings for a dump run.

    Attributes:
        output_file: Output path used when none is given on the command line.
        default_folders: Folders scanned when none are given on the command line.
        include_files: Basenames always aggregated regardless of extension.
        code_extensions: Glob patterns / exact basenames qualifying a file.
        extra_extensions: Patterns appended to code_extensions.
    """

    model_config = ConfigDict(extra="forbid")

    output_file: str = DEFAULT_OUTPUT_FILE
    default_folders: List[str] = list(DEFAULT_FOLDERS)
    include_files: List[str] = list(INCLUDE_FILES)
    code_extensions: List[str] = list(CODE_EXTENSIONS)
    extra_extensions: List[str] = []

    @field_validator("extra_extensions", mode="before")
    @classmethod
    def _single_pattern_as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @model_validator(mode="after")
    def _append_extra_extensions(self) -> "DumpConfig":
        if self.extra_extensions:
            self.code_extensions = self.code_extensions + self.extra_extensions
        return self


def resolve_config_path(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Pick the config file to load.

    Priority: explicit path > $CODEDUMP_CONFIG > .codedump/config.yaml.
    An explicit or environment path is returned even if missing, so the
    caller can report it. The implicit default is only used if it exists.
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(config_path: Optional[Path] = None) -> DumpConfig:
    """
    Build the effective configuration.

    Args:
        config_path: Optional YAML file overriding the built-in defaults.

    Returns:
        DumpConfig: Defaults overlaid with the file's values.

    Raises:
        ConfigError: If the file is missing, malformed, or has invalid values.
    """
    path = resolve_config_path(config_path)
    if path is None:
        return DumpConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    try:
        config = DumpConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config
