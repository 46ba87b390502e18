"""
Configuration file support for eda-sexp.

Provides hierarchical configuration loading from:
1. Project config: .eda-sexp.toml or eda-sexp.toml in the project root
2. User config: ~/.config/eda-sexp/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from eda_sexp.exceptions import ConfigError
from eda_sexp.sexp.parser import DEFAULT_SNIPPET_LENGTH
from eda_sexp.sexp.render import DEFAULT_INDENT

# Config file names to search for in project directories
CONFIG_FILENAMES = [".eda-sexp.toml", "eda-sexp.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "eda-sexp" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "format": {"indent", "trailing_newline"},
    "parse": {"keep_line_breaks", "snippet_length"},
}


@dataclass
class FormatConfig:
    """Rendering of documents written back to disk."""

    indent: str = DEFAULT_INDENT
    trailing_newline: bool = True


@dataclass
class ParseConfig:
    """Parsing of documents read from disk."""

    keep_line_breaks: bool = True
    snippet_length: int = DEFAULT_SNIPPET_LENGTH


@dataclass
class Config:
    """Merged configuration from all sources."""

    format: FormatConfig = field(default_factory=FormatConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            data = _load_toml_file(project_config)
            _merge_config(config, data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If the file is unreadable or not valid TOML
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", context={"file": str(path)}) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read config file {path}: {e}", context={"file": str(path)}
        ) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section in KNOWN_KEYS:
        if section in data:
            _merge_section(getattr(config, section), data[section], section, source, sources)

    indent = config.format.indent
    if not indent or indent.strip(" \t"):
        raise ConfigError(
            "format.indent must be a non-empty run of spaces or tabs",
            context={"file": source, "indent": repr(indent)},
        )
    if config.parse.snippet_length < 0:
        raise ConfigError(
            "parse.snippet_length must not be negative",
            context={"file": source, "snippet_length": config.parse.snippet_length},
        )


def _merge_section(
    target: Any, data: dict[str, Any], section: str, source: str, sources: dict[str, str]
) -> None:
    """Copy known keys of one TOML table onto its dataclass, checking value types."""
    _warn_unknown_keys(data, KNOWN_KEYS[section], section, source)

    for f in fields(target):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(getattr(target, f.name))
        if type(value) is not expected:
            raise ConfigError(
                f"Config key '{section}.{f.name}' must be of type {expected.__name__}",
                context={"file": source, "value": repr(value)},
            )
        setattr(target, f.name, value)
        sources[f"{section}.{f.name}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=5)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# eda-sexp configuration file
# Place as .eda-sexp.toml in project root or ~/.config/eda-sexp/config.toml for user defaults

[format]
# Text inserted once per nesting level of multi-line lists
# indent = " "

# End written files with a newline
# trailing_newline = true

[parse]
# Keep the line layout of parsed files when formatting them
# keep_line_breaks = true

# Characters of offending text quoted in parse errors
# snippet_length = 40
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
