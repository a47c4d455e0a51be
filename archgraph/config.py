"""
Analysis Configuration
======================

Tunable settings for graph construction and the analysis passes.

Configuration files searched in order:
1. .archgraph/config.json
2. .archgraph/config.yaml
3. .archgraph/config.yml

Project configuration merges with defaults, with project settings
taking precedence.

Usage:
    from archgraph.config import AnalysisConfig, ConfigLoader, load_config

    # Load config for a project (defaults when no file exists)
    config = ConfigLoader(Path("/path/to/project")).load()

    # Load an explicit file
    config = load_config(Path("architecture.yaml"))

    print(config.hub_threshold, config.merge_ratio)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError


# =============================================================================
# DEFAULTS
# =============================================================================

CONFIG_FILENAMES = [
    "config.json",
    "config.yaml",
    "config.yml",
]

ARCHGRAPH_DIR = ".archgraph"

DEFAULT_EXTENSIONS = [".js", ".ts", ".jsx", ".tsx", ".mjs", ".cjs", ".py"]

DEFAULT_IGNORE_DIRS = [
    "__pycache__",
    "node_modules",
    ".git",
    ".venv",
    "venv",
    "env",
    "dist",
    "build",
    "coverage",
    ".next",
    ".nuxt",
    "target",
    ".archgraph",
]

DEFAULT_IGNORE_PATTERNS = [
    "*.min.js",
    "*.bundle.js",
    "*.map",
    "*.d.ts",
]


@dataclass
class AnalysisConfig:
    """Settings shared by the graph builder and every analysis pass."""

    # Graph construction
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    ignore_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))
    ignore_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    path_aliases: dict[str, str] = field(default_factory=dict)
    max_workers: int | None = None

    # Coupling
    hub_threshold: int = 3
    dependent_threshold: int = 3
    highly_coupled_threshold: int = 4

    # Cohesion
    low_cohesion_threshold: float = 0.5
    module_depth: int | None = None

    # Service boundaries
    merge_ratio: float = 0.5
    cohesion_threshold: float = 0.5
    min_service_files: int = 2
    max_service_ratio: float = 0.4
    size_penalty: float = 15.0
    quality_cohesion_weight: float = 0.6
    quality_coupling_weight: float = 0.4
    split_threshold: int = 20

    # Rendering
    max_diagram_nodes: int = 50

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisConfig":
        """Load from dict, keeping defaults for missing keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


# =============================================================================
# CONFIG SCHEMA DEFINITION
# =============================================================================

# key -> accepted python types
CONFIG_SCHEMA: dict[str, tuple[type, ...]] = {
    "extensions": (list,),
    "ignore_dirs": (list,),
    "ignore_patterns": (list,),
    "path_aliases": (dict,),
    "max_workers": (int, type(None)),
    "hub_threshold": (int,),
    "dependent_threshold": (int,),
    "highly_coupled_threshold": (int,),
    "low_cohesion_threshold": (int, float),
    "module_depth": (int, type(None)),
    "merge_ratio": (int, float),
    "cohesion_threshold": (int, float),
    "min_service_files": (int,),
    "max_service_ratio": (int, float),
    "size_penalty": (int, float),
    "quality_cohesion_weight": (int, float),
    "quality_coupling_weight": (int, float),
    "split_threshold": (int,),
    "max_diagram_nodes": (int,),
}

RATIO_KEYS = {
    "low_cohesion_threshold",
    "merge_ratio",
    "cohesion_threshold",
    "max_service_ratio",
    "quality_cohesion_weight",
    "quality_coupling_weight",
}


# =============================================================================
# CONFIG LOADER
# =============================================================================

class ConfigLoader:
    """
    Loads configuration from a project's .archgraph directory.

    Attributes:
        project_dir: Root directory of the project
        config_dir: Path to .archgraph directory
        config_file: Path to the config file (if found)
        config: Loaded configuration
    """

    def __init__(self, project_dir: Path | str):
        """
        Initialize config loader.

        Args:
            project_dir: Root directory of the project
        """
        self.project_dir = Path(project_dir).resolve()
        self.config_dir = self.project_dir / ARCHGRAPH_DIR
        self.config_file: Path | None = None
        self.config: AnalysisConfig | None = None

    def load(self) -> AnalysisConfig:
        """
        Load configuration, falling back to defaults when no file exists.

        Raises:
            ConfigError: If the config file cannot be parsed or is invalid
        """
        self.config_file = self._find_config_file()

        if self.config_file is None:
            self.config = AnalysisConfig()
            return self.config

        self.config = load_config(self.config_file)
        return self.config

    def _find_config_file(self) -> Path | None:
        """Find the first existing config file."""
        if not self.config_dir.is_dir():
            return None

        for filename in CONFIG_FILENAMES:
            config_path = self.config_dir / filename
            if config_path.exists():
                return config_path

        return None

    def has_config_file(self) -> bool:
        """Check if a config file was found by the last load()."""
        return self.config_file is not None


def read_config_file(config_path: Path) -> dict[str, Any]:
    """
    Read and parse a config file based on its extension.

    Raises:
        ConfigError: If the format is unsupported or parsing fails
    """
    suffix = config_path.suffix.lower()

    try:
        with open(config_path, encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                raise ConfigError(f"Unsupported config file format: {suffix}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path.name}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path.name}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a mapping at the top level")

    return data


def validate_config(config_data: dict[str, Any]) -> list[str]:
    """
    Validate config data against the schema.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    unknown_keys = set(config_data) - set(CONFIG_SCHEMA)
    if unknown_keys:
        errors.append(f"Unknown keys: {', '.join(sorted(unknown_keys))}")

    for key, expected in CONFIG_SCHEMA.items():
        if key not in config_data:
            continue
        value = config_data[key]

        # bool is an int subclass, never a valid threshold
        if isinstance(value, bool) or not isinstance(value, expected):
            names = " or ".join(t.__name__ for t in expected)
            errors.append(f"'{key}' must be of type {names}")
            continue

        if isinstance(value, list):
            for i, item in enumerate(value):
                if not isinstance(item, str):
                    errors.append(f"'{key}[{i}]' must be a string")
        elif isinstance(value, dict):
            for alias, target in value.items():
                if not isinstance(target, str):
                    errors.append(f"'{key}.{alias}' must be a string")
        elif key in RATIO_KEYS and not 0 <= value <= 1:
            errors.append(f"'{key}' must be between 0 and 1")
        elif isinstance(value, int) and value < 0:
            errors.append(f"'{key}' must not be negative")

    if config_data.get("max_workers") == 0:
        errors.append("'max_workers' must be at least 1")

    return errors


def load_config(config_path: Path | str) -> AnalysisConfig:
    """
    Load configuration from an explicit file and merge it over the defaults.

    Raises:
        ConfigError: If the file cannot be parsed or has validation errors
    """
    config_path = Path(config_path)
    config_data = read_config_file(config_path)

    errors = validate_config(config_data)
    if errors:
        message = f"Config validation errors in {config_path.name}:\n"
        message += "\n".join(f"  - {err}" for err in errors)
        raise ConfigError(message, errors)

    return AnalysisConfig.from_dict(config_data)
