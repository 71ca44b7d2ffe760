"""
Configuration module for the incremental generation engine.

Settings are grouped in sections (discovery, budget, state, generation,
logging). Values resolve in this order: packaged defaults.yaml, then an
optional project file (YAML or JSON), then ``ARE_<SECTION>_<KEY>``
environment variables.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

logger = logging.getLogger(__name__)

_PACKAGED_DEFAULTS = Path(__file__).parent / "defaults.yaml"

# Project-level config location, relative to the project root
PROJECT_CONFIG_PATH = Path(".are") / "config.yaml"

ENV_PREFIX = "ARE"

_YAML_SUFFIXES = (".yaml", ".yml")
_JSON_SUFFIXES = (".json",)


@lru_cache(maxsize=1)
def _packaged_defaults() -> dict[str, Any]:
    """Read defaults.yaml once; an unreadable file yields no defaults."""
    try:
        loaded = yaml.safe_load(_PACKAGED_DEFAULTS.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning(f"Packaged defaults missing: {_PACKAGED_DEFAULTS}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Packaged defaults are not valid YAML: {e}")
        return {}
    return loaded or {}


def _default(section: str, key: str, fallback: Any) -> Any:
    return (_packaged_defaults().get(section) or {}).get(key, fallback)


def _default_list(section: str, key: str, fallback: list[str]) -> Callable[[], list[str]]:
    return lambda: list(_default(section, key, fallback))


@dataclass
class DiscoveryConfig:
    """File discovery and filtering."""

    vendor_dirs: list[str] = field(
        default_factory=_default_list(
            "discovery",
            "vendor_dirs",
            ["node_modules", "vendor", ".git", "dist", "build", "__pycache__",
             ".next", "venv", ".venv", "target"],
        )
    )
    exclude_patterns: list[str] = field(
        default_factory=_default_list("discovery", "exclude_patterns", [])
    )
    use_gitignore: bool = field(
        default_factory=lambda: _default("discovery", "use_gitignore", True)
    )
    exclude_binary: bool = field(
        default_factory=lambda: _default("discovery", "exclude_binary", True)
    )
    follow_symlinks: bool = field(
        default_factory=lambda: _default("discovery", "follow_symlinks", False)
    )
    include_dotfiles: bool = field(
        default_factory=lambda: _default("discovery", "include_dotfiles", True)
    )


@dataclass
class BudgetConfig:
    """Token budget for chunking oversized files."""

    chunk_size: int = field(default_factory=lambda: _default("budget", "chunk_size", 3000))
    overlap_lines: int = field(default_factory=lambda: _default("budget", "overlap_lines", 10))
    chunk_threshold: int = field(
        default_factory=lambda: _default("budget", "chunk_threshold", 4000)
    )
    encoding: str = field(default_factory=lambda: _default("budget", "encoding", "cl100k_base"))


@dataclass
class StateConfig:
    """Location of the state database, relative to the project root."""

    state_dir: str = field(default_factory=lambda: _default("state", "state_dir", ".are"))
    db_name: str = field(default_factory=lambda: _default("state", "db_name", "state.db"))

    def db_path(self, root: Path | str) -> Path:
        return Path(root) / self.state_dir / self.db_name


@dataclass
class GenerationConfig:
    """Dispatching work units to the summarizer."""

    max_concurrency: int = field(
        default_factory=lambda: _default("generation", "max_concurrency", 8)
    )


@dataclass
class LoggingConfig:
    """Package logger settings."""

    level: str = field(default_factory=lambda: _default("logging", "level", "INFO"))
    format: str = field(default_factory=lambda: _default("logging", "format", "%(message)s"))


@dataclass
class AREConfig:
    """Root configuration, one attribute per section."""

    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    state: StateConfig = field(default_factory=StateConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "AREConfig":
        """
        Read a YAML or JSON config file.

        Sections missing from the file keep their defaults.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            ValueError: For an unknown suffix or an unknown section key
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"No config file at {path}")

        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return cls()

        if path.suffix in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        elif path.suffix in _JSON_SUFFIXES:
            data = json.loads(text)
        else:
            raise ValueError(f"Config files must be YAML or JSON, got '{path.suffix}'")

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping of sections")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AREConfig":
        config = cls()
        for section in fields(cls):
            values = data.get(section.name)
            if values is None:
                continue
            try:
                setattr(config, section.name, section.default_factory(**values))
            except TypeError as e:
                raise ValueError(f"Invalid '{section.name}' section: {e}") from e
        return config

    def apply_env_overrides(self) -> "AREConfig":
        """
        Override settings from ``ARE_<SECTION>_<KEY>`` environment variables.

        Values are converted to the type of the setting they replace: lists
        are comma-separated, booleans accept true/1/yes/on.
        For example ``ARE_BUDGET_CHUNK_SIZE=2000`` or
        ``ARE_DISCOVERY_VENDOR_DIRS=node_modules,dist``.
        """
        for section in fields(self):
            section_obj = getattr(self, section.name)
            for setting in fields(section_obj):
                env_var = f"{ENV_PREFIX}_{section.name}_{setting.name}".upper()
                raw = os.environ.get(env_var)
                if raw is None:
                    continue
                current = getattr(section_obj, setting.name)
                setattr(section_obj, setting.name, _coerce(raw, current))
                logger.debug(f"{env_var} overrides {section.name}.{setting.name}")
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """Write the configuration as YAML or JSON, chosen by suffix."""
        path = Path(path)
        if path.suffix in _YAML_SUFFIXES:
            text = self.to_yaml()
        elif path.suffix in _JSON_SUFFIXES:
            text = self.to_json()
        else:
            raise ValueError(f"Config files must be YAML or JSON, got '{path.suffix}'")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Comma-separated items, blanks dropped."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _coerce(raw: str, current: Any) -> Any:
    # bool first: bool is a subclass of int
    if isinstance(current, bool):
        return _parse_bool(raw)
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, list):
        return _parse_list(raw)
    return raw


def find_config(root: Path | str) -> Optional[Path]:
    """Return the project config file under root, if there is one."""
    candidate = Path(root) / PROJECT_CONFIG_PATH
    return candidate if candidate.is_file() else None


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> AREConfig:
    """
    Build the effective configuration.

    Args:
        config_path: Project config file; built-in defaults when None
        apply_env: Apply ``ARE_*`` environment overrides on top

    Returns:
        AREConfig instance
    """
    config = AREConfig.from_file(config_path) if config_path else AREConfig()
    return config.apply_env_overrides() if apply_env else config
