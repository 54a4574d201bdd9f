"""Per-user configuration data structures and loading.

Configuration lives in <config_dir>/config.toml. Every key is optional; a
missing file means all defaults. Defaults follow the XDG base directory layout
so nothing outside the user's home directory is touched.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import tomlkit

from aether.manifest import DEFAULT_DECOMPRESS_COMMAND

CONFIG_FILENAME = "config.toml"


def _xdg_dir(env_var: str, fallback: str) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value)
    return Path.home() / fallback


def default_config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / "aether"


@dataclass(frozen=True)
class AetherConfig:
    """Immutable per-user configuration.

    Attributes:
        bin_dir: Directory that receives symlinks to installed executables
        cache_dir: Per-user cache directory
        config_dir: Directory holding config.toml
        store_dir: Package store, one subdirectory per installed package
        decompress_command: Filter used to decompress .MTREE files
    """

    bin_dir: Path
    cache_dir: Path
    config_dir: Path
    store_dir: Path
    decompress_command: tuple[str, ...]

    @staticmethod
    def defaults(config_dir: Path | None = None) -> "AetherConfig":
        """Return the default configuration for the current user."""
        return AetherConfig(
            bin_dir=Path.home() / ".local" / "bin",
            cache_dir=_xdg_dir("XDG_CACHE_HOME", ".cache") / "aether",
            config_dir=config_dir if config_dir is not None else default_config_dir(),
            store_dir=_xdg_dir("XDG_DATA_HOME", ".local/share") / "aether" / "packages",
            decompress_command=DEFAULT_DECOMPRESS_COMMAND,
        )


def _path_value(data: dict[str, object], key: str, default: Path, config_path: Path) -> Path:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{key}' in {config_path} must be a non-empty string")
    return Path(value).expanduser()


def parse_config(text: str, config_path: Path, config_dir: Path) -> AetherConfig:
    """Parse config.toml content, filling unset keys with defaults.

    Raises:
        ValueError: If the TOML is malformed or a value has the wrong type
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Malformed config file {config_path}: {e}") from e

    defaults = AetherConfig.defaults(config_dir)

    command = data.get("decompress_command")
    if command is None:
        decompress_command = defaults.decompress_command
    elif (
        isinstance(command, list)
        and command
        and all(isinstance(part, str) and part for part in command)
    ):
        decompress_command = tuple(command)
    else:
        raise ValueError(
            f"'decompress_command' in {config_path} must be a non-empty list of strings"
        )

    return AetherConfig(
        bin_dir=_path_value(data, "bin_dir", defaults.bin_dir, config_path),
        cache_dir=_path_value(data, "cache_dir", defaults.cache_dir, config_path),
        config_dir=config_dir,
        store_dir=_path_value(data, "store_dir", defaults.store_dir, config_path),
        decompress_command=decompress_command,
    )


def render_config(config: AetherConfig) -> str:
    """Render config as config.toml content.

    Uses tomlkit so paths containing quotes or backslashes are escaped.
    """
    doc = tomlkit.document()
    doc.add(tomlkit.comment("aether configuration"))
    doc["bin_dir"] = str(config.bin_dir)
    doc["cache_dir"] = str(config.cache_dir)
    doc["store_dir"] = str(config.store_dir)
    doc["decompress_command"] = list(config.decompress_command)
    return tomlkit.dumps(doc)


class ConfigStore(ABC):
    """Abstract interface for configuration access.

    Lets tests use an in-memory configuration without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if a config file exists."""
        ...

    @abstractmethod
    def load(self) -> AetherConfig:
        """Load configuration, using defaults for anything unset.

        Raises:
            ValueError: If the config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: AetherConfig) -> None:
        """Persist configuration."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Path of the config file (for messages)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Reads and writes <config_dir>/config.toml."""

    def __init__(self, config_dir: Path | None = None) -> None:
        self._config_dir = config_dir if config_dir is not None else default_config_dir()

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> AetherConfig:
        config_path = self.path()
        if not config_path.exists():
            return AetherConfig.defaults(self._config_dir)
        return parse_config(config_path.read_text(encoding="utf-8"), config_path, self._config_dir)

    def save(self, config: AetherConfig) -> None:
        """Write config.toml, creating the config directory if needed.

        Raises:
            PermissionError: If the directory or file cannot be written
        """
        config_path = self.path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(render_config(config), encoding="utf-8")
        except PermissionError:
            raise PermissionError(
                f"Cannot write to file: {config_path}\n"
                f"Check permissions on {config_path.parent}."
            ) from None

    def path(self) -> Path:
        return self._config_dir / CONFIG_FILENAME


class InMemoryConfigStore(ConfigStore):
    """Test implementation that keeps config in memory."""

    def __init__(self, config: AetherConfig | None = None) -> None:
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> AetherConfig:
        if self._config is None:
            return AetherConfig.defaults(Path("/fake/aether/config"))
        return self._config

    def save(self, config: AetherConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/aether/config") / CONFIG_FILENAME
