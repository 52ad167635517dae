"""Configuration loading from environment variables and thingherder.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_DATA_DIR = Path("data")
_CONFIG_FILENAME = "thingherder.toml"


@dataclass
class StoreConfig:
    """JSON store file settings."""

    db_filename: str = "db.json"
    json_indent: int = 2


@dataclass
class ThingHerderConfig:
    """Top-level ThingHerder configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.store.db_filename

    @property
    def json_indent(self) -> int:
        return self.store.json_indent


def load_config(config_path: Path | None = None) -> ThingHerderConfig:
    """Load configuration from environment variables and optional thingherder.toml.

    Priority: environment variables > thingherder.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.thingherder/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".thingherder" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    store_data = file_data.get("store", {})

    return ThingHerderConfig(
        store=StoreConfig(
            db_filename=store_data.get("db_filename", "db.json"),
            json_indent=int(store_data.get("json_indent", 2)),
        ),
        data_dir=Path(os.getenv("DATA_DIR", file_data.get("data_dir", str(_DEFAULT_DATA_DIR)))),
        log_level=os.getenv("THINGHERDER_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
