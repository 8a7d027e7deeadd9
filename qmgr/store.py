"""Per-user directory store holding one JSON file per VM definition."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from .errors import ConfigDecodeError, ConfigNotFoundError, StorageError
from .models import VMConfig
from .util import ensure_dir

log = logger

CONFIG_EXT = '.json'


class ConfigStore:
    """Reads and writes named VM records as JSON files under ``config_dir``."""

    def __init__(self, config_dir: Path | str):
        self.config_dir = Path(config_dir)

    def config_path(self, name: str) -> Path:
        return self.config_dir / f'{name}{CONFIG_EXT}'

    def list_names(self) -> list[str]:
        try:
            entries = list(self.config_dir.iterdir())
        except FileNotFoundError:
            return []
        except OSError as ex:
            raise StorageError(
                f'reading config directory {self.config_dir}: {ex}'
            ) from ex
        names = []
        for entry in entries:
            fname = entry.name
            if fname.endswith(CONFIG_EXT):
                fname = fname[: -len(CONFIG_EXT)]
            names.append(fname)
        return names

    def load(self, name: str) -> VMConfig:
        fpath = self.config_path(name)
        try:
            text = fpath.read_text(encoding='utf-8')
        except FileNotFoundError as ex:
            raise ConfigNotFoundError(f'opening config: {ex}') from ex
        except OSError as ex:
            raise StorageError(f'opening config: {ex}') from ex
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as ex:
            raise ConfigDecodeError(f'decoding config {fpath}: {ex}') from ex
        try:
            cfg = VMConfig.from_dict(raw)
        except ConfigDecodeError as ex:
            raise ConfigDecodeError(f'decoding config {fpath}: {ex}') from ex
        log.debug('Loaded config {} from {}', name, fpath)
        return cfg

    def save(self, name: str, cfg: VMConfig) -> Path:
        ensure_dir(self.config_dir)
        fpath = self.config_path(name).absolute()
        text = json.dumps(cfg.to_dict(), indent=4) + '\n'
        try:
            fpath.write_text(text, encoding='utf-8')
        except OSError as ex:
            raise StorageError(f'creating config: {ex}') from ex
        log.debug('Wrote config {} to {}', name, fpath)
        return fpath
