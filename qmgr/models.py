"""VM configuration records and their JSON-compatible dict form."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from .errors import ConfigDecodeError

log = logger


class DriveType(enum.Enum):
    IMG = 'img'  # raw image attached as USB storage
    QCOW2 = 'qcow2'  # copy-on-write disk on the virtio bus
    ISO = 'iso'  # optical media

    @classmethod
    def parse(cls, text: str) -> 'DriveType | None':
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass
class Drive:
    path: str = ''
    type: str = ''

    @property
    def kind(self) -> DriveType | None:
        return DriveType.parse(self.type)


@dataclass
class Port:
    guest: int = 0
    host: int = 0


@dataclass
class VMConfig:
    name: str = ''
    memory: str = ''
    drives: list[Drive] = field(default_factory=list)
    ports: list[Port] = field(default_factory=list)
    cores: int = 0
    fullscreen: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> 'VMConfig':
        """
        Decode a record loaded from JSON.

        Missing keys take their zero value and unknown keys are ignored.
        A value of the wrong type raises :class:`ConfigDecodeError`.
        """
        if not isinstance(raw, dict):
            raise ConfigDecodeError(
                f'expected a JSON object, got {type(raw).__name__}'
            )
        cfg = cls(
            name=_get(raw, 'name', str, ''),
            memory=_get(raw, 'memory', str, ''),
            cores=_get_uint(raw, 'cores'),
            fullscreen=_get(raw, 'fullscreen', bool, False),
        )
        for idx, item in enumerate(_get(raw, 'drives', list, [])):
            if item is None:
                item = {}
            if not isinstance(item, dict):
                raise ConfigDecodeError(f'drives[{idx}]: expected an object')
            drive = Drive(
                path=_get(item, 'path', str, ''),
                type=_get(item, 'type', str, ''),
            )
            if drive.kind is None:
                log.warning(
                    'Config {!r}: drives[{}] has unknown type {!r}; it will be ignored',
                    cfg.name,
                    idx,
                    drive.type,
                )
            cfg.drives.append(drive)
        for idx, item in enumerate(_get(raw, 'ports', list, [])):
            if item is None:
                item = {}
            if not isinstance(item, dict):
                raise ConfigDecodeError(f'ports[{idx}]: expected an object')
            cfg.ports.append(
                Port(guest=_get_uint(item, 'guest'), host=_get_uint(item, 'host'))
            )
        return cfg


def _get(raw: dict, key: str, typ: type, default: Any) -> Any:
    val = raw.get(key, None)
    if val is None:
        return default
    if not isinstance(val, typ):
        raise ConfigDecodeError(
            f'field {key!r}: expected {typ.__name__}, got {type(val).__name__}'
        )
    return val


def _get_uint(raw: dict, key: str) -> int:
    val = raw.get(key, None)
    if val is None:
        return 0
    # bool is an int subclass; JSON true/false is not a count.
    if isinstance(val, bool) or not isinstance(val, int) or val < 0:
        raise ConfigDecodeError(
            f'field {key!r}: expected a non-negative integer, got {val!r}'
        )
    return val
