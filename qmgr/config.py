"""Process-wide launcher settings resolved once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import ubelt as ub

from .util import expand

APPNAME = 'qmgr'
DEFAULT_QEMU_EXEC = 'qemu-system-x86_64'
DEFAULT_QEMU_IMG = 'qemu-img'


def default_root() -> Path:
    # Not created here; listing a fresh install must not touch the disk.
    return Path(ub.Path.appdir(APPNAME, type='config'))


@dataclass
class LauncherConfig:
    root: Path
    qemu_exec: str = DEFAULT_QEMU_EXEC
    qemu_img: str = DEFAULT_QEMU_IMG
    verbosity: int = 1

    @property
    def config_dir(self) -> Path:
        return self.root / 'configs'

    @property
    def disk_dir(self) -> Path:
        return self.root / 'disks'

    @classmethod
    def from_env(cls, root: str | Path | None = None) -> 'LauncherConfig':
        """Build settings from QMGR_* variables; ``root`` beats $QMGR_ROOT."""
        root_text = str(root) if root else os.environ.get('QMGR_ROOT', '')
        resolved = (
            Path(expand(root_text)).absolute() if root_text else default_root()
        )
        verbosity_text = os.environ.get('QMGR_VERBOSITY', '').strip()
        try:
            verbosity = int(verbosity_text) if verbosity_text else 1
        except ValueError:
            verbosity = 1
        return cls(
            root=resolved,
            qemu_exec=expand(os.environ.get('QMGR_QEMU') or DEFAULT_QEMU_EXEC),
            qemu_img=expand(os.environ.get('QMGR_QEMU_IMG') or DEFAULT_QEMU_IMG),
            verbosity=verbosity,
        )
