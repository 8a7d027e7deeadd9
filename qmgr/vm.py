"""VM launch, disk provisioning, and template records for new VMs."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .config import LauncherConfig
from .host import check_commands
from .models import Drive, DriveType, Port, VMConfig
from .qemu import qemu_command, qemu_img_create_command
from .util import ensure_dir, run_program

log = logger

DEFAULT_DISK_SIZE = '64G'
DEFAULT_MEMORY = '2G'


def disk_path(settings: LauncherConfig, name: str) -> Path:
    return settings.disk_dir / f'{name}.qcow2'


def launch_vm(
    cfg: VMConfig, settings: LauncherConfig, *, dry_run: bool = False
) -> list[str]:
    cmd = qemu_command(cfg, settings.qemu_exec)
    if dry_run:
        return cmd
    missing = check_commands(settings.qemu_exec)
    if missing:
        log.warning('Hypervisor binary not found on PATH: {}', missing[0])
    log.info('Launching VM {}', cfg.name)
    run_program(cmd)
    return cmd


def create_disk(
    settings: LauncherConfig,
    name: str,
    size: str = DEFAULT_DISK_SIZE,
    *,
    dry_run: bool = False,
) -> Path:
    path = disk_path(settings, name)
    if dry_run:
        return path
    cmd = qemu_img_create_command(settings.qemu_img, path, size)
    ensure_dir(settings.disk_dir)
    run_program(cmd)
    return path


def template_config(name: str, disk: Path | str = '') -> VMConfig:
    """Starting record for ``create``: empty USB and ISO slots around the disk."""
    return VMConfig(
        name=name,
        memory=DEFAULT_MEMORY,
        drives=[
            Drive(type=DriveType.IMG.value),
            Drive(type=DriveType.QCOW2.value, path=str(disk)),
            Drive(type=DriveType.ISO.value),
        ],
        ports=[Port(guest=22, host=2222)],
    )
