"""Translate a VM record into qemu-system and qemu-img command lines."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .host import host_cpu_count
from .models import DriveType, VMConfig

log = logger

PREAMBLE_ARGS = [
    '-machine', 'q35',
    '-device', 'qemu-xhci,id=xhci',
    '-device', 'usb-kbd',
    '-device', 'usb-tablet',
    '-device', 'virtio-net,netdev=net0',
]


def drive_args(idx: int, kind: DriveType, path: str) -> list[str]:
    if kind is DriveType.IMG:
        # Raw images hang off the xHCI controller as USB sticks.
        return [
            '-drive', f'if=none,id=usb{idx},format=raw,file={path}',
            '-device', f'usb-storage,bus=xhci.0,drive=usb{idx}',
        ]
    if kind is DriveType.QCOW2:
        return ['-drive', f'if=virtio,format=qcow2,file={path}']
    if kind is DriveType.ISO:
        return ['-cdrom', path]
    raise AssertionError(f'unhandled drive type: {kind!r}')


def resolve_cores(cfg: VMConfig, cpu_count: int | None = None) -> int:
    if cfg.cores:
        return cfg.cores
    if cpu_count is None:
        cpu_count = host_cpu_count() or 1
    return cpu_count


def hostfwd_spec(cfg: VMConfig) -> str:
    return ','.join(f'tcp::{p.host}-:{p.guest}' for p in cfg.ports)


def build_qemu_args(
    cfg: VMConfig, *, cpu_count: int | None = None
) -> list[str]:
    """
    Build qemu-system arguments for ``cfg`` without touching the record.

    A drive's USB device id comes from its index in the full drive list,
    so entries skipped for an empty path still consume an index. Drives
    with an empty path or an unknown type produce no arguments. A stored
    core count of 0 is replaced by the host CPU count (or ``cpu_count``).
    """
    args: list[str] = ['-m', cfg.memory, *PREAMBLE_ARGS]
    for idx, drive in enumerate(cfg.drives):
        if not drive.path:
            continue
        kind = drive.kind
        if kind is None:
            log.debug('Skipping drive {} with unknown type {!r}', idx, drive.type)
            continue
        args.extend(drive_args(idx, kind, drive.path))
    cores = resolve_cores(cfg, cpu_count)
    args.extend(['-enable-kvm', '-cpu', 'host', '-smp', str(cores)])
    if cfg.fullscreen:
        args.extend(['-display', 'gtk,full-screen=on'])
    if cfg.ports:
        args.extend(['-netdev', f'user,id=net0,hostfwd={hostfwd_spec(cfg)}'])
    return args


def qemu_command(
    cfg: VMConfig, qemu_exec: str, *, cpu_count: int | None = None
) -> list[str]:
    return [qemu_exec, *build_qemu_args(cfg, cpu_count=cpu_count)]


def qemu_img_create_command(
    qemu_img: str, path: Path | str, size: str
) -> list[str]:
    return [qemu_img, 'create', '-f', 'qcow2', str(path), size]
