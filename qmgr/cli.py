"""Modal CLI wiring for list/run/create/edit, argv checks, and logging setup."""

from __future__ import annotations

import json
import os
import sys

import scriptconfig as scfg
from loguru import logger

from .config import LauncherConfig
from .errors import QmgrError, UserInputError
from .store import ConfigStore
from .qemu import qemu_img_create_command
from .util import open_editor, shell_join
from .vm import DEFAULT_DISK_SIZE, create_disk, launch_vm, template_config

log = logger

COMMANDS = ('list', 'run', 'create', 'edit')

USAGE = '\n'.join(
    [
        'no command given',
        '  run <name>',
        '  list',
        f'  create <name> [size={DEFAULT_DISK_SIZE}]',
        '  edit <name>',
    ]
)


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    root = scfg.Value(
        None,
        type=str,
        help='Data directory holding configs/ and disks/ (default: $QMGR_ROOT or the per-user config dir).',
    )
    verbose = scfg.Value(
        0,
        short_alias=['v'],
        isflag='counter',
        help='Increase verbosity (-v, -vv).',
    )


def _require_name(args, verb: str) -> str:
    name = str(args.name or '').strip()
    if not name:
        raise UserInputError(f'no {verb} name')
    return name


class ListCLI(_BaseCommand):
    """Print the names of all stored VM configs, one per line."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        settings = LauncherConfig.from_env(root=args.root)
        store = ConfigStore(settings.config_dir)
        for name in store.list_names():
            print(name)
        return 0


class RunCLI(_BaseCommand):
    """Boot a stored VM config with qemu in the foreground."""

    name = scfg.Value(
        '', type=str, position=1, help='Name of the VM config to run.'
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print the qemu command without running it.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        name = _require_name(args, 'run')
        settings = LauncherConfig.from_env(root=args.root)
        cfg = ConfigStore(settings.config_dir).load(name)
        cmd = launch_vm(cfg, settings, dry_run=bool(args.dry_run))
        if args.dry_run:
            print(f'DRYRUN: {shell_join(cmd)}')
        return 0


class CreateCLI(_BaseCommand):
    """Create a qcow2 disk and a template config, then open it in the editor."""

    name = scfg.Value('', type=str, position=1, help='Name of the new VM.')
    size = scfg.Value(
        DEFAULT_DISK_SIZE,
        type=str,
        position=2,
        help='Size of the new qcow2 disk.',
    )
    editor = scfg.Value(
        '',
        type=str,
        help='Editor command override (default: $VISUAL, then $EDITOR).',
    )
    dry_run = scfg.Value(
        False,
        isflag=True,
        help='Print the qemu-img command and template without writing anything.',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        name = _require_name(args, 'create')
        settings = LauncherConfig.from_env(root=args.root)
        size = str(args.size or DEFAULT_DISK_SIZE)
        store = ConfigStore(settings.config_dir)
        if args.dry_run:
            disk = create_disk(settings, name, size, dry_run=True)
            img_cmd = qemu_img_create_command(settings.qemu_img, disk, size)
            print(f'DRYRUN: {shell_join(img_cmd)}')
            print(f'DRYRUN: would write {store.config_path(name).absolute()}')
            print(json.dumps(template_config(name, disk).to_dict(), indent=4))
            return 0
        disk = ''
        try:
            disk = str(create_disk(settings, name, size))
        except QmgrError as ex:
            # Keep going: the disk path can be fixed by hand in the editor.
            print(f'creating disk image: {ex}', file=sys.stderr)
            log.warning('Disk provisioning failed for {}: {}', name, ex)
        path = store.save(name, template_config(name, disk))
        print(path)
        open_editor(path, editor=args.editor)
        return 0


class EditCLI(_BaseCommand):
    """Open a VM config in $VISUAL or $EDITOR."""

    name = scfg.Value(
        '', type=str, position=1, help='Name of the VM config to edit.'
    )
    editor = scfg.Value(
        '',
        type=str,
        help='Editor command override (default: $VISUAL, then $EDITOR).',
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        name = _require_name(args, 'edit')
        settings = LauncherConfig.from_env(root=args.root)
        store = ConfigStore(settings.config_dir)
        open_editor(store.config_path(name), editor=args.editor)
        return 0


class QmgrModalCLI(scfg.ModalCLI):
    """Personal qemu VM launcher driven by per-VM JSON configs."""

    list = ListCLI
    run = RunCLI
    create = CreateCLI
    edit = EditCLI


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        print(USAGE, file=sys.stderr)
        sys.exit(0)
    if argv[0] not in COMMANDS and argv[0] not in ('-h', '--help'):
        print(f'unknown command: {argv[0]}', file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(0)

    _setup_logging(_count_verbose(argv), _default_verbosity())

    try:
        rc = QmgrModalCLI.main(argv=argv, _noexit=True)
    except QmgrError as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.debug('qmgr error: {!r}', ex)
        sys.exit(1)

    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)


def _default_verbosity() -> int:
    return LauncherConfig.from_env().verbosity


def _setup_logging(args_verbose: int, cfg_verbosity: int) -> None:
    logger.remove()
    effective_verbosity = args_verbose if args_verbose > 0 else cfg_verbosity
    level = 'WARNING'
    if effective_verbosity == 1:
        level = 'INFO'
    elif effective_verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug(
        'Logging configured at {} (effective_verbosity={}, colorize={})',
        level,
        effective_verbosity,
        colorize,
    )


def _count_verbose(argv: list[str]) -> int:
    count = 0
    for item in argv:
        if item == '--verbose':
            count += 1
        elif item.startswith('-') and not item.startswith('--'):
            short = item[1:]
            if short and set(short) <= {'v'}:
                count += len(short)
    return count
