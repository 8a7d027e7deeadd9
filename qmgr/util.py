"""Shared utility helpers for subprocess execution, paths, and command formatting."""

from __future__ import annotations

import os
import shlex
import signal
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .errors import ExecutionError, StorageError

log = logger


def shell_join(cmd: Sequence[str]) -> str:
    return ' '.join(shlex.quote(c) for c in cmd)


def run_program(
    cmd: Sequence[str],
    *,
    env: Optional[dict[str, str]] = None,
) -> None:
    """
    Run ``cmd`` in the foreground with the caller's stdin/stdout/stderr.

    Blocks until the child exits. Any failure to start the program, a
    non-zero exit status, or termination by a signal raises
    :class:`ExecutionError`.
    """
    cmd = [str(c) for c in cmd]
    prog = cmd[0] if cmd else ''
    log.opt(depth=1).info('RUN: {}', shell_join(cmd))
    try:
        p = subprocess.run(cmd, env=env)
    except OSError as ex:
        log.opt(depth=1).error('Could not start {}: {}', prog, ex)
        raise ExecutionError(cmd, f'executing {prog}: {ex}') from ex
    code = p.returncode
    if code < 0:
        try:
            signame = signal.Signals(-code).name
        except ValueError:
            signame = f'signal {-code}'
        raise ExecutionError(
            cmd, f'executing {prog}: terminated by {signame}', code=code
        )
    if code != 0:
        log.opt(depth=1).error(
            'Command failed code={} cmd={}', code, shell_join(cmd)
        )
        raise ExecutionError(
            cmd, f'executing {prog}: exit status {code}', code=code
        )
    log.opt(depth=1).debug('Command ok code=0 cmd={}', shell_join(cmd))


def which(cmd: str) -> Optional[str]:
    from shutil import which as _which

    return _which(cmd)


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as ex:
        raise StorageError(f'creating directory {path}: {ex}') from ex


def expand(path: str) -> str:
    return os.path.expandvars(os.path.expanduser(path))


def editor_command(editor: str | None = None) -> list[str]:
    """Resolve the editor: explicit override, then $VISUAL, then $EDITOR."""
    editor_cmd = (
        editor.strip()
        if str(editor or '').strip()
        else (os.environ.get('VISUAL') or os.environ.get('EDITOR') or '')
    )
    parts = shlex.split(editor_cmd)
    if not parts:
        raise ExecutionError(
            [], 'no editor set; export $VISUAL or $EDITOR'
        )
    return parts


def open_editor(path: Path | str, editor: str | None = None) -> None:
    try:
        run_program([*editor_command(editor), str(path)])
    except ExecutionError as ex:
        raise ExecutionError(
            ex.cmd, f'opening editor: {ex}', code=ex.code
        ) from ex
