from __future__ import annotations

import pytest

from qmgr.errors import ExecutionError
from qmgr.util import editor_command, open_editor, run_program, shell_join


def test_shell_join_quotes() -> None:
    cmd = ['echo', 'a b', "c'd"]
    s = shell_join(cmd)
    assert 'a b' in s
    assert 'echo' in s


def test_run_program_success_and_failure() -> None:
    run_program(['bash', '-c', 'exit 0'])
    with pytest.raises(ExecutionError, match='exit status 7') as exc:
        run_program(['bash', '-c', 'exit 7'])
    assert exc.value.code == 7
    assert exc.value.cmd == ['bash', '-c', 'exit 7']


def test_run_program_signal() -> None:
    with pytest.raises(ExecutionError, match='SIGTERM'):
        run_program(['bash', '-c', 'kill -TERM $$'])


def test_run_program_missing_binary() -> None:
    with pytest.raises(ExecutionError, match='executing qmgr-no-such-binary'):
        run_program(['qmgr-no-such-binary', '--version'])


def test_run_program_inherits_streams(monkeypatch) -> None:
    seen = {}

    class P:
        returncode = 0

    def fake_run(cmd, **kwargs):
        seen['cmd'] = cmd
        seen['kwargs'] = kwargs
        return P()

    monkeypatch.setattr('qmgr.util.subprocess.run', fake_run)
    run_program(['qemu-img', 'info', 3])
    assert seen['cmd'] == ['qemu-img', 'info', '3']
    for key in ('stdin', 'stdout', 'stderr', 'capture_output'):
        assert key not in seen['kwargs']


def test_editor_command_precedence(monkeypatch) -> None:
    monkeypatch.setenv('VISUAL', 'code --wait')
    monkeypatch.setenv('EDITOR', 'vi')
    assert editor_command() == ['code', '--wait']
    assert editor_command('nano -w') == ['nano', '-w']
    monkeypatch.delenv('VISUAL')
    assert editor_command() == ['vi']


def test_editor_command_unset(monkeypatch) -> None:
    monkeypatch.delenv('VISUAL', raising=False)
    monkeypatch.delenv('EDITOR', raising=False)
    with pytest.raises(ExecutionError, match='no editor set'):
        editor_command()
    with pytest.raises(ExecutionError, match='opening editor'):
        open_editor('/tmp/vm1.json')


def test_open_editor_appends_path(monkeypatch) -> None:
    calls = []

    class P:
        returncode = 0

    monkeypatch.setenv('VISUAL', 'myeditor -f')
    monkeypatch.setattr(
        'qmgr.util.subprocess.run',
        lambda cmd, **kwargs: (calls.append(cmd) or P()),
    )
    open_editor('/tmp/vm1.json')
    assert calls == [['myeditor', '-f', '/tmp/vm1.json']]
