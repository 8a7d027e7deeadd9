"""Tests for the per-directory VM config store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from qmgr.errors import ConfigDecodeError, ConfigNotFoundError, StorageError
from qmgr.models import Drive, Port, VMConfig
from qmgr.store import ConfigStore


def _sample(name: str = 'vm1', cores: int = 0) -> VMConfig:
    return VMConfig(
        name=name,
        memory='2G',
        drives=[
            Drive(type='img'),
            Drive(type='qcow2', path='/disks/vm1.qcow2'),
            Drive(type='iso', path='/isos/debian.iso'),
        ],
        ports=[Port(guest=22, host=2222), Port(guest=80, host=8080)],
        cores=cores,
        fullscreen=True,
    )


def test_store_roundtrip_keeps_zero_cores(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / 'configs')
    cfg = _sample(cores=0)
    store.save('vm1', cfg)
    loaded = store.load('vm1')
    assert loaded == cfg
    assert loaded.cores == 0


def test_save_creates_parents_and_returns_absolute_path(
    tmp_path: Path,
) -> None:
    store = ConfigStore(tmp_path / 'a' / 'b' / 'configs')
    fpath = store.save('vm1', _sample())
    assert fpath.is_absolute()
    assert fpath == (tmp_path / 'a' / 'b' / 'configs' / 'vm1.json')
    text = fpath.read_text(encoding='utf-8')
    assert text.endswith('\n')
    assert '\n    "name": "vm1",' in text
    assert json.loads(text)['ports'] == [
        {'guest': 22, 'host': 2222},
        {'guest': 80, 'host': 8080},
    ]


def test_save_overwrites_existing(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path)
    store.save('vm1', _sample(cores=2))
    store.save('vm1', _sample(cores=6))
    assert store.load('vm1').cores == 6
    assert store.list_names() == ['vm1']


def test_list_missing_dir_is_empty(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / 'does-not-exist')
    assert store.list_names() == []


def test_list_strips_extension(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path)
    store.save('alpha', _sample('alpha'))
    store.save('beta', _sample('beta'))
    (tmp_path / 'notes.txt').write_text('x', encoding='utf-8')
    assert sorted(store.list_names()) == ['alpha', 'beta', 'notes.txt']


def test_list_on_file_raises_storage_error(tmp_path: Path) -> None:
    fpath = tmp_path / 'configs'
    fpath.write_text('', encoding='utf-8')
    with pytest.raises(StorageError):
        ConfigStore(fpath).list_names()


def test_load_missing_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFoundError, match='opening config'):
        ConfigStore(tmp_path).load('nope')


def test_load_malformed_surfaces_parse_error(tmp_path: Path) -> None:
    (tmp_path / 'bad.json').write_text('{"name": "bad",', encoding='utf-8')
    with pytest.raises(ConfigDecodeError, match='decoding config') as exc:
        ConfigStore(tmp_path).load('bad')
    assert 'Expecting' in str(exc.value)


def test_load_wrong_field_type(tmp_path: Path) -> None:
    (tmp_path / 'bad.json').write_text('{"cores": "all"}', encoding='utf-8')
    with pytest.raises(ConfigDecodeError, match="'cores'"):
        ConfigStore(tmp_path).load('bad')


def test_save_into_unwritable_location(tmp_path: Path) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('', encoding='utf-8')
    with pytest.raises(StorageError):
        ConfigStore(blocker / 'configs').save('vm1', _sample())
