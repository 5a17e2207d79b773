"""
================================================================================
TEST: Command Line Interface
================================================================================

Test Coverage:
    - families / status / reset / info commands against a temp data file
    - Unknown family exits with status 1
    - No command prints help

================================================================================
"""
import json

import pytest

import cli
from src.core.family_store import FamilyStore
from src.utils import constants
from test_common import read_data_file


@pytest.fixture
def populated():
    store = FamilyStore(constants.FAMILIES_FILE, total_items=150)
    family = store.register('demo', ['a', 'b'], 'secret')
    family.completed['a'] = [1, 3]
    store.save()
    return store


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert 'usage' in capsys.readouterr().out.lower()


def test_families_empty(capsys):
    assert cli.main(['families']) == 0
    assert 'No families registered' in capsys.readouterr().out


def test_families_lists_registered(populated, capsys):
    assert cli.main(['families']) == 0

    out = capsys.readouterr().out
    assert 'demo' in out
    assert '2 members' in out


def test_status_json(populated, capsys):
    assert cli.main(['status', 'demo', '--json']) == 0

    out = capsys.readouterr().out
    payload = json.loads(out[out.index('{'):])
    assert payload['a'] == {'completedCount': 2, 'totalCount': 75}
    assert payload['b'] == {'completedCount': 0, 'totalCount': 75}


def test_status_unknown_family(capsys):
    assert cli.main(['status', 'nobody']) == 1
    assert 'Family not found' in capsys.readouterr().out


def test_reset_one_family(populated):
    assert cli.main(['reset', '--family', 'demo']) == 0
    assert read_data_file(constants.FAMILIES_FILE)['demo']['completedParts']['a'] == []


def test_reset_all(populated):
    assert cli.main(['reset']) == 0
    assert read_data_file(constants.FAMILIES_FILE)['demo']['completedParts'] == {'a': [], 'b': []}


def test_reset_unknown_family():
    assert cli.main(['reset', '--family', 'nobody']) == 1


def test_info(capsys):
    assert cli.main(['info']) == 0

    out = capsys.readouterr().out
    assert str(constants.CONFIG_FILE) in out
    assert '"reset_time": "22:00"' in out


def test_web_delegates_to_server(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.web_server, 'main', lambda: calls.append('run') or 0)

    assert cli.main(['web']) == 0
    assert calls == ['run']
