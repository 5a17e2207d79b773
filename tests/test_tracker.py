"""
Completion tracker tests: mark complete, complete all, resets, views.
"""
import logging
import threading
from unittest.mock import patch

import pytest

from src.core.content import load_parts
from src.core.errors import InvalidTarget, NotFound
from test_common import read_data_file


def test_demo_scenario(tracker, demo_family):
    assert demo_family.distribution == {'a': [1, 4], 'b': [2, 5], 'c': [3]}

    tracker.mark_complete('demo', 'a', 1)
    assert tracker.status('demo')['a'] == {'completed': [1], 'total': 2}

    tracker.reset_family('demo')
    assert tracker.status('demo')['a'] == {'completed': [], 'total': 2}


def test_mark_complete_is_idempotent(tracker, store, demo_family):
    assert tracker.mark_complete(demo_family, 'b', 5) is True

    with patch.object(store, 'save') as mock_save:
        assert tracker.mark_complete(demo_family, 'b', 5) is False
        mock_save.assert_not_called()

    assert demo_family.completed['b'] == [5]


def test_mark_complete_persists(tracker, demo_family, data_file):
    tracker.mark_complete('demo', 'c', 3)
    assert read_data_file(data_file)['demo']['completedParts']['c'] == [3]


def test_mark_complete_rejects_unknown_member_or_part(tracker, demo_family):
    with pytest.raises(InvalidTarget):
        tracker.mark_complete('demo', 'zed', 1)
    with pytest.raises(InvalidTarget):
        tracker.mark_complete('demo', 'a', 99)
    # part exists but belongs to another member
    with pytest.raises(InvalidTarget):
        tracker.mark_complete('demo', 'a', 2)
    assert demo_family.completed == {'a': [], 'b': [], 'c': []}


def test_unknown_family(tracker):
    with pytest.raises(NotFound):
        tracker.mark_complete('nobody', 'a', 1)
    with pytest.raises(NotFound):
        tracker.status('nobody')


def test_complete_all_overwrites(tracker, demo_family):
    demo_family.completed['a'] = [4]

    completed = tracker.complete_all('demo', 'a')

    assert completed == [1, 4]
    progress = tracker.progress('demo')
    assert progress['a'] == {'completedCount': 2, 'totalCount': 2}
    # copy, not the assigned list itself
    assert demo_family.completed['a'] is not demo_family.distribution['a']


def test_complete_all_unknown_member(tracker, demo_family):
    with pytest.raises(InvalidTarget):
        tracker.complete_all('demo', 'zed')


def test_overlapping_part_tracked_per_member(tracker, store, demo_family):
    store.set_distribution('demo', {'a': [1, 2], 'b': [2], 'c': [3]}, 'secret')

    tracker.mark_complete('demo', 'a', 2)

    assert tracker.status('demo')['a']['completed'] == [2]
    assert tracker.status('demo')['b']['completed'] == []


def test_reset_all(tracker, store, demo_family, data_file, caplog):
    store.register('other', ['x', 'y'], 'pw')
    tracker.complete_all('demo', 'a')
    tracker.complete_all('other', 'y')

    with caplog.at_level(logging.INFO, logger='reading_tracker'):
        tracker.reset_all()

    data = read_data_file(data_file)
    assert data['demo']['completedParts'] == {'a': [], 'b': [], 'c': []}
    assert data['other']['completedParts'] == {'x': [], 'y': []}
    assert any("reset for all families" in r.message for r in caplog.records)


def test_reset_family_drops_stale_entries(tracker, demo_family):
    demo_family.completed['ghost'] = [1]

    tracker.reset_family(demo_family)

    assert demo_family.completed == {'a': [], 'b': [], 'c': []}


def test_status_and_progress_views_agree(tracker, demo_family):
    tracker.mark_complete('demo', 'b', 2)

    status = tracker.status('demo')
    progress = tracker.progress('demo')

    assert list(status) == ['a', 'b', 'c']
    for member in status:
        assert progress[member]['completedCount'] == len(status[member]['completed'])
        assert progress[member]['totalCount'] == status[member]['total']


def test_status_member_without_distribution(tracker, store, demo_family):
    store.set_distribution('demo', {'a': [1]}, 'secret')
    assert tracker.status('demo')['b'] == {'completed': [], 'total': 0}


def test_member_parts(tracker, demo_family):
    parts = load_parts("part one part two part three part four part five")

    view = tracker.member_parts('demo', 'a', parts)

    assert view['userParts'] == [{'id': 1, 'text': 'one'}, {'id': 4, 'text': 'four'}]
    assert view['completed'] == []

    with pytest.raises(InvalidTarget):
        tracker.member_parts('demo', 'zed', parts)


def test_apply_auto_completers(tracker, demo_family):
    applied = tracker.apply_auto_completers('demo', ['c', 'not-a-member', 'a'])

    assert applied == ['c', 'a']
    assert demo_family.completed == {'a': [1, 4], 'b': [], 'c': [3]}


def test_member_parts_in_text_order_for_explicit_distribution(tracker, store, demo_family):
    store.set_distribution('demo', {'a': [5, 2, 99], 'b': [], 'c': [1]}, 'secret')
    parts = load_parts("part one part two part three part four part five")

    view = tracker.member_parts('demo', 'a', parts)

    # IDs with no text are left out
    assert [p['id'] for p in view['userParts']] == [2, 5]


def test_status_while_members_change(tracker, store, demo_family):
    errors = []
    done = threading.Event()

    def writer():
        try:
            for i in range(500):
                store.add_member('demo', f"m{i}", 'secret')
        finally:
            done.set()

    def reader():
        while not done.is_set():
            try:
                tracker.status('demo')
                tracker.progress('demo')
            except RuntimeError as e:
                errors.append(e)
                return

    with patch.object(store, 'save'):
        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

    assert errors == []
    assert len(tracker.status('demo')) == 503
