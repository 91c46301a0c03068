from datetime import datetime, timedelta

import pytest

from cooldowns import CooldownTracker, cooldown_until, format_time_left, is_available
from models import db, ServiceRequest
from request_types import UnknownRequestType, cooldown_minutes, is_high_priority, requires_photo

NOON = datetime(2024, 5, 1, 12, 0, 0)


def test_cooldown_minutes_per_type():
    assert cooldown_minutes('toilet_clean') == 15
    assert cooldown_minutes('ready_to_order') == 10
    assert cooldown_minutes('table_clean') == 10
    assert cooldown_minutes('additional_order') == 5
    assert cooldown_minutes('replace_cutlery') == 5
    assert cooldown_minutes('request_sauces') == 3


def test_unknown_type_lookup_fails():
    with pytest.raises(UnknownRequestType):
        cooldown_minutes('free_dessert')


def test_priority_and_photo_rules():
    assert is_high_priority('toilet_clean')
    assert is_high_priority('ready_to_order')
    assert not is_high_priority('table_clean')
    assert not is_high_priority('free_dessert')
    assert requires_photo('toilet_clean')
    assert not requires_photo('request_sauces')


def test_no_prior_request_is_available():
    assert is_available(None, 'toilet_clean', NOON)


def test_available_exactly_at_cooldown_end():
    assert cooldown_until(NOON, 'table_clean') == NOON + timedelta(minutes=10)
    assert not is_available(NOON, 'table_clean', NOON + timedelta(seconds=1))
    assert not is_available(NOON, 'table_clean', NOON + timedelta(minutes=9, seconds=59))
    assert is_available(NOON, 'table_clean', NOON + timedelta(minutes=10))
    assert is_available(NOON, 'table_clean', NOON + timedelta(hours=1))


def test_format_time_left():
    until = NOON + timedelta(minutes=10)
    assert format_time_left(until, NOON) == '10m 0s'
    assert format_time_left(until, NOON + timedelta(seconds=30)) == '9m 30s'
    assert format_time_left(until, until - timedelta(seconds=1)) == '0m 1s'
    assert format_time_left(until, until) == ''
    assert format_time_left(until, until + timedelta(seconds=5)) == ''
    assert format_time_left(None, NOON) == ''


def test_partial_seconds_round_up():
    until = NOON + timedelta(minutes=10)
    assert format_time_left(until, until - timedelta(milliseconds=500)) == '0m 1s'
    assert format_time_left(until, until - timedelta(microseconds=1)) == '0m 1s'
    assert format_time_left(until, NOON + timedelta(milliseconds=500)) == '10m 0s'
    assert format_time_left(until, NOON + timedelta(seconds=30, milliseconds=250)) == '9m 30s'


def test_tracker_counts_down_then_clears(flask_app):
    tracker = CooldownTracker(table_id=1)
    tracker.start('table_clean', NOON)

    assert tracker.check('table_clean', NOON) == '10m 0s'
    assert tracker.check('table_clean', NOON + timedelta(minutes=9, seconds=59)) == '0m 1s'
    assert tracker.is_on_cooldown('table_clean')

    tracker.tick(NOON + timedelta(minutes=10))
    assert not tracker.is_on_cooldown('table_clean')
    assert tracker.check('table_clean', NOON + timedelta(minutes=10)) == ''


def test_tracker_load_uses_latest_request_per_type(seeded):
    table = seeded['t1']
    db.session.add_all([
        ServiceRequest(table_id=table.id, type='ready_to_order', status='completed',
                       created_at=NOON - timedelta(minutes=30)),
        ServiceRequest(table_id=table.id, type='ready_to_order', status='pending',
                       created_at=NOON - timedelta(minutes=4)),
        ServiceRequest(table_id=table.id, type='request_sauces', status='pending',
                       created_at=NOON - timedelta(minutes=3)),
        ServiceRequest(table_id=seeded['t2'].id, type='table_clean', status='pending',
                       created_at=NOON)
    ])
    db.session.commit()

    tracker = CooldownTracker(table.id).load(NOON)

    assert tracker.cooldowns['ready_to_order']['time_left'] == '6m 0s'
    assert tracker.cooldowns['ready_to_order']['until'] == NOON + timedelta(minutes=6)
    # Sauces cooled down exactly now
    assert not tracker.is_on_cooldown('request_sauces')
    # Another table's request does not count
    assert not tracker.is_on_cooldown('table_clean')


def test_tracker_tick_does_not_query(seeded, monkeypatch):
    table = seeded['t1']
    db.session.add(ServiceRequest(table_id=table.id, type='additional_order', status='pending',
                                  created_at=NOON))
    db.session.commit()

    tracker = CooldownTracker(table.id).load(NOON + timedelta(minutes=1))
    assert tracker.cooldowns['additional_order']['time_left'] == '4m 0s'

    def fail(*args, **kwargs):
        raise AssertionError('tick should not hit the database')

    monkeypatch.setattr('cooldowns.last_request_times', fail)
    tracker.tick(NOON + timedelta(minutes=2, seconds=15))
    assert tracker.cooldowns['additional_order']['time_left'] == '2m 45s'


def test_tracker_to_dict(flask_app):
    tracker = CooldownTracker(table_id=1)
    tracker.start('request_sauces', NOON)

    data = tracker.to_dict()
    assert data['request_sauces'] == {'until': (NOON + timedelta(minutes=3)).isoformat(), 'time_left': '3m 0s'}
    assert data['table_clean'] == {'until': None, 'time_left': ''}
