"""
Per-table cooldown tracking.

A request type is available for a table at time N when no request of that
type for the table was created after N - cooldown(type). Nothing here is
enforced by storage; the submission endpoint is the only gate.
"""

import logging
import math
from datetime import datetime, timedelta

from models import ServiceRequest
from request_types import REQUEST_TYPES, cooldown_minutes

logger = logging.getLogger(__name__)


def cooldown_until(last_created_at, request_type):
    """When a request type becomes available again after a request at last_created_at"""
    return last_created_at + timedelta(minutes=cooldown_minutes(request_type))


def is_available(last_created_at, request_type, now):
    if last_created_at is None:
        return True
    return now >= cooldown_until(last_created_at, request_type)


def format_time_left(until, now):
    """Countdown text like '10m 0s'; partial seconds round up, empty once the cooldown is over"""
    if until is None:
        return ''

    remaining = (until - now).total_seconds()
    if remaining <= 0:
        return ''

    minutes, seconds = divmod(math.ceil(remaining), 60)
    return f'{minutes}m {seconds}s'


def last_request_times(table_id):
    """Most recent created_at per request type for a table"""
    latest = {}
    for request_type in REQUEST_TYPES:
        last = ServiceRequest.query.filter_by(table_id=table_id, type=request_type) \
            .order_by(ServiceRequest.created_at.desc()).first()
        latest[request_type] = last.created_at if last else None
    return latest


class CooldownTracker:
    """Cooldown state for one table.

    load() reads the last request of each type from the database. tick()
    only recomputes the countdown strings from what was loaded, so it can
    run every second without a query.
    """

    def __init__(self, table_id):
        self.table_id = table_id
        self.cooldowns = {request_type: {'until': None, 'time_left': ''} for request_type in REQUEST_TYPES}

    def load(self, now=None):
        now = now or datetime.utcnow()
        for request_type, last_created_at in last_request_times(self.table_id).items():
            if last_created_at is not None and not is_available(last_created_at, request_type, now):
                until = cooldown_until(last_created_at, request_type)
                self.cooldowns[request_type] = {'until': until, 'time_left': format_time_left(until, now)}
            else:
                self.cooldowns[request_type] = {'until': None, 'time_left': ''}
        return self

    def tick(self, now=None):
        now = now or datetime.utcnow()
        for request_type, state in self.cooldowns.items():
            if state['until'] is None:
                continue
            time_left = format_time_left(state['until'], now)
            if time_left:
                state['time_left'] = time_left
            else:
                logger.debug("Cooldown for %s on table %s expired", request_type, self.table_id)
                self.cooldowns[request_type] = {'until': None, 'time_left': ''}
        return self

    def start(self, request_type, now=None):
        now = now or datetime.utcnow()
        until = cooldown_until(now, request_type)
        self.cooldowns[request_type] = {'until': until, 'time_left': format_time_left(until, now)}

    def check(self, request_type, now=None):
        """Remaining time string for a request type, '' when it can be submitted"""
        self.tick(now)
        return self.cooldowns[request_type]['time_left']

    def is_on_cooldown(self, request_type):
        return self.cooldowns[request_type]['until'] is not None

    def to_dict(self):
        return {
            request_type: {
                'until': state['until'].isoformat() if state['until'] else None,
                'time_left': state['time_left']
            }
            for request_type, state in self.cooldowns.items()
        }
