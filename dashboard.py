"""
Staff dashboard helpers - per-table status, request lists and counters.
"""

from datetime import datetime

from models import Table, ServiceRequest
from request_types import (OPEN_STATUSES, STATUS_PENDING, STATUS_IN_PROGRESS,
                           STATUS_COMPLETED, STATUS_ACTIONS, OPTIONS_BY_TYPE, is_high_priority)

TABLE_URGENT = 'urgent'
TABLE_PENDING = 'pending'
TABLE_CLEAR = 'clear'


def classify_table(requests):
    """urgent / pending / clear from a table's requests (any status)"""
    active = [r for r in requests if r.status in OPEN_STATUSES]

    if any(is_high_priority(r.type) for r in active):
        return TABLE_URGENT
    if any(r.status == STATUS_PENDING for r in active):
        return TABLE_PENDING
    return TABLE_CLEAR


def time_ago(created_at, now=None):
    now = now or datetime.utcnow()
    diff_mins = int((now - created_at).total_seconds() // 60)

    if diff_mins < 1:
        return 'Just now'
    if diff_mins < 60:
        return f'{diff_mins}m ago'

    diff_hours = diff_mins // 60
    if diff_hours < 24:
        return f'{diff_hours}h ago'

    return 'A while ago'


def request_to_dict(service_request, now=None):
    """Request as shown on the dashboard, with its table and restaurant"""
    data = service_request.to_dict()
    table = service_request.table
    option = OPTIONS_BY_TYPE.get(service_request.type, {})

    data.update({
        'table_label': table.label,
        'restaurant_name': table.restaurant.name,
        'label': option.get('label', service_request.type),
        'icon': option.get('icon', '📋'),
        'priority': option.get('priority'),
        'time_ago': time_ago(service_request.created_at, now),
        'actions': STATUS_ACTIONS.get(service_request.status, [])
    })
    return data


def build_table_status(tables, requests):
    """Floor-plan entries for every table, ordered by label"""
    requests_by_table = {}
    for service_request in requests:
        requests_by_table.setdefault(service_request.table_id, []).append(service_request)

    result = []
    for table in sorted(tables, key=lambda t: t.label):
        active = [r for r in requests_by_table.get(table.id, []) if r.status in OPEN_STATUSES]
        result.append({
            'id': table.id,
            'label': table.label,
            'restaurant_id': table.restaurant_id,
            'x_position': table.x_position or 0,
            'y_position': table.y_position or 0,
            'active_requests': [r.id for r in active],
            'urgent_count': len([r for r in active if is_high_priority(r.type)]),
            'pending_count': len([r for r in active if r.status == STATUS_PENDING]),
            'status': classify_table(active)
        })
    return result


def filter_requests(requests, status='all', table_id=None):
    filtered = requests
    if status and status != 'all':
        filtered = [r for r in filtered if r.status == status]
    if table_id is not None:
        filtered = [r for r in filtered if r.table_id == table_id]
    return filtered


def compute_stats(requests, table_status):
    return {
        'pending': len([r for r in requests if r.status == STATUS_PENDING]),
        'in_progress': len([r for r in requests if r.status == STATUS_IN_PROGRESS]),
        'completed': len([r for r in requests if r.status == STATUS_COMPLETED]),
        'total': len(requests),
        'urgent': sum(t['urgent_count'] for t in table_status)
    }


def get_dashboard(status='all', table_id=None, now=None):
    """Fetch everything the staff view shows in one snapshot"""
    now = now or datetime.utcnow()
    requests = ServiceRequest.query.order_by(ServiceRequest.created_at.desc(),
                                             ServiceRequest.id.desc()).all()
    tables = Table.query.order_by(Table.label).all()

    table_status = build_table_status(tables, requests)

    return {
        'requests': [request_to_dict(r, now) for r in filter_requests(requests, status, table_id)],
        'tables': table_status,
        'stats': compute_stats(requests, table_status),
        'refreshed_at': now.isoformat()
    }
