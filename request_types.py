"""
Request type catalog - what a customer can ask for, how long each type
cools down, and which types staff treat as urgent.
"""

# Display order on the table page
REQUEST_OPTIONS = [
    {
        'type': 'table_clean',
        'icon': '🧽',
        'label': 'Clean Table',
        'description': 'Table needs cleaning & sanitizing',
        'cooldown_minutes': 10,
        'priority': 'medium',
        'requires_photo': False
    },
    {
        'type': 'toilet_clean',
        'icon': '🚽',
        'label': 'Toilet Issue',
        'description': 'Report restroom problem',
        'cooldown_minutes': 15,
        'priority': 'high',
        'requires_photo': True
    },
    {
        'type': 'ready_to_order',
        'icon': '🍽️',
        'label': 'Ready to Order',
        'description': 'Ready to place our order',
        'cooldown_minutes': 10,
        'priority': 'high',
        'requires_photo': False
    },
    {
        'type': 'additional_order',
        'icon': '➕',
        'label': 'Order More',
        'description': 'Want additional items',
        'cooldown_minutes': 5,
        'priority': 'medium',
        'requires_photo': False
    },
    {
        'type': 'replace_cutlery',
        'icon': '🍴',
        'label': 'New Cutlery',
        'description': 'Need fresh utensils',
        'cooldown_minutes': 5,
        'priority': 'low',
        'requires_photo': False
    },
    {
        'type': 'request_sauces',
        'icon': '🥫',
        'label': 'Sauces & Condiments',
        'description': 'Need sauces or condiments',
        'cooldown_minutes': 3,
        'priority': 'low',
        'requires_photo': False
    }
]

OPTIONS_BY_TYPE = {option['type']: option for option in REQUEST_OPTIONS}

REQUEST_TYPES = [option['type'] for option in REQUEST_OPTIONS]

STATUS_PENDING = 'pending'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_COMPLETED = 'completed'

STATUSES = [STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED]
OPEN_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS)

# Actions offered to staff; storage itself accepts any status
STATUS_ACTIONS = {
    STATUS_PENDING: [STATUS_IN_PROGRESS, STATUS_COMPLETED],
    STATUS_IN_PROGRESS: [STATUS_COMPLETED],
    STATUS_COMPLETED: [STATUS_PENDING]
}


class UnknownRequestType(KeyError):
    pass


def get_option(request_type):
    """Return the catalog entry for a request type"""
    try:
        return OPTIONS_BY_TYPE[request_type]
    except KeyError:
        raise UnknownRequestType(request_type)


def is_valid_type(request_type):
    return request_type in OPTIONS_BY_TYPE


def cooldown_minutes(request_type):
    return get_option(request_type)['cooldown_minutes']


def requires_photo(request_type):
    return get_option(request_type)['requires_photo']


def is_high_priority(request_type):
    """Unknown types are never urgent"""
    option = OPTIONS_BY_TYPE.get(request_type)
    return bool(option) and option['priority'] == 'high'
