"""
Customer request submission - cooldown gate, photo rule, then one insert.
"""

import logging
from datetime import datetime

from models import db, ServiceRequest
from cooldowns import CooldownTracker
from photo_storage import has_photo, is_allowed_photo, upload_photo
from request_types import is_valid_type, requires_photo

logger = logging.getLogger(__name__)

# Seconds a customer-facing message stays on screen
MESSAGE_DISMISS_SECONDS = 4


class SubmissionError(Exception):
    status_code = 400


class InvalidRequestType(SubmissionError):
    def __init__(self, request_type):
        super().__init__(f"Unknown request type: {request_type}")
        self.request_type = request_type


class PhotoRequired(SubmissionError):
    def __init__(self, request_type):
        super().__init__("📸 Please attach a photo for this request")
        self.request_type = request_type


class UnsupportedPhoto(SubmissionError):
    def __init__(self, filename):
        super().__init__("📸 Please attach an image file (jpg, png, gif, webp or heic)")
        self.filename = filename


class CooldownActive(SubmissionError):
    status_code = 429

    def __init__(self, request_type, until, time_left):
        super().__init__(f"⏳ Please wait {time_left} before making this request again.")
        self.request_type = request_type
        self.until = until
        self.time_left = time_left


def submit_request(table, request_type, photo=None, now=None, tracker=None):
    """Create a service request for a table.

    Raises InvalidRequestType, CooldownActive, PhotoRequired or UnsupportedPhoto
    before anything is written. The photo is uploaded first so its URL goes into the insert.
    Returns the new request and the tracker with the cooldown started.
    """
    now = now or datetime.utcnow()

    if not is_valid_type(request_type):
        raise InvalidRequestType(request_type)

    if tracker is None:
        tracker = CooldownTracker(table.id).load(now)

    time_left = tracker.check(request_type, now)
    if time_left:
        raise CooldownActive(request_type, tracker.cooldowns[request_type]['until'], time_left)

    photo_required = requires_photo(request_type)
    if photo_required and not has_photo(photo):
        raise PhotoRequired(request_type)
    if photo_required and not is_allowed_photo(photo):
        raise UnsupportedPhoto(photo.filename)

    photo_url = None
    if photo_required:
        photo_url = upload_photo(photo)

    service_request = ServiceRequest(
        table_id=table.id,
        type=request_type,
        status='pending',
        photo_url=photo_url,
        created_at=now
    )
    db.session.add(service_request)
    db.session.commit()

    tracker.start(request_type, now)
    logger.info("Request %s (%s) created for table %s", service_request.id, request_type, table.id)

    return service_request, tracker
