"""
Photo storage for restroom reports - files live under UPLOAD_FOLDER and are
served back by the app at /photos/<path>.
"""

import logging
import os
import time

from flask import current_app, url_for
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

PHOTO_DIR = 'toilet-photos'

# Only image files are served back from our own origin
ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp', 'heic'}


def photo_extension(filename):
    name = secure_filename(filename or '')
    if '.' not in name:
        return 'jpg'
    return name.rsplit('.', 1)[1].lower()


def is_allowed_photo(file_storage):
    return photo_extension(file_storage.filename) in ALLOWED_EXTENSIONS


def save_photo(file_storage):
    """Store an uploaded photo and return its path relative to UPLOAD_FOLDER"""
    file_name = f"toilet-{int(time.time() * 1000)}.{photo_extension(file_storage.filename)}"
    file_path = f"{PHOTO_DIR}/{file_name}"

    target_dir = os.path.join(current_app.config['UPLOAD_FOLDER'], PHOTO_DIR)
    os.makedirs(target_dir, exist_ok=True)
    file_storage.save(os.path.join(target_dir, file_name))

    logger.info("Stored photo %s", file_path)
    return file_path


def public_url(file_path):
    return url_for('serve_photo', filename=file_path, _external=True)


def upload_photo(file_storage):
    """Save the photo and return the public URL attached to the request"""
    return public_url(save_photo(file_storage))


def has_photo(file_storage):
    return file_storage is not None and bool(file_storage.filename)
