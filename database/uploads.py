"""Poster uploads stored on local disk"""
import logging
import os
import random
import time

logger = logging.getLogger(__name__)


def generate_filename(original_filename):
    # <epoch millis>-<random suffix><original extension>
    extension = os.path.splitext(original_filename or '')[1]
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
    return unique_suffix + extension


def save_upload(file_storage, upload_dir, url_prefix='/uploads'):
    """
    Persist an uploaded file part.

    Returns:
        str: relative URL of the stored file, or None when no file was sent
    """
    if file_storage is None or not file_storage.filename:
        return None

    os.makedirs(upload_dir, exist_ok=True)

    filename = generate_filename(file_storage.filename)
    file_storage.save(os.path.join(upload_dir, filename))

    logger.info(f"Stored upload {file_storage.filename!r} as {filename}")
    return f"{url_prefix}/{filename}"


def resolve_image_url(uploaded_path, link, current=None, allow_current=False):
    if uploaded_path:
        return uploaded_path

    if link:
        return link

    if allow_current and current:
        return current

    return None


def remove_upload(image_url, upload_dir, url_prefix='/uploads'):
    """Delete a file previously stored by save_upload. External links are ignored."""
    if not image_url or not image_url.startswith(url_prefix + '/'):
        return False

    filename = os.path.basename(image_url[len(url_prefix) + 1:])
    if not filename:
        return False

    path = os.path.join(upload_dir, filename)
    if not os.path.isfile(path):
        return False

    os.remove(path)
    logger.info(f"Removed replaced upload {filename}")
    return True
