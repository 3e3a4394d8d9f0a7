import os
import uuid

from flask import request

from errors import ValidationError

ALLOWED_IMAGE_TYPES = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
}


def json_body():
    """Return the request JSON object, or raise ValidationError if it is not one."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError({'body': ['Expected a JSON object']})
    return payload


def allowed_image(mimetype):
    """Check if the upload has an allowed image content type."""
    return mimetype in ALLOWED_IMAGE_TYPES


def save_upload(file, upload_folder):
    """Save an uploaded image under a random name and return that name."""
    if not file or not file.filename:
        raise ValidationError({'file': ['No file uploaded']})
    if not allowed_image(file.mimetype):
        allowed = ', '.join(sorted(ALLOWED_IMAGE_TYPES))
        raise ValidationError({'file': [f'Invalid file type. Allowed: {allowed}']})

    filename = f"{uuid.uuid4()}.{ALLOWED_IMAGE_TYPES[file.mimetype]}"
    os.makedirs(upload_folder, exist_ok=True)
    file.save(os.path.join(upload_folder, filename))
    return filename
