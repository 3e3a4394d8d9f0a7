"""Photo upload for weighing records."""

import logging

from flask import current_app, jsonify, request, send_from_directory

from permissions import WRITE_ROLES, role_required
from utils import save_upload

from . import bp

logger = logging.getLogger(__name__)


@bp.route("/api/upload", methods=["POST"])
@role_required(WRITE_ROLES)
def upload():
    filename = save_upload(request.files.get("file"), current_app.config["UPLOAD_FOLDER"])
    base_url = current_app.config["API_PUBLIC_URL"].rstrip("/")
    logger.info("Stored upload %s", filename)
    return jsonify(photoUrl=f"{base_url}/uploads/{filename}")


@bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename: str):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
