"""Session login for API clients (Flask-Login)."""

import logging

from flask import jsonify
from flask_login import current_user, login_user, logout_user
from werkzeug.security import check_password_hash

from errors import InvalidCredentials, ValidationError
from extensions import db, login_manager
from models import User
from permissions import ANY_ROLE, role_required
from utils import json_body

from . import bp

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_user(user_id: str | None) -> User | None:
    """Resolve a ``User`` instance for Flask-Login sessions."""

    if not user_id:
        return None
    try:
        return db.session.get(User, int(user_id))
    except ValueError:
        return None


@bp.route("/login", methods=["POST"])
def login():
    payload = json_body()
    email = payload.get("email")
    password = payload.get("password")

    errors = {}
    if not isinstance(email, str) or "@" not in email:
        errors["email"] = ["Invalid email"]
    if not isinstance(password, str) or not password:
        errors["password"] = ["Required"]
    if errors:
        raise ValidationError(errors)

    user = User.query.filter_by(email=email).first()
    if user is None or not check_password_hash(user.password_hash, password):
        logger.warning("Failed login attempt for %s", email)
        raise InvalidCredentials()

    login_user(user)
    logger.info("User %s logged in", user.id)
    return jsonify(user=user.to_dict())


@bp.route("/logout", methods=["POST"])
@role_required(ANY_ROLE)
def logout():
    logout_user()
    return "", 204


@bp.route("/me", methods=["GET"])
@role_required(ANY_ROLE)
def me():
    return jsonify(current_user.to_dict())
