"""HTTP routes for weighing records."""

from flask import jsonify, request
from flask_login import current_user

from permissions import ADMIN_ONLY, ANY_ROLE, WRITE_ROLES, role_required
from utils import json_body

from . import bp
from .service import create_weighing, delete_weighing, get_weighing, list_weighings, update_weighing


@bp.route("", methods=["POST"])
@role_required(WRITE_ROLES)
def create():
    weighing = create_weighing(json_body(), current_user)
    return jsonify(weighing.to_dict()), 201


@bp.route("", methods=["GET"])
@role_required(ANY_ROLE)
def index():
    return jsonify(list_weighings(request.args))


@bp.route("/<int:weighing_id>", methods=["GET"])
@role_required(ANY_ROLE)
def detail(weighing_id: int):
    return jsonify(get_weighing(weighing_id).to_dict())


@bp.route("/<int:weighing_id>", methods=["PATCH"])
@role_required(ADMIN_ONLY)
def update(weighing_id: int):
    weighing = update_weighing(weighing_id, json_body())
    return jsonify(weighing.to_dict())


@bp.route("/<int:weighing_id>", methods=["DELETE"])
@role_required(ADMIN_ONLY)
def delete(weighing_id: int):
    delete_weighing(weighing_id)
    return "", 204
