"""HTTP routes for suppliers."""

from flask import jsonify

from permissions import ADMIN_ONLY, ANY_ROLE, WRITE_ROLES, role_required
from utils import json_body

from . import bp
from .models import create_supplier, delete_supplier, list_suppliers, rename_supplier


@bp.route("", methods=["GET"])
@role_required(ANY_ROLE)
def index():
    return jsonify([s.to_dict() for s in list_suppliers()])


@bp.route("", methods=["POST"])
@role_required(WRITE_ROLES)
def create():
    supplier = create_supplier(json_body())
    return jsonify(supplier.to_dict()), 201


@bp.route("/<int:supplier_id>", methods=["PATCH"])
@role_required(WRITE_ROLES)
def rename(supplier_id: int):
    supplier = rename_supplier(supplier_id, json_body())
    return jsonify(supplier.to_dict())


@bp.route("/<int:supplier_id>", methods=["DELETE"])
@role_required(ADMIN_ONLY)
def delete(supplier_id: int):
    delete_supplier(supplier_id)
    return "", 204
