"""Photo upload module package."""

from flask import Blueprint

bp = Blueprint("uploads", __name__)

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
