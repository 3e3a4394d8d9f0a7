# permissions.py
# -*- coding: utf-8 -*-
"""
RBAC для API.
- is_allowed(role, allowed)      — чистая проверка: роль входит в набор.
- check_access(principal, allowed) — Unauthenticated / Forbidden.
- role_required([...])           — декоратор на роуты.

Роли (закрытый набор, см. models.Role):
- viewer   — чтение: списки, карточки, статистика, экспорт
- operator — всё как viewer + создание взвешиваний, поставщики, загрузка фото
- admin    — всё как operator + правка/удаление взвешиваний, удаление поставщиков
"""

import logging
from functools import wraps
from typing import FrozenSet, Iterable, Union

from flask_login import current_user

from errors import Forbidden, Unauthenticated
from models import Role

logger = logging.getLogger(__name__)


# ------------------------------ НАБОРЫ РОЛЕЙ -------------------------------- #
ANY_ROLE: FrozenSet[Role] = frozenset(Role)
WRITE_ROLES: FrozenSet[Role] = frozenset({Role.ADMIN, Role.OPERATOR})
ADMIN_ONLY: FrozenSet[Role] = frozenset({Role.ADMIN})


def _normalize(allowed_roles: Union[str, Role, Iterable[Union[str, Role]]]) -> FrozenSet[Role]:
    if isinstance(allowed_roles, (str, Role)):
        allowed_roles = [allowed_roles]
    return frozenset(Role(r) for r in allowed_roles)


# ------------------------------- ПРОВЕРКИ ----------------------------------- #
def is_allowed(role, allowed_roles) -> bool:
    """True, если роль входит в разрешённый набор. Неизвестная роль — никогда."""
    try:
        return Role(role) in _normalize(allowed_roles)
    except ValueError:
        return False


def check_access(principal, allowed_roles) -> None:
    """
    Правила:
    - нет принципала / не аутентифицирован → Unauthenticated (401)
    - роль не из набора → Forbidden (403)
    Ничего не кэширует и принципала не меняет.
    """
    if principal is None or not getattr(principal, "is_authenticated", False):
        raise Unauthenticated()

    role = getattr(principal, "role", None)
    if not is_allowed(role, allowed_roles):
        logger.warning("Access denied for user %s with role %r", getattr(principal, "id", None), role)
        raise Forbidden()


# ----------------------------- ДЕКОРАТОР ------------------------------------ #
def role_required(allowed_roles):
    """
    Декоратор для ограничения доступа по ролям.
    Пример:
        @role_required(WRITE_ROLES)
        def view(): ...
    """
    allowed = _normalize(allowed_roles)

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            check_access(current_user, allowed)
            return view_func(*args, **kwargs)

        return wrapped
    return decorator
