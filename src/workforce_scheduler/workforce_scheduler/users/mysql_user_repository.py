from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository


def _to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=r["user_id"],
        org_id=r["org_id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        role=Role(r["role"]),
        is_active=bool(r["is_active"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, org_id, first_name, last_name, email, role, is_active
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_by_ids(self, user_ids: Iterable[str]) -> Sequence[User]:
        ids = list(user_ids)
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, org_id, first_name, last_name, email, role, is_active
                FROM users
                WHERE user_id IN ({in_clause(ids)})
                """,
                tuple(ids),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_active_by_roles(self, *, org_id: str, roles: Iterable[Role]) -> Sequence[User]:
        role_values = [r.value for r in roles]
        if not role_values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, org_id, first_name, last_name, email, role, is_active
                FROM users
                WHERE org_id=%s AND is_active=1 AND role IN ({in_clause(role_values)})
                """,
                (org_id, *role_values),
            )
            return [_to_user(r) for r in fetchall(cur)]
