from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_TIMEZONE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OrganizationPolicy
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_timezone: str = DEFAULT_TIMEZONE):
        self._conn_factory = conn_factory
        self._default_timezone = default_timezone

    def get_policy(self, org_id: str) -> Optional[OrganizationPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT org_id, name, timezone, daily_otc_threshold, weekly_otc_threshold,
                       clock_in_early_allowance_minutes
                FROM organizations
                WHERE org_id=%s
                """,
                (org_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OrganizationPolicy(
                org_id=r["org_id"],
                name=r["name"],
                timezone=r.get("timezone") or self._default_timezone,
                daily_otc_threshold=float(r["daily_otc_threshold"]),
                weekly_otc_threshold=float(r["weekly_otc_threshold"]),
                clock_in_early_allowance_minutes=int(r.get("clock_in_early_allowance_minutes") or 0),
            )
