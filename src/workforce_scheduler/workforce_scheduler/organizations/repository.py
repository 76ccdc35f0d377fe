from __future__ import annotations

from typing import Optional, Protocol

from .model import OrganizationPolicy


class OrganizationRepository(Protocol):
    def get_policy(self, org_id: str) -> Optional[OrganizationPolicy]:
        raise NotImplementedError
