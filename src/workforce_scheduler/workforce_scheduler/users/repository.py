from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_ids(self, user_ids: Iterable[str]) -> Sequence[User]:
        raise NotImplementedError

    def list_active_by_roles(self, *, org_id: str, roles: Iterable[Role]) -> Sequence[User]:
        raise NotImplementedError
