# tutorlink/api/dependencies/auth.py
"""
Authentication dependencies.

The acting principal comes from a verified bearer token; role checks that
depend on the target resource happen in the services.
"""

from fastapi import Depends

from ...auth import get_current_actor
from ...core.enums import RoleName
from ...core.exceptions import NotAuthorizedException
from ...principal import Actor


def require_role(*roles: RoleName):
    """Dependency factory rejecting actors outside ``roles`` with 403."""

    def _check(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            raise NotAuthorizedException(
                f"Requires role: {', '.join(r.value for r in roles)}"
            )
        return actor

    return _check


require_admin = require_role(RoleName.ADMIN)

__all__ = ["get_current_actor", "require_role", "require_admin"]
