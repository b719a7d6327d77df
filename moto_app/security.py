from typing import Mapping, Optional

from .contracts import AuthService
from .enums import AuthorizationRole


class ConfiguredAuthService(AuthService):
    """
    Answers authentication and authorization questions from fixed configuration.

    Login is not modelled: the authentication flag and the granted roles are
    supplied when the service is built.

    Args:
        authenticated (bool): Whether the caller has been authenticated.
        roles (Mapping[AuthorizationRole, bool]): Roles granted to the caller.

    Raises:
        ValueError: If ``roles`` is None.
    """

    def __init__(
        self,
        authenticated: bool,
        roles: Optional[Mapping[AuthorizationRole, bool]],
    ):
        if roles is None:
            raise ValueError("roles must be provided to the auth service")
        self._authenticated = bool(authenticated)
        self._roles = dict(roles)

    def is_authenticated(self) -> bool:
        return self._authenticated

    def is_authorized(self, role: AuthorizationRole) -> bool:
        return bool(self._roles.get(role, False))
