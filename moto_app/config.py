"""
Application settings read from environment variables.

Defaults describe a single authenticated administrator working against the
in-memory repository. Set the variables before importing this module; the
values are read once when ``settings`` is created.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List

from .enums import AuthorizationRole

REPOSITORY_BACKENDS = {"memory", "sql"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    project_name: str = field(
        default_factory=lambda: os.getenv("MOTO_PROJECT_NAME", "Motorcycle Records API")
    )
    log_level: str = field(default_factory=lambda: os.getenv("MOTO_LOG_LEVEL", "INFO"))
    authenticated: bool = field(default_factory=lambda: _env_flag("MOTO_AUTHENTICATED", "true"))
    roles: List[str] = field(default_factory=lambda: _env_list("MOTO_ROLES", "admin"))
    repository: str = field(
        default_factory=lambda: os.getenv("MOTO_REPOSITORY", "memory").strip().lower()
    )
    # In-memory SQLite: nothing outlives the process.
    database_url: str = field(
        default_factory=lambda: os.getenv("MOTO_DATABASE_URL", "sqlite://")
    )

    def __post_init__(self):
        if self.repository not in REPOSITORY_BACKENDS:
            raise ValueError(
                f"Unknown repository backend {self.repository!r}, "
                f"expected one of {sorted(REPOSITORY_BACKENDS)}"
            )

    def role_map(self) -> Dict[AuthorizationRole, bool]:
        """
        Convert the configured role names into the mapping the auth service expects.

        Raises:
            ValueError: If a role name is not an AuthorizationRole.
        """
        role_map = {}
        for name in self.roles:
            try:
                role_map[AuthorizationRole(name.lower())] = True
            except ValueError as e:
                raise ValueError(f"Unknown authorization role {name!r}") from e
        return role_map


settings = Settings()
