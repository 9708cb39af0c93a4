from dataclasses import dataclass

from src.user_registry.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    """Process-wide collaborators built once at startup."""

    database_service: DbSessionService
