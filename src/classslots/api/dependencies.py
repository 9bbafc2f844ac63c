"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated, Protocol

from fastapi import Depends

from classslots.config import Settings
from classslots.content_store import ContentStoreClient
from classslots.slots import CourseLocks, SlotMutationService, SlotStore
from classslots.slots.store import CourseRepository
from classslots.state_store import StateStore


class ClosableRepository(CourseRepository, Protocol):
    """Course repository owned by the app and closed on shutdown."""

    def close(self) -> None:
        """Release connections."""
        ...


def build_repository(settings: Settings) -> ClosableRepository:
    """Create the course repository selected by ``settings.backend``."""
    if settings.backend == "database":
        return StateStore(
            settings.db_path,
            times=settings.fallback_times,
            time_prefix=settings.time_prefix,
        )
    return ContentStoreClient(
        base_url=settings.content_store_url,
        token=settings.content_store_token,
        locale=settings.locale,
        timeout=settings.request_timeout,
        time_prefix=settings.time_prefix,
        fallback_times=settings.fallback_times,
    )


# Global repository and service (initialized on app startup)
_repository: ClosableRepository | None = None
_service: SlotMutationService | None = None


def init_service(
    settings: Settings, repository: ClosableRepository | None = None
) -> SlotMutationService:
    """Initialize the global SlotMutationService instance.

    Args:
        settings: Process settings.
        repository: Repository to use instead of the one ``settings`` selects.
    """
    global _repository, _service  # noqa: PLW0603
    _repository = repository if repository is not None else build_repository(settings)
    _service = SlotMutationService(SlotStore(_repository), settings=settings, locks=CourseLocks())
    return _service


def close_service() -> None:
    """Close the global repository and drop the service."""
    global _repository, _service  # noqa: PLW0603
    if _repository is not None:
        _repository.close()
        _repository = None
    _service = None


def get_service() -> Generator[SlotMutationService, None, None]:
    """Dependency that provides the SlotMutationService instance."""
    if _service is None:
        raise RuntimeError("SlotMutationService not initialized. Call init_service() first.")
    yield _service


# Type alias for dependency injection
SlotServiceDep = Annotated[SlotMutationService, Depends(get_service)]
