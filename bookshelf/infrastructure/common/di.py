from collections.abc import Callable
from typing import TypeVar

from dependency_injector import providers
from dependency_injector.providers import Provider
from sqlalchemy.orm import Session

from bookshelf.core import container
from bookshelf.database import DatabaseSession

T = TypeVar("T")


def inject_use_case(provider: Provider[T]) -> Callable[[DatabaseSession], T]:
    """
    Create a FastAPI dependency for a container provider.

    Overrides container.get_session with a handle to the request-scoped
    session, which is None when no store is configured.
    """

    def dependency(db: DatabaseSession) -> T:
        def session_handle() -> Session | None:
            return db

        try:
            container.get_session.override(providers.Object(session_handle))
            return provider()
        finally:
            # Reset override after the use case is built
            container.get_session.reset_override()

    return dependency
