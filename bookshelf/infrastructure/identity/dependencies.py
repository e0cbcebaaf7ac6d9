"""FastAPI dependencies for the caller identity."""

from typing import Annotated

from fastapi import Depends, Header

OWNER_ID_HEADER = "X-Owner-Id"


def get_current_owner_id(
    x_owner_id: Annotated[str | None, Header(alias=OWNER_ID_HEADER)] = None,
) -> str | None:
    """
    Identity of the caller, as established by the upstream auth layer.

    Returns None when the request carries no identity; use cases decide what
    an anonymous call means.
    """
    if x_owner_id is None or not x_owner_id.strip():
        return None
    return x_owner_id.strip()


CurrentOwnerId = Annotated[str | None, Depends(get_current_owner_id)]
