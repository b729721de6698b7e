from __future__ import annotations

from typing import Any

from src.api.deps import issue_smoke_token
from src.infrastructure.repositories.row_store import RowStore, StoreError


def auth_headers(user_id: str, email: str = "student@example.edu") -> dict[str, str]:
    token = issue_smoke_token(user_id, email=email)
    return {"Authorization": f"Bearer {token}"}


async def seed_complaint(store: RowStore, **overrides: Any) -> str:
    """Insert a pending complaint through the store and return its id."""
    record = {
        "email": "x@y.com",
        "phone": "+1 555 0100",
        "subject": "Bug",
        "message": "The calendar does not save my exam dates.",
        "status": "pending",
    }
    record.update(overrides)
    row = await store.insert("complaints", record)
    return row["id"]


class ListingUnavailableStore(RowStore):
    """Real store whose unfiltered listings of ``collections`` fail.

    Writes and keyed lookups (role resolution, complaint existence checks) still
    go through, so only the re-read after a mutation breaks.
    """

    def __init__(self, session_factory: Any, *collections: str) -> None:
        super().__init__(session_factory)
        self.collections = set(collections)

    async def read(self, collection: str, **kwargs: Any) -> list[dict[str, Any]]:
        if collection in self.collections and not kwargs.get("filters"):
            raise StoreError(f"{collection} listing unavailable")
        return await super().read(collection, **kwargs)
