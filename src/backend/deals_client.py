# src/backend/deals_client.py

"""Deal table and click-counter RPC on the hosted backend."""

from collections.abc import Callable
from typing import Any

from src.backend.base_client import (
    BackendError,
    BaseBackendClient,
    DealNotFoundError,
)
from src.config.settings import Settings
from src.filters.deal_validator import DealValidator
from src.models.deal import Deal


class DealsClient(BaseBackendClient):
    """CRUD and click counting for deals.

    ``token_provider`` returns the signed-in user's access token (or
    ``None``) at call time, so row-level security on the backend sees the
    same identity the UI shows.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        token_provider: Callable[[], str | None] | None = None,
    ) -> None:
        super().__init__("deals", settings)
        self._token_provider = token_provider or (lambda: None)
        self._table_path = f"/rest/v1/{self.settings.DEALS_TABLE}"

    def _token(self) -> str | None:
        return self._token_provider()

    def select_deals(self) -> list[Deal]:
        """All deals, newest first, validated into :class:`Deal` records."""
        rows: Any = self._request(
            "GET",
            self._table_path,
            params={"select": "*", "order": "created_at.desc"},
            access_token=self._token(),
        )
        if not isinstance(rows, list):
            raise BackendError("Unexpected response when listing deals")
        deals, _dropped = DealValidator.validate_rows(rows)
        self.logger.info("Fetched %d deals", len(deals))
        return deals

    def insert_deal(self, row: dict[str, Any]) -> None:
        """Insert one deal; the backend assigns id, clicks and timestamps."""
        self._request(
            "POST",
            self._table_path,
            payload=[row],
            access_token=self._token(),
            prefer="return=minimal",
        )
        self.logger.info("Inserted deal '%s'", row.get("title"))

    def update_deal(self, deal_id: str, row: dict[str, Any]) -> None:
        """Replace every editable column of one deal."""
        updated: Any = self._request(
            "PATCH",
            self._table_path,
            params={"id": f"eq.{deal_id}"},
            payload=row,
            access_token=self._token(),
            prefer="return=representation",
        )
        if not updated:
            raise DealNotFoundError(f"Deal {deal_id} was not updated")
        self.logger.info("Updated deal %s", deal_id)

    def delete_deal(self, deal_id: str) -> None:
        """Delete one deal permanently."""
        deleted: Any = self._request(
            "DELETE",
            self._table_path,
            params={"id": f"eq.{deal_id}"},
            access_token=self._token(),
            prefer="return=representation",
        )
        if not deleted:
            raise DealNotFoundError(f"Deal {deal_id} was not deleted")
        self.logger.info("Deleted deal %s", deal_id)

    def increment_clicks(self, deal_id: str) -> None:
        """Atomically bump a deal's click counter on the backend."""
        self._request(
            "POST",
            f"/rest/v1/rpc/{self.settings.INCREMENT_CLICKS_RPC}",
            payload={"deal_id": deal_id},
            access_token=self._token(),
        )
        self.logger.debug("Incremented clicks for deal %s", deal_id)
