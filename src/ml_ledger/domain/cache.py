"""Ledger cache — last-synchronized balance and unlock time.

  - Refresh only on explicit request: user refresh, successful connect,
    accounts change, and after a write reaches CONFIRMED. No polling.
  - Both reads complete before the snapshot is replaced in one assignment,
    so readers never observe a half-updated snapshot.
  - A failed refresh raises SyncError and keeps the previous snapshot.
"""

import logging

from src.ml_common.datetime_utils import utc_now
from src.ml_common.errors import AppError, SyncError
from src.ml_ledger.application.client import LedgerClient
from src.ml_ledger.domain.models import LedgerSnapshot
from src.ml_session.application.service import SessionStateMachine

logger = logging.getLogger(__name__)


class LedgerCache:
    def __init__(self, client: LedgerClient, session: SessionStateMachine) -> None:
        self._client = client
        self._session = session
        self._snapshot: LedgerSnapshot | None = None

    @property
    def snapshot(self) -> LedgerSnapshot | None:
        return self._snapshot

    @property
    def is_populated(self) -> bool:
        return self._snapshot is not None

    async def refresh(self) -> LedgerSnapshot:
        self._session.require_connected()
        try:
            balance = await self._client.read_balance()
            unlock_timestamp = await self._client.read_unlock_time()
        except AppError as exc:
            logger.warning("Ledger refresh failed: %s", exc.message)
            raise SyncError(exc) from exc

        snapshot = LedgerSnapshot(
            balance_atomic=balance,
            unlock_timestamp=unlock_timestamp,
            refreshed_at=utc_now(),
        )
        self._snapshot = snapshot
        logger.debug("Ledger snapshot: balance=%d unlock=%d", balance, unlock_timestamp)
        return snapshot
