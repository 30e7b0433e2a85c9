"""
txlog.py — Session-scoped audit trail of submitted transactions.

Newest first, append-only, in memory. The ledger is the system of record;
this log only lets the user see what they sent during this session.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from .models import TransactionRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionLog:

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._records: list[TransactionRecord] = []

    def append(self, tx_hash: str, operation: str = "") -> TransactionRecord:
        record = TransactionRecord(tx_hash=tx_hash, timestamp=self._clock(), operation=operation)
        self._records.insert(0, record)
        return record

    @property
    def entries(self) -> tuple[TransactionRecord, ...]:
        return tuple(self._records)

    @property
    def latest(self) -> Optional[TransactionRecord]:
        return self._records[0] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(tuple(self._records))

    def __str__(self) -> str:
        if not self._records:
            return "No transactions yet."
        lines = ["=== Recent Transactions ==="]
        for r in self._records:
            label = f" [{r.operation}]" if r.operation else ""
            lines.append(f"  {r.timestamp.isoformat()}{label} {r.tx_hash}")
        return "\n".join(lines)
