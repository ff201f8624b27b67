"""
History store for past requests and their response summaries.

The store exclusively owns its entries. Callers interact through list()
and append() only and always receive copies.

Contract shared by every implementation:
- append() rejects input without url or method and leaves the store unchanged
- append() assigns id and timestamp (epoch milliseconds)
- only the `limit` most recently appended entries are retained
- list() sorts at read time: newest timestamp first, ties broken by
  newest insertion first
"""

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from ..config import DEFAULT_HISTORY_LIMIT, Settings
from ..database import create_db_engine, create_session_factory, init_db
from ..exceptions import HistoryValidationError
from ..models.history import HistoryRecord
from ..schemas.history import HistoryCreate, HistoryEntry
from ..schemas.request import HeaderItem
from ..schemas.response import ResponseSummary


log = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _validate(data: HistoryCreate) -> None:
    if not data.url or not data.method:
        log.warning("Rejected history append without url or method")
        raise HistoryValidationError()


class HistoryStore(ABC):
    """Bounded, time-ordered record of past requests."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.limit = limit

    @abstractmethod
    def list(self) -> list[HistoryEntry]:
        """Return all entries, newest first."""

    @abstractmethod
    def append(self, data: HistoryCreate) -> HistoryEntry:
        """
        Store a request with its response summary.

        Raises:
            HistoryValidationError: If url or method is missing
        """


class InMemoryHistoryStore(HistoryStore):
    """Process-lifetime store backed by a list."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(limit)
        self._entries: list[tuple[int, HistoryEntry]] = []
        self._seq = 0
        self._lock = threading.Lock()

    def list(self) -> list[HistoryEntry]:
        with self._lock:
            snapshot = list(self._entries)
        snapshot.sort(key=lambda item: (item[1].timestamp, item[0]), reverse=True)
        return [entry.model_copy(deep=True) for _, entry in snapshot]

    def append(self, data: HistoryCreate) -> HistoryEntry:
        _validate(data)
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            timestamp=_now_ms(),
            url=data.url,
            method=data.method,
            headers=[h.model_copy() for h in data.headers],
            body=data.body,
            response_summary=data.response_summary,
        )
        with self._lock:
            self._seq += 1
            self._entries.append((self._seq, entry))
            if len(self._entries) > self.limit:
                # Appends are in seq order, so the head holds the oldest
                del self._entries[: len(self._entries) - self.limit]
        log.debug("Stored history entry %s for %s %s", entry.id, entry.method, entry.url)
        return entry.model_copy(deep=True)


class SqlHistoryStore(HistoryStore):
    """Durable store backed by the history table."""

    def __init__(self, session_factory: sessionmaker, limit: int = DEFAULT_HISTORY_LIMIT):
        super().__init__(limit)
        self._session_factory = session_factory
        self._lock = threading.Lock()

    def list(self) -> list[HistoryEntry]:
        with self._session_factory() as db:
            records = db.scalars(
                select(HistoryRecord).order_by(
                    HistoryRecord.timestamp.desc(), HistoryRecord.seq.desc()
                )
            ).all()
            return [_to_entry(record) for record in records]

    def append(self, data: HistoryCreate) -> HistoryEntry:
        _validate(data)
        summary = data.response_summary
        record = HistoryRecord(
            id=uuid.uuid4().hex,
            timestamp=_now_ms(),
            method=data.method,
            url=data.url,
            headers=[h.model_dump() for h in data.headers],
            body=data.body,
            has_summary=summary is not None,
            status_code=summary.status if summary else None,
            status_text=summary.status_text if summary else None,
        )
        with self._lock, self._session_factory() as db:
            db.add(record)
            db.flush()
            self._truncate(db)
            db.commit()
            db.refresh(record)
            entry = _to_entry(record)
        log.debug("Stored history entry %s for %s %s", entry.id, entry.method, entry.url)
        return entry

    def _truncate(self, db: Session) -> None:
        # Oldest seq still inside the cap; None while under the cap
        cutoff = db.scalar(
            select(HistoryRecord.seq)
            .order_by(HistoryRecord.seq.desc())
            .offset(self.limit - 1)
            .limit(1)
        )
        if cutoff is None:
            return
        db.execute(
            delete(HistoryRecord)
            .where(HistoryRecord.seq < cutoff)
            .execution_options(synchronize_session=False)
        )


def _to_entry(record: HistoryRecord) -> HistoryEntry:
    summary = None
    if record.has_summary:
        summary = ResponseSummary(status=record.status_code, status_text=record.status_text)
    return HistoryEntry(
        id=record.id,
        timestamp=record.timestamp,
        url=record.url,
        method=record.method,
        headers=[HeaderItem(**h) for h in record.headers or []],
        body=record.body,
        response_summary=summary,
    )


def create_history_store(settings: Settings) -> HistoryStore:
    """
    Build the history store selected by the settings.

    The SQL backend creates its tables on first use.
    """
    if settings.history_backend == "sql":
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        log.info("Using SQL history store at %s", settings.database_url)
        return SqlHistoryStore(create_session_factory(engine), limit=settings.history_limit)
    log.info("Using in-memory history store (limit %d)", settings.history_limit)
    return InMemoryHistoryStore(limit=settings.history_limit)
