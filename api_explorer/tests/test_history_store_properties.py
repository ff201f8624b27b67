"""
Property-based tests for the history stores.

Both the in-memory and the SQL store must honour the same contract:
newest-first ordering, retention of the most recent entries, and
rejection of appends without url or method.
"""

import threading

import pytest
from hypothesis import given, strategies as st, settings

from api_explorer.database import create_db_engine, create_session_factory, init_db
from api_explorer.exceptions import HistoryValidationError
from api_explorer.schemas.history import HistoryCreate
from api_explorer.schemas.request import HeaderItem
from api_explorer.schemas.response import ResponseSummary
from api_explorer.services import history_store
from api_explorer.services.history_store import InMemoryHistoryStore, SqlHistoryStore


STORE_KINDS = ["memory", "sql"]


def make_store(kind: str, limit: int = 50):
    """Create a fresh, empty store of the given kind."""
    if kind == "memory":
        return InMemoryHistoryStore(limit=limit)
    engine = create_db_engine("sqlite://")
    init_db(engine)
    return SqlHistoryStore(create_session_factory(engine), limit=limit)


def make_payload(i: int, method: str = "GET") -> HistoryCreate:
    return HistoryCreate(
        url=f"https://example.com/item/{i}",
        method=method,
        headers=[HeaderItem(key="X-Index", value=str(i))],
        response_summary=ResponseSummary(status=200, status_text="OK"),
    )


http_method_strategy = st.sampled_from(["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])

text_alphabet = st.characters(exclude_characters="\x00")


class TestHistoryOrdering:
    """Listing returns every retained entry, newest first."""

    @pytest.mark.parametrize("kind", STORE_KINDS)
    @given(count=st.integers(min_value=0, max_value=50))
    @settings(max_examples=15, deadline=None)
    def test_round_trip_returns_all_entries_newest_first(self, kind: str, count: int):
        store = make_store(kind)
        appended = [store.append(make_payload(i)) for i in range(count)]

        listed = store.list()

        assert len(listed) == count
        assert [e.id for e in listed] == [e.id for e in reversed(appended)]
        timestamps = [e.timestamp for e in listed]
        assert timestamps == sorted(timestamps, reverse=True)

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_ties_are_broken_by_newest_insertion(self, kind: str, monkeypatch):
        monkeypatch.setattr(history_store, "_now_ms", lambda: 1_700_000_000_000)
        store = make_store(kind)
        first = store.append(make_payload(1))
        second = store.append(make_payload(2))
        third = store.append(make_payload(3))

        assert [e.id for e in store.list()] == [third.id, second.id, first.id]

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_ordering_follows_timestamp_not_insertion(self, kind: str, monkeypatch):
        clock = iter([3_000, 1_000, 2_000])
        monkeypatch.setattr(history_store, "_now_ms", lambda: next(clock))
        store = make_store(kind)
        a = store.append(make_payload(1))
        b = store.append(make_payload(2))
        c = store.append(make_payload(3))

        assert [e.id for e in store.list()] == [a.id, c.id, b.id]


class TestHistoryBounding:
    """Only the most recently appended entries survive."""

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_sixty_appends_keep_latest_fifty(self, kind: str):
        store = make_store(kind)
        appended = [store.append(make_payload(i)) for i in range(60)]

        listed = store.list()

        assert len(listed) == 50
        assert {e.id for e in listed} == {e.id for e in appended[10:]}
        assert not {e.id for e in listed} & {e.id for e in appended[:10]}

    @pytest.mark.parametrize("kind", STORE_KINDS)
    @given(limit=st.integers(min_value=1, max_value=5), extra=st.integers(min_value=0, max_value=5))
    @settings(max_examples=10, deadline=None)
    def test_custom_limit_is_honoured(self, kind: str, limit: int, extra: int):
        store = make_store(kind, limit=limit)
        appended = [store.append(make_payload(i)) for i in range(limit + extra)]

        assert [e.id for e in store.list()] == [e.id for e in reversed(appended[-limit:])]

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_cap_boundary_drops_only_the_oldest(self, kind: str):
        store = make_store(kind, limit=4)
        appended = [store.append(make_payload(i)) for i in range(4)]
        assert len(store.list()) == 4

        appended.append(store.append(make_payload(4)))

        assert [e.id for e in store.list()] == [e.id for e in reversed(appended[1:])]

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            InMemoryHistoryStore(limit=0)

    def test_concurrent_appends_never_exceed_limit(self):
        store = InMemoryHistoryStore(limit=50)
        ids: list[str] = []
        ids_lock = threading.Lock()

        def worker(offset: int):
            for i in range(20):
                entry = store.append(make_payload(offset * 100 + i))
                with ids_lock:
                    ids.append(entry.id)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        listed = store.list()
        assert len(ids) == 160
        assert len(set(ids)) == 160
        assert len(listed) == 50
        assert {e.id for e in listed} <= set(ids)


class TestHistoryValidation:
    """Appends without url or method are rejected and change nothing."""

    @pytest.mark.parametrize("kind", STORE_KINDS)
    @pytest.mark.parametrize("payload", [
        HistoryCreate(url=None, method="GET"),
        HistoryCreate(url="", method="POST"),
        HistoryCreate(url="https://example.com", method=None),
        HistoryCreate(),
    ])
    def test_missing_required_fields_are_rejected(self, kind: str, payload: HistoryCreate):
        store = make_store(kind)
        store.append(make_payload(0))

        with pytest.raises(HistoryValidationError) as exc_info:
            store.append(payload)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Missing required fields: url and method"
        assert len(store.list()) == 1


class TestHistoryCompleteness:
    """Stored entries keep the request verbatim."""

    @pytest.mark.parametrize("kind", STORE_KINDS)
    @given(
        method=http_method_strategy,
        body=st.one_of(st.none(), st.text(alphabet=text_alphabet, max_size=200)),
        header_values=st.lists(st.text(alphabet=text_alphabet, max_size=20), max_size=4),
        status=st.one_of(st.none(), st.sampled_from([200, 201, 404, 500])),
    )
    @settings(max_examples=20, deadline=None)
    def test_entry_contains_request_and_summary(
        self, kind: str, method: str, body, header_values: list[str], status
    ):
        store = make_store(kind)
        headers = [
            HeaderItem(key=f"X-H{i}", value=v, enabled=i % 2 == 0)
            for i, v in enumerate(header_values)
        ]
        summary = ResponseSummary(status=status, status_text="Text" if status else None)
        payload = HistoryCreate(
            url="example.com/path", method=method, headers=headers, body=body,
            response_summary=summary,
        )

        stored = store.append(payload)
        listed = store.list()[0]

        for entry in (stored, listed):
            assert entry.id
            assert entry.timestamp > 0
            assert entry.url == "example.com/path"
            assert entry.method == method
            assert entry.body == body
            assert entry.headers == headers
            assert entry.response_summary == summary

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_missing_summary_stays_absent(self, kind: str):
        store = make_store(kind)
        store.append(HistoryCreate(url="https://example.com", method="GET"))

        assert store.list()[0].response_summary is None

    @pytest.mark.parametrize("kind", STORE_KINDS)
    def test_listed_entries_are_copies(self, kind: str):
        store = make_store(kind)
        store.append(make_payload(1))

        listed = store.list()
        listed[0].headers.clear()
        listed[0].url = "https://changed.example.com"
        listed.clear()

        fresh = store.list()
        assert len(fresh) == 1
        assert fresh[0].url == "https://example.com/item/1"
        assert len(fresh[0].headers) == 1
