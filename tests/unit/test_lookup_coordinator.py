# ABOUTME: Unit tests for BookLookupCoordinator and build_coordinator.
# ABOUTME: Uses fake providers to check fallback order, failure containment, batching, and cancellation.

import logging
import threading
from typing import Any

import httpx
import pytest

from bookscan.config import LookupConfig
from bookscan.metadata.lookup import BookLookupCoordinator, build_coordinator
from bookscan.metadata.types import BookPreview, BookSource


class FakeProvider:
    """Provider double with canned ISBN hits and search results, recording every call."""

    def __init__(
        self,
        name: str,
        source: BookSource,
        isbn_hits: dict[str, str] | None = None,
        search_titles: list[str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self._source = source
        self._isbn_hits = isbn_hits or {}
        self._search_titles = search_titles or []
        self._error = error
        self.isbn_calls: list[str] = []
        self.search_calls: list[tuple[str, str | None, int]] = []

    @property
    def name(self) -> str:
        return self._name

    def lookup_by_isbn(self, isbn: str) -> BookPreview | None:
        self.isbn_calls.append(isbn)
        if self._error:
            raise self._error
        title = self._isbn_hits.get(isbn)
        if title is None:
            return None
        return BookPreview(title=title, isbn=isbn, source=self._source, confidence=1.0)

    def search(
        self, title: str, author: str | None = None, max_results: int = 5
    ) -> list[BookPreview]:
        self.search_calls.append((title, author, max_results))
        if self._error:
            raise self._error
        return [
            BookPreview(title=t, source=self._source, confidence=0.9)
            for t in self._search_titles[:max_results]
        ]


def _coordinator(primary: FakeProvider, secondary: FakeProvider) -> BookLookupCoordinator:
    return BookLookupCoordinator(primary=primary, secondary=secondary)


def _ol(**kwargs: Any) -> FakeProvider:
    return FakeProvider("openlibrary", BookSource.OPEN_LIBRARY, **kwargs)


def _gb(**kwargs: Any) -> FakeProvider:
    return FakeProvider("googlebooks", BookSource.GOOGLE_BOOKS, **kwargs)


class TestLookupByIsbn:
    """Tests for single ISBN lookups."""

    def test_primary_hit_skips_secondary(self) -> None:
        primary = _ol(isbn_hits={"9780156001311": "The Name of the Rose"})
        secondary = _gb()
        result = _coordinator(primary, secondary).lookup_by_isbn("9780156001311")
        assert result is not None
        assert result.source is BookSource.OPEN_LIBRARY
        assert secondary.isbn_calls == []

    def test_falls_back_to_secondary(self) -> None:
        primary = _ol()
        secondary = _gb(isbn_hits={"9780743273565": "The Great Gatsby"})
        result = _coordinator(primary, secondary).lookup_by_isbn("9780743273565")
        assert result is not None
        assert result.source is BookSource.GOOGLE_BOOKS
        assert result.confidence == 1.0
        assert primary.isbn_calls == ["9780743273565"]

    def test_isbn10_normalized_before_providers(self) -> None:
        primary = _ol(isbn_hits={"9780743273565": "The Great Gatsby"})
        result = _coordinator(primary, _gb()).lookup_by_isbn("0-7432-7356-7")
        assert result is not None
        assert primary.isbn_calls == ["9780743273565"]

    def test_invalid_isbn_contacts_no_provider(self, caplog: Any) -> None:
        primary, secondary = _ol(), _gb()
        with caplog.at_level(logging.WARNING):
            assert _coordinator(primary, secondary).lookup_by_isbn("12345") is None
        assert primary.isbn_calls == []
        assert secondary.isbn_calls == []
        assert "Invalid ISBN provided: 12345" in caplog.text

    def test_not_found_anywhere(self) -> None:
        assert _coordinator(_ol(), _gb()).lookup_by_isbn("9780743273565") is None

    def test_primary_exception_is_contained(self, caplog: Any) -> None:
        primary = _ol(error=RuntimeError("boom"))
        secondary = _gb(isbn_hits={"9780743273565": "The Great Gatsby"})
        with caplog.at_level(logging.ERROR):
            result = _coordinator(primary, secondary).lookup_by_isbn("9780743273565")
        assert result is not None
        assert result.source is BookSource.GOOGLE_BOOKS
        assert "openlibrary" in caplog.text

    def test_both_providers_failing_returns_none(self) -> None:
        coordinator = _coordinator(_ol(error=RuntimeError("a")), _gb(error=ValueError("b")))
        assert coordinator.lookup_by_isbn("9780743273565") is None


class TestSearch:
    """Tests for merged title searches."""

    def test_primary_results_come_first(self) -> None:
        primary = _ol(search_titles=["A", "B"])
        secondary = _gb(search_titles=["C", "D", "E"])
        results = _coordinator(primary, secondary).search("Rose", max_results=4)
        assert [r.title for r in results] == ["A", "B", "C", "D"]
        assert secondary.search_calls == [("Rose", None, 2)]

    def test_full_primary_skips_secondary(self) -> None:
        primary = _ol(search_titles=["A", "B", "C"])
        secondary = _gb(search_titles=["D"])
        results = _coordinator(primary, secondary).search("Rose", max_results=3)
        assert [r.title for r in results] == ["A", "B", "C"]
        assert secondary.search_calls == []

    def test_author_passed_to_both(self) -> None:
        primary, secondary = _ol(), _gb()
        _coordinator(primary, secondary).search("Rose", "Eco", max_results=2)
        assert primary.search_calls == [("Rose", "Eco", 2)]
        assert secondary.search_calls == [("Rose", "Eco", 2)]

    def test_primary_failure_falls_through(self) -> None:
        primary = _ol(error=RuntimeError("down"))
        secondary = _gb(search_titles=["C"])
        results = _coordinator(primary, secondary).search("Rose")
        assert [r.title for r in results] == ["C"]

    @pytest.mark.parametrize("max_results", [0, -3])
    def test_non_positive_max_results(self, max_results: int) -> None:
        primary = _ol(search_titles=["A"])
        assert _coordinator(primary, _gb()).search("Rose", max_results=max_results) == []
        assert primary.search_calls == []

    def test_no_results(self) -> None:
        assert _coordinator(_ol(), _gb()).search("Nothing") == []


class TestLookupMultipleIsbns:
    """Tests for batch lookups."""

    def test_results_in_input_order(self) -> None:
        primary = _ol(
            isbn_hits={"9780156001311": "The Name of the Rose", "9780743273565": "The Great Gatsby"}
        )
        results = _coordinator(primary, _gb()).lookup_multiple_isbns(
            ["9780743273565", "9780156001311"]
        )
        assert [r.title for r in results] == ["The Great Gatsby", "The Name of the Rose"]

    def test_misses_and_invalid_inputs_dropped(self) -> None:
        primary = _ol(isbn_hits={"9780156001311": "The Name of the Rose"})
        results = _coordinator(primary, _gb()).lookup_multiple_isbns(
            ["garbage", "9780743273565", "9780156001311"]
        )
        assert [r.isbn for r in results] == ["9780156001311"]

    def test_duplicates_looked_up_once(self) -> None:
        primary = _ol(isbn_hits={"9780743273565": "The Great Gatsby"})
        results = _coordinator(primary, _gb()).lookup_multiple_isbns(
            ["9780743273565", "0743273567", "978-0-7432-7356-5"]
        )
        assert len(results) == 1
        assert primary.isbn_calls == ["9780743273565"]

    def test_empty_input(self) -> None:
        assert _coordinator(_ol(), _gb()).lookup_multiple_isbns([]) == []

    def test_pre_cancelled_batch_does_nothing(self) -> None:
        primary = _ol(isbn_hits={"9780743273565": "The Great Gatsby"})
        cancel = threading.Event()
        cancel.set()
        results = _coordinator(primary, _gb()).lookup_multiple_isbns(["9780743273565"], cancel)
        assert results == []
        assert primary.isbn_calls == []

    def test_cancel_mid_batch_keeps_partial_results(self) -> None:
        cancel = threading.Event()

        class CancellingProvider(FakeProvider):
            def lookup_by_isbn(self, isbn: str) -> BookPreview | None:
                cancel.set()
                return super().lookup_by_isbn(isbn)

        primary = CancellingProvider(
            "openlibrary",
            BookSource.OPEN_LIBRARY,
            isbn_hits={"9780743273565": "The Great Gatsby", "9780156001311": "The Name of the Rose"},
        )
        results = _coordinator(primary, _gb()).lookup_multiple_isbns(
            ["9780743273565", "9780156001311"], cancel
        )
        assert [r.title for r in results] == ["The Great Gatsby"]
        assert primary.isbn_calls == ["9780743273565"]


def _mock_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "openlibrary.org":
            return httpx.Response(404)
        if request.url.params.get("q") == "isbn:9780743273565":
            return httpx.Response(
                200,
                json={"items": [{"id": "gb1", "volumeInfo": {"title": "The Great Gatsby"}}]},
            )
        return httpx.Response(200, json={"totalItems": 0})

    return httpx.MockTransport(handler)


def _edition_transport(author_count: int, paths: list[str]) -> httpx.MockTransport:
    """Open Library serving one edition with a work and author_count authors."""
    edition = {
        "title": "The Great Gatsby",
        "works": [{"key": "/works/OL1W"}],
        "authors": [{"key": f"/authors/A{n}"} for n in range(1, author_count + 1)],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path.startswith("/isbn/"):
            return httpx.Response(200, json=edition)
        if request.url.path.startswith("/works/"):
            return httpx.Response(200, json={"description": "Jazz Age."})
        return httpx.Response(200, json={"name": request.url.path.rsplit("/", 1)[-1]})

    return httpx.MockTransport(handler)


class TestBuildCoordinator:
    """Tests for the default wiring."""

    def test_rate_limiter_uses_configured_delay(self) -> None:
        coordinator = build_coordinator(LookupConfig(request_delay_ms=250))
        assert coordinator.rate_limiter is not None
        assert coordinator.rate_limiter.min_interval == pytest.approx(0.25)
        coordinator.close()

    def test_provider_order(self) -> None:
        with build_coordinator(LookupConfig(request_delay_ms=0)) as coordinator:
            assert coordinator.primary.name == "openlibrary"
            assert coordinator.secondary.name == "googlebooks"

    def test_end_to_end_fallback_over_transport(self) -> None:
        config = LookupConfig(request_delay_ms=0)
        with build_coordinator(config, transport=_mock_transport()) as coordinator:
            result = coordinator.lookup_by_isbn("0743273567")
        assert result is not None
        assert result.title == "The Great Gatsby"
        assert result.source is BookSource.GOOGLE_BOOKS
        assert result.isbn == "9780743273565"

    @pytest.mark.parametrize(
        ("author_count", "expected_paths"),
        [
            (
                2,
                [
                    "/isbn/9780743273565.json",
                    "/works/OL1W.json",
                    "/authors/A1.json",
                    "/authors/A2.json",
                ],
            ),
            (
                5,
                [
                    "/isbn/9780743273565.json",
                    "/works/OL1W.json",
                    "/authors/A1.json",
                    "/authors/A2.json",
                    "/authors/A3.json",
                ],
            ),
        ],
    )
    def test_every_openlibrary_request_waits_on_limiter(
        self, monkeypatch: pytest.MonkeyPatch, author_count: int, expected_paths: list[str]
    ) -> None:
        paths: list[str] = []
        config = LookupConfig(request_delay_ms=0)
        transport = _edition_transport(author_count, paths)
        with build_coordinator(config, transport=transport) as coordinator:
            limiter = coordinator.rate_limiter
            assert limiter is not None
            waits: list[None] = []
            real_wait = limiter.wait
            monkeypatch.setattr(limiter, "wait", lambda: waits.append(real_wait()))
            result = coordinator.lookup_by_isbn("9780743273565")
        assert result is not None
        assert result.source is BookSource.OPEN_LIBRARY
        assert paths == expected_paths
        assert len(waits) == len(expected_paths)
