"""Mini README: Tests for the JSON document layer.

Structure:
    * test_file_backend_round_trip - written documents read back deep-equal.
    * test_missing_file_is_empty_default - creation case is not an error.
    * test_corrupt_file_raises - unparseable files surface CorruptStoreError.
    * test_transaction_discards_on_error - failed mutations are not persisted.
    * tree helper tests - ensure_path / lookup_path / unwrap_legacy.
    * test_concurrent_accumulates_lose_no_updates - the document lock serialises writers.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from langar_ledger.errors import CorruptStoreError
from langar_ledger.storage import (
    InMemoryBackend,
    JsonDocument,
    JsonFileBackend,
    ensure_path,
    lookup_path,
    unwrap_legacy,
)
from langar_ledger.stores import LedgerStores


def test_file_backend_round_trip(tmp_path) -> None:
    """Writing a document and reading it back yields an equal structure."""

    document = JsonDocument(JsonFileBackend(tmp_path / "donations.json"))
    tree = {"2024": {"March": {"7": {"donation": 800, "fine": 100}}}, "note": "ਲੰਗਰ"}

    document.write(tree)

    assert document.read() == tree
    assert json.loads((tmp_path / "donations.json").read_text(encoding="utf-8")) == tree
    assert not list(tmp_path.glob(".donations.json.*.tmp"))


def test_missing_file_is_empty_default(tmp_path) -> None:
    """A document that was never written loads as its default value."""

    assert JsonDocument(JsonFileBackend(tmp_path / "absent.json")).read() == {}
    assert JsonDocument(JsonFileBackend(tmp_path / "absent.json"), default=list).read() == []


def test_corrupt_file_raises(tmp_path) -> None:
    """Garbage on disk is reported instead of being treated as an empty store."""

    path = tmp_path / "attendance.json"
    path.write_text("{not json", encoding="utf-8")
    document = JsonDocument(JsonFileBackend(path))

    with pytest.raises(CorruptStoreError):
        document.read()
    with pytest.raises(CorruptStoreError):
        with document.transaction():
            pass
    assert path.read_text(encoding="utf-8") == "{not json"


def test_transaction_discards_on_error() -> None:
    """An exception inside the transaction leaves the stored document untouched."""

    backend = InMemoryBackend({"2024": {}})
    document = JsonDocument(backend)

    with pytest.raises(RuntimeError):
        with document.transaction() as tree:
            tree["2025"] = {}
            raise RuntimeError("boom")

    assert document.read() == {"2024": {}}
    assert backend.save_count == 0


def test_transaction_persists_mutation() -> None:
    backend = InMemoryBackend()
    document = JsonDocument(backend)

    with document.transaction() as tree:
        tree["2024"] = {"March": {}}

    assert backend.load() == {"2024": {"March": {}}}
    assert backend.save_count == 1


def test_read_returns_private_copy() -> None:
    document = JsonDocument(InMemoryBackend({"2024": {"March": {}}}))

    snapshot = document.read()
    snapshot["2024"]["April"] = {}

    assert document.read() == {"2024": {"March": {}}}


def test_ensure_path_creates_and_reuses_nodes() -> None:
    tree: dict = {"2024": {"March": {"1": {"7": "present"}}}}

    node = ensure_path(tree, ["2024", "March", "2"])
    node["8"] = "present"
    same = ensure_path(tree, ["2024", "March", "1"])
    entries = ensure_path(tree, ["2024", "April"], leaf_factory=list)

    assert same == {"7": "present"}
    assert tree["2024"]["March"]["2"] == {"8": "present"}
    assert entries == [] and tree["2024"]["April"] is entries


def test_lookup_path_does_not_create() -> None:
    tree = {"2024": {"March": [1, 2]}}

    assert lookup_path(tree, ["2024", "March"]) == [1, 2]
    assert lookup_path(tree, ["2024", "May"]) is None
    assert lookup_path(tree, ["2024", "March", "0"]) is None
    assert tree == {"2024": {"March": [1, 2]}}


def test_unwrap_legacy_accepts_list_wrapped_documents() -> None:
    assert unwrap_legacy([{"2024": {}}]) == {"2024": {}}
    assert unwrap_legacy([]) == {}
    assert unwrap_legacy("nonsense") == {}
    assert unwrap_legacy({"2023": {}}) == {"2023": {}}


def test_concurrent_accumulates_lose_no_updates(tmp_path) -> None:
    """Threads hitting the same coordinate on disk all land in the total."""

    stores = LedgerStores.from_directory(tmp_path / "data")
    amounts = [index % 7 + 1 for index in range(80)]

    def _donate(amount: int) -> None:
        stores.donations.accumulate(2024, "March", "7", amount)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_donate, amounts))

    on_disk = json.loads((tmp_path / "data" / "donations.json").read_text(encoding="utf-8"))
    assert on_disk["2024"]["March"]["7"] == {"donation": sum(amounts), "fine": 0}
