"""Tests for note reorganization and the schedule check."""

from datetime import datetime
from pathlib import Path

from daily_news.errors import StorageError
from daily_news.runner import is_schedule_due, reorganize_existing_notes
from daily_news.store import FileSystemStore


class RenameFailsStore(FileSystemStore):
    def rename(self, old_path, new_path):
        raise StorageError("locked")


def _seed(store: FileSystemStore) -> None:
    store.create_folder("News Archive/2024-02")
    store.create("News Archive/Daily News - 2024-03-01.md", "march")
    store.create("News Archive/Daily News - 2024-02-29.md", "feb flat")
    store.create("News Archive/2024-02/Daily News - 2024-02-29.md", "feb placed")
    store.create("News Archive/Notes.md", "unrelated")
    store.create("News Archive/Daily News - March.md", "bad name")


def test_reorganize_moves_flat_notes_into_month_folders(tmp_path: Path):
    store = FileSystemStore(tmp_path)
    _seed(store)

    report = reorganize_existing_notes(store, "News Archive")

    assert report.moved == 1
    assert report.skipped == 1
    assert report.errors == 0
    assert store.read("News Archive/2024-03/Daily News - 2024-03-01.md") == "march"
    assert not store.exists("News Archive/Daily News - 2024-03-01.md")
    assert store.read("News Archive/2024-02/Daily News - 2024-02-29.md") == "feb placed"
    assert store.read("News Archive/Daily News - 2024-02-29.md") == "feb flat"
    assert store.exists("News Archive/Notes.md")
    assert store.exists("News Archive/Daily News - March.md")
    assert report.summary() == "1 moved, 1 skipped"


def test_reorganize_is_idempotent(tmp_path: Path):
    store = FileSystemStore(tmp_path)
    _seed(store)
    reorganize_existing_notes(store, "News Archive")

    again = reorganize_existing_notes(store, "News Archive")

    assert again.moved == 0
    assert again.skipped == 1


def test_reorganize_counts_errors(tmp_path: Path):
    store = RenameFailsStore(tmp_path)
    store.create_folder("News Archive")
    store.create("News Archive/Daily News - 2024-03-01.md", "march")

    report = reorganize_existing_notes(store, "News Archive")

    assert report.errors == 1
    assert report.moved == 0
    assert store.exists("News Archive/Daily News - 2024-03-01.md")


def test_reorganize_missing_archive_is_noop(tmp_path: Path):
    report = reorganize_existing_notes(FileSystemStore(tmp_path), "News Archive")
    assert report.summary() == "nothing to do"


def test_schedule_due_only_on_exact_minute():
    assert is_schedule_due("08:00", datetime(2024, 3, 1, 8, 0, 59))
    assert not is_schedule_due("08:00", datetime(2024, 3, 1, 8, 1))
    assert is_schedule_due("7:05", datetime(2024, 3, 1, 7, 5))
    assert not is_schedule_due("soon", datetime(2024, 3, 1, 8, 0))
