from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, call, patch

from xlsx_tables.services.progress import ProgressTracker, SheetProgressIndicator, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:

    def test_init_with_tty_enabled(self):
        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=True), \
             patch('xlsx_tables.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(5, description="Test files")

            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Test files",
                unit="file",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(5, description="Test files")

            assert tracker.total_files == 5
            assert tracker.current_file == 0
            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_file_lifecycle_with_tty_enabled(self):
        mock_pbar = Mock()

        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=True), \
             patch('xlsx_tables.services.progress.tqdm', return_value=mock_pbar):

            with ProgressTracker(3, description="Processing") as tracker:
                tracker.start_file(Path("test.xlsx"))
                tracker.set_postfix(success=1, failed=0, tables=2)
                tracker.finish_file(success=True)

            assert tracker.current_file == 1
            assert mock_pbar.set_description.call_args_list == [call("Processing (test.xlsx)"), call("Processing")]
            mock_pbar.update.assert_called_once_with(1)
            mock_pbar.set_postfix.assert_called_once_with(success=1, failed=0, tables=2)
            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None

    def test_file_lifecycle_with_tty_disabled(self):
        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=False):
            with ProgressTracker(3) as tracker:
                tracker.start_file(Path("test.xlsx"))
                tracker.set_postfix(success=1)
                tracker.finish_file(success=False)
            assert tracker.current_file == 1


class TestSheetProgressIndicator:

    def test_writes_status_lines_on_tty(self):
        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=True), \
             patch('xlsx_tables.services.progress.tqdm') as mock_tqdm:

            indicator = SheetProgressIndicator("book.xlsx", 2)
            indicator.start_sheet("Decision")
            indicator.finish_sheet(success=True, status="parsed")
            indicator.start_sheet("Broken")
            indicator.finish_sheet(success=False)

            assert mock_tqdm.write.call_args_list == [
                call("  Sheet 1/2: Decision", end=""),
                call(" - parsed [ok]"),
                call("  Sheet 2/2: Broken", end=""),
                call(" [failed]"),
            ]

    def test_silent_without_tty(self):
        with patch('xlsx_tables.services.progress.is_tty_enabled', return_value=False), \
             patch('xlsx_tables.services.progress.tqdm') as mock_tqdm:

            indicator = SheetProgressIndicator("book.xlsx", 1)
            indicator.start_sheet("Decision")
            indicator.finish_sheet()

            assert indicator.current_sheet == 1
            mock_tqdm.write.assert_not_called()
