from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from coursetime.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    """Test that is_tty_enabled returns sys.stdout.isatty()."""
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch('coursetime.services.progress.is_tty_enabled', return_value=True), \
             patch('coursetime.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(3, description="Decoding uploads")

            assert tracker.total_files == 3
            assert tracker.completed == 0
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=3,
                desc="Decoding uploads",
                unit="file",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('coursetime.services.progress.is_tty_enabled', return_value=False), \
             patch('coursetime.services.progress.tqdm') as mock_tqdm:
            tracker = ProgressTracker(3)

            assert tracker.enabled is False
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_finish_file_updates_bar(self):
        with patch('coursetime.services.progress.is_tty_enabled', return_value=True), \
             patch('coursetime.services.progress.tqdm') as mock_tqdm:
            mock_pbar = mock_tqdm.return_value
            tracker = ProgressTracker(3)

            tracker.finish_file(Path("/data/legacy.xlsx"), success=False)

            assert tracker.completed == 1
            mock_pbar.set_postfix.assert_called_once_with(last="legacy.xlsx", ok=False)
            mock_pbar.update.assert_called_once_with(1)

    def test_finish_file_counts_without_tty(self):
        with patch('coursetime.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(2)
            tracker.finish_file(Path("a.csv"))
            tracker.finish_file(Path("b.csv"))
            assert tracker.completed == 2

    def test_context_manager_closes_bar(self):
        with patch('coursetime.services.progress.is_tty_enabled', return_value=True), \
             patch('coursetime.services.progress.tqdm') as mock_tqdm:
            mock_pbar = mock_tqdm.return_value
            with ProgressTracker(1) as tracker:
                tracker.finish_file(Path("x.xlsx"))

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
