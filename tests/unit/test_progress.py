from __future__ import annotations

from unittest.mock import Mock, patch

from cardsort.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stderr_isatty():
    with patch('sys.stderr.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stderr.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:

    def test_init_with_tty_enabled(self):
        with patch('cardsort.services.progress.is_tty_enabled', return_value=True), \
             patch('cardsort.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(5, description="exit")

            assert tracker.total_records == 5
            assert tracker.processed == 0
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="exit",
                unit="row",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('cardsort.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(5)

            assert tracker.description == "Shaping rows"
            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_advance_updates_bar(self):
        mock_pbar = Mock()
        with patch('cardsort.services.progress.is_tty_enabled', return_value=True), \
             patch('cardsort.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker(3)
            tracker.advance()
            tracker.advance()

            assert tracker.processed == 2
            assert mock_pbar.update.call_count == 2

    def test_advance_without_tty_only_counts(self):
        with patch('cardsort.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(3)
            tracker.advance()
            tracker.set_postfix(kept=1)
            assert tracker.processed == 1

    def test_set_postfix_and_close(self):
        mock_pbar = Mock()
        with patch('cardsort.services.progress.is_tty_enabled', return_value=True), \
             patch('cardsort.services.progress.tqdm', return_value=mock_pbar):

            with ProgressTracker(1) as tracker:
                tracker.set_postfix(kept=1, dropped=0)

            mock_pbar.set_postfix.assert_called_once_with(kept=1, dropped=0)
            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
