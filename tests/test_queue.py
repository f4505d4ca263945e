"""Tests for the client-side event queue."""

import pytest

from shopsense.tracking import EventQueue


class TestEventQueue:
    def test_empty_flush(self):
        assert EventQueue().flush() == ""

    def test_category_order(self):
        """GIVEN fragments added out of order WHEN flushed SHOULD print impression, pageview, event."""
        queue = EventQueue()
        queue.enqueue("event", "E1")
        queue.enqueue("pageview", "P")
        queue.enqueue("impression", "I1")
        queue.enqueue("event", "E2")
        queue.enqueue("impression", "I2")

        assert queue.flush() == "\nI1\n\nI2\n\nP\n\nE1\n\nE2\n"

    def test_flush_clears(self):
        queue = EventQueue()
        queue.enqueue("pageview", "P")
        queue.flush()

        assert len(queue) == 0
        assert queue.flush() == ""

    def test_unknown_category(self):
        with pytest.raises(ValueError, match="Unknown script category"):
            EventQueue().enqueue("conversion", "X")
