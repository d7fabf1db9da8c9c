"""Tests for license_remover/pipeline/queue.py."""

from license_remover.pipeline import ItemQueue


class TestItemQueue:
    """Tests for ItemQueue."""

    def test_pop_takes_most_recent(self):
        """Last identifier in the initial list comes out first."""
        queue = ItemQueue(["A", "B", "C"])

        assert queue.pop() == "C"
        assert queue.pop() == "B"
        assert queue.pop() == "A"

    def test_pop_empty_returns_none(self):
        """Popping an empty queue is not an error."""
        queue = ItemQueue()

        assert queue.pop() is None
        assert queue.pop() is None

    def test_push_back_is_next(self):
        """A requeued identifier is retried before the rest."""
        queue = ItemQueue(["A", "B", "C"])
        item = queue.pop()
        queue.push_back(item)

        assert queue.pop() == "C"
        assert queue.snapshot() == ("A", "B")

    def test_size_and_len(self):
        queue = ItemQueue(["A", "B"])

        assert queue.size == 2
        assert len(queue) == 2
        queue.pop()
        assert queue.size == 1

    def test_truthiness(self):
        """Empty queue is falsy."""
        queue = ItemQueue(["A"])
        assert queue
        queue.pop()
        assert not queue

    def test_duplicates_are_kept(self):
        """The queue is a multiset; it does not dedupe."""
        queue = ItemQueue(["A", "A"])

        assert queue.pop() == "A"
        assert queue.pop() == "A"
        assert queue.pop() is None

    def test_snapshot_is_a_copy(self):
        """Mutating the source list does not affect the queue."""
        ids = ["A", "B"]
        queue = ItemQueue(ids)
        ids.append("C")

        assert queue.snapshot() == ("A", "B")

    def test_repr(self):
        assert repr(ItemQueue(["A", "B", "C"])) == "ItemQueue(size=3)"
