"""
Publish handshake: single-slot, last request wins, consume-once.
"""

from __future__ import annotations

from ticketpanel.services import PublishCoordinator
from ticketpanel.storage import PUBLISH_FLAGS


class CountingStore:
    """Wraps a real store and counts writes."""

    def __init__(self, inner):
        self.inner = inner
        self.writes = 0

    def read(self, name, default):
        return self.inner.read(name, default)

    def write(self, name, value):
        self.writes += 1
        self.inner.write(name, value)

    def lock(self, name):
        return self.inner.lock(name)

    def update(self, name, default, fn):
        with self.lock(name):
            doc = self.read(name, default)
            result = fn(doc)
            self.write(name, doc)
            return result


def test_peek_on_empty_guild(store):
    assert PublishCoordinator(store).peek("g1") == {"pending": False, "info": None}


def test_request_peek_consume_sequence(store):
    publisher = PublishCoordinator(store)
    flag = publisher.request("g", "alice")

    peeked = publisher.peek("g")
    assert peeked["pending"] is True
    assert peeked["info"] == {"requestedAt": flag.requested_at, "byUser": "alice"}
    # peeking again sees the same thing
    assert publisher.peek("g") == peeked

    consumed = publisher.consume("g")
    assert consumed == {"pending": True, "info": peeked["info"]}

    assert publisher.consume("g") == {"pending": False}
    assert publisher.peek("g") == {"pending": False, "info": None}


def test_repeat_request_overwrites_without_queueing(store):
    publisher = PublishCoordinator(store)
    publisher.request("g", "a")
    publisher.request("g", "b")

    consumed = publisher.consume("g")
    assert consumed["pending"] is True
    assert consumed["info"]["byUser"] == "b"
    assert publisher.consume("g") == {"pending": False}


def test_flags_are_per_guild(store):
    publisher = PublishCoordinator(store)
    publisher.request("g1", "a")
    publisher.request("g2", "b")

    assert publisher.consume("g1")["info"]["byUser"] == "a"
    assert publisher.peek("g2")["info"]["byUser"] == "b"
    assert store.read(PUBLISH_FLAGS, {}).keys() == {"g2"}


def test_request_without_user_stores_null(store):
    publisher = PublishCoordinator(store)
    publisher.request("g", None)
    assert publisher.peek("g")["info"]["byUser"] is None


def test_consuming_empty_flag_writes_nothing(file_store):
    counting = CountingStore(file_store)
    publisher = PublishCoordinator(counting)

    publisher.consume("g")
    publisher.peek("g")
    assert counting.writes == 0

    publisher.request("g", "a")
    publisher.consume("g")
    assert counting.writes == 2
