"""Upload activity feed tests."""

from __future__ import annotations

import threading

from rover_relay.relay import ActivityFeed


def test_outcomes_are_numbered_in_order() -> None:
    feed = ActivityFeed()

    first = feed.record_accepted(1000, 0.0, 1000.0)
    second = feed.record_rejected("Frame too large", frame_size=9000, dynamic_timeout_ms=1000.0)

    assert (first.sequence, second.sequence) == (1, 2)
    assert feed.latest_sequence == 2
    assert [outcome.sequence for outcome in feed.since(0)] == [1, 2]
    assert feed.since(1) == [second]
    assert second.accepted is False
    assert second.reason == "Frame too large"


def test_history_is_bounded() -> None:
    feed = ActivityFeed(history=3)
    for size in range(5):
        feed.record_accepted(size, 0.0, 1000.0)

    assert [outcome.frame_size for outcome in feed.since(0)] == [2, 3, 4]
    assert feed.latest_sequence == 5


def test_wait_since_times_out_without_new_outcomes() -> None:
    feed = ActivityFeed()
    feed.record_accepted(10, 0.0, 1000.0)

    assert feed.wait_since(1, timeout=0.01) == []


def test_wait_since_wakes_on_new_outcome() -> None:
    feed = ActivityFeed()
    received = []

    def follower() -> None:
        received.extend(feed.wait_since(0, timeout=5.0))

    thread = threading.Thread(target=follower)
    thread.start()
    feed.record_accepted(42, 5.0, 1000.0)
    thread.join(timeout=5.0)

    assert [outcome.frame_size for outcome in received] == [42]


def test_close_releases_waiting_followers() -> None:
    feed = ActivityFeed()
    done = threading.Event()

    def follower() -> None:
        feed.wait_since(0, timeout=5.0)
        done.set()

    thread = threading.Thread(target=follower)
    thread.start()
    feed.close()
    thread.join(timeout=5.0)

    assert done.is_set()
    assert feed.closed


def test_outcome_serializes_with_wire_names() -> None:
    outcome = ActivityFeed().record_accepted(2048, 12.5, 240.0)

    payload = outcome.to_dict()

    assert payload["frameSize"] == 2048
    assert payload["dynamicTimeout"] == 240.0
    assert payload["fps"] == 12.5
    assert payload["sequence"] == 1
    assert "frame_size" not in payload
