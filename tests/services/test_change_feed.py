"""Tests for the in-process realtime change feed."""

from __future__ import annotations

from hindu_unity.services.realtime import ChangeFeed


async def test_subscribers_receive_only_watched_tables() -> None:
    feed = ChangeFeed(queue_size=5)
    async with feed.subscribe(["posts", "bogus"]) as subscription:
        assert subscription.tables == frozenset({"posts"})
        feed.publish("events", "INSERT", 1)
        feed.publish("posts", "INSERT", 2)

        notification = subscription.queue.get_nowait()
        assert notification.as_message()["id"] == 2
        assert subscription.queue.empty()
    assert feed.subscriber_count == 0


async def test_full_queue_drops_oldest() -> None:
    feed = ChangeFeed(queue_size=2)
    async with feed.subscribe(["posts"]) as subscription:
        for record_id in range(1, 5):
            feed.publish("posts", "UPDATE", record_id)
        received = [subscription.queue.get_nowait().record_id for _ in range(subscription.queue.qsize())]
    assert received == [3, 4]


async def test_publish_without_subscribers() -> None:
    feed = ChangeFeed(queue_size=2)
    notification = feed.publish("comments", "DELETE", 9)
    assert notification.as_message()["table"] == "comments"
