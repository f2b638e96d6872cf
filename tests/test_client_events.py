from subslayer.client.events import EventBus, Topic


async def test_callbacks_run_in_subscription_order():
    bus = EventBus()
    seen = []

    async def second(payload):
        seen.append(("second", payload))

    bus.subscribe(Topic.SUBSCRIPTIONS_CHANGED, lambda payload: seen.append(("first", payload)))
    bus.subscribe(Topic.SUBSCRIPTIONS_CHANGED, second)

    await bus.publish(Topic.SUBSCRIPTIONS_CHANGED, {"reason": "created"})
    assert seen == [("first", {"reason": "created"}), ("second", {"reason": "created"})]


async def test_topics_are_isolated():
    bus = EventBus()
    seen = []
    bus.subscribe(Topic.PROFILE_UPDATED, seen.append)

    await bus.publish(Topic.SESSION_CHANGED, "ignored")
    assert seen == []


async def test_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(Topic.PROFILE_UPDATED, seen.append)

    await bus.publish(Topic.PROFILE_UPDATED, 1)
    unsubscribe()
    unsubscribe()
    await bus.publish(Topic.PROFILE_UPDATED, 2)
    assert seen == [1]
