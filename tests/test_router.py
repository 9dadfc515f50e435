import json
import logging

import pytest
from websockets.exceptions import ConnectionClosedError

from tests.conftest import make_connection


def sent_frames(connection):
    return [json.loads(c.args[0]) for c in connection.send.await_args_list]


@pytest.mark.asyncio
async def test_message_reaches_registered_receiver(registry, router):
    a, b = make_connection(), make_connection()
    registry.register("u1", a)
    registry.register("u2", b)

    delivered = await router.route("u2", "u1", "hi", origin=b)

    assert delivered is True
    assert sent_frames(a) == [
        {"event": "receiveMessage", "data": {"senderId": "u2", "messageText": "hi"}}
    ]
    b.send.assert_not_called()


@pytest.mark.asyncio
async def test_unregistered_receiver_is_dropped(registry, router):
    a, b = make_connection(), make_connection()
    registry.register("u1", a)
    registry.register("u2", b)

    delivered = await router.route("u2", "u3", "hi", origin=b)

    assert delivered is False
    a.send.assert_not_called()
    b.send.assert_not_called()


@pytest.mark.asyncio
async def test_reconnect_routes_to_newest_connection(registry, router):
    h1, h2 = make_connection(), make_connection()
    registry.register("u1", h1)
    registry.register("u1", h2)

    await router.route("u2", "u1", "hi")

    h1.send.assert_not_called()
    assert sent_frames(h2)[0]["data"] == {"senderId": "u2", "messageText": "hi"}


@pytest.mark.asyncio
async def test_messages_to_one_receiver_keep_their_order(registry, router):
    a = make_connection()
    registry.register("u1", a)

    for text in ("one", "two", "three"):
        await router.route("u2", "u1", text)

    assert [f["data"]["messageText"] for f in sent_frames(a)] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_transport_failure_is_swallowed(registry, router, caplog):
    dead = make_connection()
    dead.send.side_effect = ConnectionClosedError(None, None)
    registry.register("u1", dead)

    with caplog.at_level(logging.WARNING, logger="hfc.nucleus.router"):
        delivered = await router.route("u2", "u1", "hi")

    assert delivered is False
    assert "closed during delivery" in caplog.text


@pytest.mark.asyncio
async def test_unexpected_send_error_is_swallowed(registry, router):
    broken = make_connection()
    broken.send.side_effect = OSError("broken pipe")
    registry.register("u1", broken)

    assert await router.route("u2", "u1", "hi") is False


@pytest.mark.asyncio
async def test_message_is_not_echoed_to_sending_connection(registry, router):
    a = make_connection()
    registry.register("u1", a)

    assert await router.route("u1", "u1", "note to self", origin=a) is False
    a.send.assert_not_called()


@pytest.mark.asyncio
async def test_sender_id_is_not_validated(registry, router):
    a = make_connection()
    registry.register("u1", a)

    assert await router.route("nobody", "u1", "hi") is True
    assert sent_frames(a)[0]["data"]["senderId"] == "nobody"
