import pytest
from fastapi import WebSocketDisconnect

from restaurant_os.api.routes.realtime import _drain


class ScriptedSocket:
    """Replays ASGI receive messages in order."""

    def __init__(self, messages):
        self.messages = list(messages)

    async def receive(self):
        return self.messages.pop(0)


async def test_drain_ignores_binary_and_text_frames():
    ws = ScriptedSocket([
        {"type": "websocket.receive", "bytes": b"\x89\x00"},
        {"type": "websocket.receive", "text": "ping"},
        {"type": "websocket.disconnect", "code": 1001},
    ])

    with pytest.raises(WebSocketDisconnect) as exc_info:
        await _drain(ws)

    assert exc_info.value.code == 1001
    assert ws.messages == []


async def test_drain_defaults_close_code():
    with pytest.raises(WebSocketDisconnect) as exc_info:
        await _drain(ScriptedSocket([{"type": "websocket.disconnect"}]))

    assert exc_info.value.code == 1000
