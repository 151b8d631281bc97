from __future__ import annotations

from typing import Any

import pytest

from relay.errors import InvalidRoleError
from relay.coordinator import Role, SessionRegistry
from relay.config.websocket import WS_CLOSE_SUPERSEDED_CODE


class _FakeConnection:
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any], str | None]] = []
        self.closed: tuple[int, str] | None = None

    async def send(self, msg_type: str, payload: dict[str, Any], *, request_id: str | None = None) -> bool:
        self.sent.append((msg_type, payload, request_id))
        return True

    async def close(self, *, code: int, reason: str = "") -> None:
        self.closed = (code, reason)


@pytest.mark.asyncio
async def test_register_and_get() -> None:
    registry = SessionRegistry(now_fn=lambda: 42.0)
    conn = _FakeConnection()

    session = await registry.register("provider", conn)

    assert session.role is Role.PROVIDER
    assert session.last_seen == 42.0
    assert session.alive
    assert registry.get(Role.PROVIDER) is conn
    assert registry.get(Role.SUBSCRIBER) is None


@pytest.mark.asyncio
async def test_register_accepts_legacy_aliases() -> None:
    registry = SessionRegistry()
    desktop, phone = _FakeConnection(), _FakeConnection()

    await registry.register("Windows", desktop)
    await registry.register("iphone", phone)

    assert registry.get(Role.PROVIDER) is desktop
    assert registry.get(Role.SUBSCRIBER) is phone


@pytest.mark.parametrize("role", ["", "requester", "admin", None, 3])
@pytest.mark.asyncio
async def test_register_rejects_invalid_role_without_state_change(role: object) -> None:
    registry = SessionRegistry()
    existing = _FakeConnection()
    await registry.register(Role.PROVIDER, existing)

    with pytest.raises(InvalidRoleError) as exc:
        await registry.register(role, _FakeConnection())

    assert exc.value.code == "invalid_role"
    assert registry.get(Role.PROVIDER) is existing
    assert len(registry.sessions()) == 1
    assert existing.closed is None


@pytest.mark.asyncio
async def test_new_registration_supersedes_and_closes_old_connection() -> None:
    registry = SessionRegistry()
    old, new = _FakeConnection(), _FakeConnection()

    await registry.register("provider", old)
    await registry.register("provider", new)

    assert registry.get(Role.PROVIDER) is new
    assert old.closed is not None
    assert old.closed[0] == WS_CLOSE_SUPERSEDED_CODE
    assert new.closed is None


@pytest.mark.asyncio
async def test_late_unregister_of_superseded_connection_is_noop() -> None:
    registry = SessionRegistry()
    old, new = _FakeConnection(), _FakeConnection()
    await registry.register("provider", old)
    await registry.register("provider", new)

    removed = await registry.unregister(old)

    assert removed == []
    assert registry.get(Role.PROVIDER) is new


@pytest.mark.asyncio
async def test_unregister_removes_every_role_of_connection() -> None:
    registry = SessionRegistry()
    conn, other = _FakeConnection(), _FakeConnection()
    await registry.register("provider", conn)
    await registry.register("subscriber", conn)
    await registry.register("subscriber", other)

    removed = await registry.unregister(conn)

    assert removed == [Role.PROVIDER]
    assert registry.get(Role.PROVIDER) is None
    assert registry.get(Role.SUBSCRIBER) is other


@pytest.mark.asyncio
async def test_reregistering_same_connection_does_not_close_it() -> None:
    registry = SessionRegistry()
    conn = _FakeConnection()
    await registry.register("subscriber", conn)
    await registry.register("subscriber", conn)

    assert conn.closed is None
    assert registry.get(Role.SUBSCRIBER) is conn


@pytest.mark.asyncio
async def test_mark_alive_clears_ping_flag() -> None:
    now = [1.0]
    registry = SessionRegistry(now_fn=lambda: now[0])
    conn = _FakeConnection()
    await registry.register("provider", conn)

    registry.mark_pinged(conn)
    session = registry.session(Role.PROVIDER)
    assert session is not None and session.awaiting_pong

    now[0] = 5.0
    assert registry.mark_alive(conn) is True
    assert not session.awaiting_pong
    assert session.last_seen == 5.0

    assert registry.mark_alive(_FakeConnection()) is False
