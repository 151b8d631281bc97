"""Peer roles accepted by the session registry."""

from __future__ import annotations

import enum

from relay.errors import InvalidRoleError


class Role(str, enum.Enum):
    PROVIDER = "provider"
    SUBSCRIBER = "subscriber"


# Names used by the first generation of desktop and phone clients.
ROLE_ALIASES: dict[str, Role] = {
    "windows": Role.PROVIDER,
    "iphone": Role.SUBSCRIBER,
}


def parse_role(raw: object) -> Role:
    if isinstance(raw, Role):
        return raw
    if not isinstance(raw, str):
        raise InvalidRoleError(raw)
    key = raw.strip().lower()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    try:
        return Role(key)
    except ValueError:
        raise InvalidRoleError(raw) from None


__all__ = ["ROLE_ALIASES", "Role", "parse_role"]
