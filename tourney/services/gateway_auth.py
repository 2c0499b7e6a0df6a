from __future__ import annotations

import ipaddress
import secrets
from functools import lru_cache

from fastapi import Request

from tourney.tournaments.constants import USER_ROLES
from tourney.tournaments.types import Actor

GATEWAY_TOKEN_HEADER = "X-Gateway-Token"
USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


def is_valid_gateway_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def is_gateway_request_authenticated(request: Request, *, expected_token: str) -> bool:
    return is_valid_gateway_token(
        expected_token=expected_token,
        received_token=request.headers.get(GATEWAY_TOKEN_HEADER),
    )


@lru_cache(maxsize=32)
def _parse_allowlist(
    allowlist: str,
) -> tuple[ipaddress.IPv4Network | ipaddress.IPv6Network, ...]:
    networks: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = []
    for raw_entry in allowlist.split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def _parse_ip(value: str | None) -> str | None:
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


def is_client_ip_allowed(*, client_ip: str | None, allowlist: str) -> bool:
    if client_ip is None:
        return False
    try:
        parsed_ip = ipaddress.ip_address(client_ip)
    except ValueError:
        return False
    return any(parsed_ip in network for network in _parse_allowlist(allowlist))


def extract_client_ip(request: Request, *, trusted_proxies: str = "") -> str | None:
    client_host = _parse_ip(request.client.host if request.client is not None else None)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for and is_client_ip_allowed(client_ip=client_host, allowlist=trusted_proxies):
        # Only the first hop is trusted; an unparsable value means no client IP.
        return _parse_ip(forwarded_for.split(",", maxsplit=1)[0])
    return client_host


def extract_actor(request: Request) -> Actor | None:
    """Identity forwarded by the gateway, or None when absent or malformed."""
    raw_user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    role = (request.headers.get(USER_ROLE_HEADER) or "").strip().lower()
    if not raw_user_id or role not in USER_ROLES:
        return None
    try:
        user_id = int(raw_user_id)
    except ValueError:
        return None
    if user_id <= 0:
        return None
    return Actor(user_id=user_id, role=role)
