from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from tourney.services.gateway_auth import (
    extract_actor,
    extract_client_ip,
    is_client_ip_allowed,
    is_gateway_request_authenticated,
)
from tourney.tournaments.errors import (
    AuthorizationError,
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    TournamentsError,
    ValidationError,
)
from tourney.tournaments.types import Actor

logger = structlog.get_logger(__name__)

_ERROR_RESPONSES: tuple[tuple[type[TournamentsError], int, str], ...] = (
    (ValidationError, 422, "E_VALIDATION"),
    (NotFoundError, 404, "E_NOT_FOUND"),
    (DuplicateRegistrationError, 409, "E_ALREADY_REGISTERED"),
    (CapacityExceededError, 409, "E_TOURNAMENT_FULL"),
    (InvalidStateError, 409, "E_INVALID_STATE"),
    (AuthorizationError, 403, "E_FORBIDDEN"),
)


def as_http_error(exc: TournamentsError) -> HTTPException:
    for error_type, status_code, code in _ERROR_RESPONSES:
        if isinstance(exc, error_type):
            detail: dict[str, object] = {"code": code}
            if isinstance(exc, ValidationError) and exc.details:
                detail["errors"] = exc.details
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=400, detail={"code": "E_BAD_REQUEST"})


def assert_gateway_access(request: Request, *, settings: object, route: str) -> None:
    client_ip = extract_client_ip(
        request,
        trusted_proxies=getattr(settings, "gateway_trusted_proxies", ""),
    )
    if not is_client_ip_allowed(client_ip=client_ip, allowlist=getattr(settings, "gateway_api_allowlist")):
        logger.warning("gateway_auth_failed", route=route, reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not is_gateway_request_authenticated(
        request,
        expected_token=getattr(settings, "gateway_api_token"),
    ):
        logger.warning(
            "gateway_auth_failed",
            route=route,
            reason="invalid_credentials",
            client_ip=client_ip,
        )
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


def require_actor(request: Request) -> Actor:
    actor = extract_actor(request)
    if actor is None:
        raise HTTPException(status_code=401, detail={"code": "E_UNAUTHENTICATED"})
    return actor
