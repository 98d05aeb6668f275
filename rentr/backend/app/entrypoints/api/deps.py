# app/entrypoints/api/deps.py
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException, Request

from ...config import settings
from ...domain.errors import PermissionDeniedError
from ...service_layer.scoring import ScoringService

STAFF_ROLES = {"landlord", "admin"}


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: str

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def require_caller(
    x_user_id: int | None = Header(default=None, alias="X-User-Id"),
    x_user_role: str = Header(default="tenant", alias="X-User-Role"),
) -> Caller:
    # identity comes from the upstream auth proxy
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id")
    return Caller(user_id=x_user_id, role=x_user_role.strip().lower())


def authorize_tenant_read(caller: Caller, tenant_id: int) -> None:
    if caller.is_staff or caller.user_id == tenant_id:
        return
    raise PermissionDeniedError(f"User {caller.user_id} may not read scores of tenant {tenant_id}")


def require_staff(caller: Caller) -> None:
    if not caller.is_staff:
        raise PermissionDeniedError("Only landlords or admins may change tenant scores")


def get_scoring_service(request: Request) -> ScoringService:
    return request.app.state.scoring
