"""
Cloud Account API — FastAPI endpoints.

Exposes the cloud account resource to a host driver over HTTP:
- Lifecycle operations (create, read, update, delete, import)
- Plan-and-apply reconciliation
- Advertised operation timeouts

Sensitive fields are masked in every response.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from account_kernel.client.base import AccountClient
from account_kernel.client.memory import InMemoryAccountClient
from account_kernel.codec.identifier import decode_entity_id
from account_kernel.codec.variant import ensure_single_variant
from account_kernel.errors import (
    AccountKernelError,
    AccountNotFoundError,
    ConflictingVariantsError,
    InvalidAccountConfigError,
    MalformedIdentifierError,
    NoVariantSelectedError,
    ReconcileOperationError,
    UpdateFailedError,
    VariantChangeError,
)
from account_kernel.logging import setup_logging
from account_kernel.models.account import VariantTag
from account_kernel.models.config import SENSITIVE_FIELDS, AccountResourceConfig
from account_kernel.models.reconciler import MASKED
from account_kernel.models.state import ProjectedState
from account_kernel.reconciler.loop import ReconcilerLoop
from account_kernel.reconciler.resource import CloudAccountResource


# --- Request/Response Models ---

class AccountConfigRequest(BaseModel):
    aws: Optional[dict] = None
    azure: Optional[dict] = None
    gcp: Optional[dict] = None
    alibaba_cloud: Optional[dict] = None


class ImportRequest(BaseModel):
    entity_id: str


class ReconcileRequest(BaseModel):
    entity_id: Optional[str] = None
    desired: Optional[AccountConfigRequest] = None


_STATUS_CODES = [
    (NoVariantSelectedError, 422),
    (ConflictingVariantsError, 422),
    (InvalidAccountConfigError, 422),
    (VariantChangeError, 409),
    (MalformedIdentifierError, 400),
    (AccountNotFoundError, 404),
    (ReconcileOperationError, 502),
]


def _status_for(exc: AccountKernelError) -> int:
    for error_type, status in _STATUS_CODES:
        if isinstance(exc, error_type):
            return status
    return 500


def _public(state: ProjectedState) -> dict:
    """Projected state with sensitive values masked."""
    data = state.model_dump()
    for tag in VariantTag:
        slot = data.get(tag.value)
        if slot:
            for field in SENSITIVE_FIELDS[tag]:
                if field in slot:
                    slot[field] = MASKED
    return data


def _desired(req: AccountConfigRequest) -> dict:
    desired = req.model_dump()
    ensure_single_variant(desired)
    return desired


# --- Application Factory ---

def create_app(
    client: Optional[AccountClient] = None,
    config: Optional[AccountResourceConfig] = None,
    debug: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    setup_logging(debug=debug)

    app = FastAPI(
        title="Cloud Account Kernel API",
        description="Cloud account reconciliation for declarative tooling",
        version="0.1.0",
    )

    resource = CloudAccountResource(
        client=client or InMemoryAccountClient(),
        config=config,
    )
    loop = ReconcilerLoop(resource)

    app.state.resource = resource
    app.state.reconciler = loop

    @app.exception_handler(AccountKernelError)
    async def account_kernel_exception_handler(
        request: Request, exc: AccountKernelError
    ) -> JSONResponse:
        body = {"error": type(exc).__name__, "detail": str(exc)}
        if isinstance(exc, InvalidAccountConfigError):
            body["fields"] = [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors
            ]
        return JSONResponse(status_code=_status_for(exc), content=body)

    # === LIFECYCLE ===

    @app.post("/accounts")
    def create_account(req: AccountConfigRequest):
        """Onboard a new cloud account."""
        state = resource.create(_desired(req))
        return _public(state)

    @app.get("/accounts/{entity_id}")
    def read_account(entity_id: str):
        """Read the service's view of an account."""
        state = resource.read(entity_id)
        if state is None:
            raise HTTPException(404, "Cloud account not found")
        return _public(state)

    @app.put("/accounts/{entity_id}")
    def update_account(entity_id: str, req: AccountConfigRequest):
        """Push new settings onto an account."""
        state = resource.update(entity_id, _desired(req))
        if state is None:
            # Gone between the update and its read-back.
            tag, remote_id = decode_entity_id(entity_id)
            raise UpdateFailedError(
                AccountNotFoundError(tag.value, remote_id),
                f"account {entity_id} vanished right after update",
            )
        return _public(state)

    @app.delete("/accounts/{entity_id}")
    def delete_account(entity_id: str):
        """Remove an account. Already-deleted accounts succeed."""
        resource.delete(entity_id)
        return {"deleted": entity_id}

    @app.post("/accounts/import")
    def import_account(req: ImportRequest):
        """Adopt an existing account by entity id."""
        return _public(resource.import_state(req.entity_id))

    # === RECONCILER ===

    @app.post("/accounts/reconcile")
    def reconcile_account(req: ReconcileRequest):
        """Plan and apply one reconciliation pass."""
        desired = req.desired.model_dump() if req.desired is not None else None
        result = loop.reconcile(req.entity_id, desired)
        data = result.model_dump(mode="json")
        data["state"] = _public(result.state) if result.state else None
        return data

    # === SCHEMA ===

    @app.get("/schema/timeouts")
    def get_timeouts():
        """Operation timeouts the host driver should enforce."""
        return resource.config.model_dump()

    return app
