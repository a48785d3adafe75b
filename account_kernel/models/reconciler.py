"""Reconcile plan and outcome."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

from account_kernel.models.state import ProjectedState

MASKED = "(sensitive value)"


class ReconcileAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"     # Delete then create; cloud type or account id changed
    DELETE = "delete"
    NOOP = "noop"


class FieldChange(BaseModel):
    """One difference between the projected and the desired state."""

    path: str                               # e.g., "gcp.group_ids"
    old: Any = None
    new: Any = None
    force_new: bool = False                 # Cannot be applied in place
    sensitive: bool = False

    def masked(self) -> "FieldChange":
        if not self.sensitive:
            return self
        return self.model_copy(update={"old": MASKED, "new": MASKED})


class ReconcileResult(BaseModel):
    """Outcome of one reconcile pass for one cloud account."""

    action: ReconcileAction
    entity_id: Optional[str] = None         # None once the account is gone
    state: Optional[ProjectedState] = None
    changes: List[FieldChange] = []
    reconciled_at: datetime
