"""
Reconciler Loop — plan and apply for one cloud account.

Compares the projected state of an account with its desired config and
picks the lifecycle operation that closes the gap:

  untracked / gone remotely  -> create
  cloud type changed         -> replace (delete, then create)
  fields drifted             -> update
  desired is None            -> delete
  otherwise                  -> noop

Field comparison goes through diff-suppression rules so values that
differ only in encoding (GCP credential JSON, group id order) never
trigger an update.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from account_kernel.codec.variant import ensure_single_variant, normalize_config
from account_kernel.diff.credentials import gcp_credentials_match
from account_kernel.models.account import VARIANT_PRIORITY, VariantTag
from account_kernel.models.config import SENSITIVE_FIELDS
from account_kernel.models.reconciler import FieldChange, ReconcileAction, ReconcileResult
from account_kernel.models.state import ProjectedState
from account_kernel.reconciler.resource import CloudAccountResource

logger = structlog.get_logger()

DiffSuppressFunc = Callable[[Any, Any], bool]

# Assigned by the service; the declared value is never sent to it.
SERVICE_OWNED_FIELDS = frozenset({"account_id"})


def same_members(old: Any, new: Any) -> bool:
    """Group ids are a set on the service; order is not a change."""
    if old is None or new is None:
        return old == new
    return sorted(old) == sorted(new)


def _selected(slots: Dict[str, Optional[dict]]) -> Optional[str]:
    return next((tag for tag, slot in slots.items() if slot), None)


class DriftWatcher:
    """Field-level diff between projected and desired state."""

    def __init__(self):
        self._suppressors: Dict[str, DiffSuppressFunc] = {}
        self._register_default_rules()

    def _register_default_rules(self) -> None:
        self._suppressors[f"{VariantTag.GCP.value}.credentials_json"] = gcp_credentials_match
        for tag in VARIANT_PRIORITY:
            self._suppressors[f"{tag.value}.group_ids"] = same_members

    def register_suppressor(self, path: str, func: DiffSuppressFunc) -> None:
        """Treat old/new at path as unchanged whenever func(old, new) is true."""
        self._suppressors[path] = func

    def check(self, current: ProjectedState, desired: Mapping) -> List[FieldChange]:
        wanted = normalize_config(desired)
        have = current.slots()

        desired_tag = _selected(wanted)
        current_tag = _selected(have)
        if current_tag != desired_tag:
            return [
                FieldChange(
                    path="cloud_type", old=current_tag, new=desired_tag, force_new=True
                )
            ]

        old_slot = have[desired_tag]
        sensitive = SENSITIVE_FIELDS[VariantTag(desired_tag)]
        changes = []
        for field, new in wanted[desired_tag].items():
            if field in SERVICE_OWNED_FIELDS:
                continue
            old = old_slot.get(field)
            if old == new:
                continue
            path = f"{desired_tag}.{field}"
            suppress = self._suppressors.get(path)
            if suppress is not None and suppress(old, new):
                continue
            changes.append(FieldChange(
                path=path,
                old=old,
                new=new,
                sensitive=field in sensitive,
            ))
        return changes


class ReconcilerLoop:
    """
    Drives a CloudAccountResource toward desired config.

    Stateless: the caller passes the entity id it persisted last time and
    stores the one returned in the result.
    """

    def __init__(
        self,
        resource: CloudAccountResource,
        watcher: Optional[DriftWatcher] = None,
    ):
        self.resource = resource
        self.watcher = watcher or DriftWatcher()

    def plan(
        self, entity_id: Optional[str], desired: Optional[Mapping]
    ) -> Tuple[ReconcileAction, Optional[ProjectedState], List[FieldChange]]:
        """Decide what reconcile() would do, without writing anything."""
        if desired is None:
            if entity_id and self.resource.read(entity_id) is not None:
                return ReconcileAction.DELETE, None, []
            return ReconcileAction.NOOP, None, []

        ensure_single_variant(desired)
        current = self.resource.read(entity_id) if entity_id else None
        if current is None:
            return ReconcileAction.CREATE, None, []

        changes = self.watcher.check(current, desired)
        if any(c.force_new for c in changes):
            return ReconcileAction.REPLACE, current, changes
        if changes:
            return ReconcileAction.UPDATE, current, changes
        return ReconcileAction.NOOP, current, []

    def reconcile(
        self,
        entity_id: Optional[str],
        desired: Optional[Mapping],
        current_time: Optional[datetime] = None,
    ) -> ReconcileResult:
        """Run one plan-and-apply pass."""
        if current_time is None:
            current_time = datetime.utcnow()

        action, current, changes = self.plan(entity_id, desired)
        logger.info(
            "cloud_account_plan",
            entity_id=entity_id,
            action=action.value,
            changes=[c.masked().model_dump() for c in changes],
        )

        state = current
        if action == ReconcileAction.CREATE:
            state = self.resource.create(desired)
        elif action == ReconcileAction.REPLACE:
            self.resource.delete(entity_id)
            state = self.resource.create(desired)
        elif action == ReconcileAction.UPDATE:
            state = self.resource.update(entity_id, desired)
        elif action == ReconcileAction.DELETE:
            self.resource.delete(entity_id)
            state = None

        return ReconcileResult(
            action=action,
            entity_id=state.id if state else None,
            state=state,
            changes=[c.masked() for c in changes],
            reconciled_at=current_time,
        )
