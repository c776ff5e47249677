"""
Ancestor resolution for rows that do not carry a user_id themselves.

A set belongs to a workout exercise, which belongs to a workout session, which
carries the owning user. `OwnershipResolver` walks that chain one query per hop,
using the entity-to-parent table below instead of per-repository copies of
the walk.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from liftlog.models import WorkoutExercise, WorkoutSession, WorkoutSet


@dataclass(frozen=True, slots=True)
class ParentLink:
    column: Any      # FK column on the child holding the parent's id
    parent: type


PARENTS: dict[type, ParentLink] = {
    WorkoutSet: ParentLink(WorkoutSet.workout_exercise_id, WorkoutExercise),
    WorkoutExercise: ParentLink(WorkoutExercise.workout_session_id, WorkoutSession),
}


class OwnershipResolver:
    def __init__(
        self,
        db: Session,
        parents: dict[type, ParentLink] | None = None,
        root: type = WorkoutSession,
    ):
        self.db = db
        self.parents = PARENTS if parents is None else parents
        self.root = root

    def _link(self, model: type) -> ParentLink:
        try:
            return self.parents[model]
        except KeyError:
            raise ValueError(f"no ownership chain from {model.__name__} to {self.root.__name__}")

    def root_id(self, model: type, entity_id: UUID) -> UUID | None:
        """Id of the root ancestor of one row, or None if any hop is missing."""
        current = entity_id
        while model is not self.root:
            link = self._link(model)
            current = self.db.execute(
                select(link.column).where(model.id == current)
            ).scalar_one_or_none()
            if current is None:
                return None
            model = link.parent
        return current

    def owns(self, model: type, entity_id: UUID, user_id: UUID) -> bool:
        root_id = self.root_id(model, entity_id)
        if root_id is None:
            return False
        found = self.db.execute(
            select(self.root.id).where(self.root.id == root_id, self.root.user_id == user_id)
        ).scalar_one_or_none()
        return found is not None

    def root_ids(self, model: type, entity_ids: Iterable[UUID]) -> set[UUID] | None:
        """
        Distinct root ids of a batch of rows, one IN query per hop.
        None if any of the rows (or a row on the way up) is missing.
        """
        current = set(entity_ids)
        while model is not self.root:
            link = self._link(model)
            rows = self.db.execute(
                select(model.id, link.column).where(model.id.in_(list(current)))
            ).all()
            if len(rows) != len(current):
                return None
            current = {parent_id for _, parent_id in rows}
            model = link.parent
        return current

    def owns_all(self, model: type, entity_ids: Iterable[UUID], user_id: UUID) -> bool:
        """
        Batch form of `owns`. Unknown ids count as not owned.
        """
        ids = set(entity_ids)
        if not ids:
            return True
        roots = self.root_ids(model, ids)
        if roots is None:
            return False
        owned = self.db.execute(
            select(self.root.id).where(self.root.id.in_(list(roots)), self.root.user_id == user_id)
        ).scalars().all()
        return len(set(owned)) == len(roots)
