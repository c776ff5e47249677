import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from liftlog.deps.auth import get_optional_user, get_repositories, require_page_user
from liftlog.errors import LiftlogError
from liftlog.repositories import Repositories
from liftlog.routers.forms import dump, failure, form_values, see_other, validate
from liftlog.schemas.auth import CurrentUser
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate

log = logging.getLogger(__name__)

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("")
def exercises_page(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    repos: Repositories = Depends(get_repositories),
):
    if user is None:
        return {"exercises": []}
    try:
        exercises = repos.exercises.list()
    except LiftlogError as e:
        log.error("Error loading exercises: %s", e.message)
        return {"exercises": []}
    return {"exercises": [dump(ExerciseRead, e) for e in exercises]}


@router.post("")
def create_exercise(
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.exercises.require_user()
        payload = validate(ExerciseCreate, values)
        repos.exercises.create(payload)
    except LiftlogError as e:
        return failure(e, action="create", values=values)
    return see_other("/exercises")


@router.get("/{exercise_id}")
def exercise_page(
    exercise_id: UUID,
    _user: CurrentUser = Depends(require_page_user),
    repos: Repositories = Depends(get_repositories),
):
    try:
        exercise = repos.exercises.get_by_id(exercise_id)
    except LiftlogError as e:
        log.error("Error loading exercise %s: %s", exercise_id, e.message)
        exercise = None
    return {"exercise": dump(ExerciseRead, exercise) if exercise else None}


@router.post("/{exercise_id}/update")
def update_exercise(
    exercise_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.exercises.require_user()
        payload = validate(ExerciseUpdate, values)
        repos.exercises.update(exercise_id, payload)
    except LiftlogError as e:
        return failure(e, action="update", values=values)
    return see_other("/exercises")


@router.post("/{exercise_id}/delete")
def delete_exercise(
    exercise_id: UUID,
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.exercises.delete(exercise_id)
    except LiftlogError as e:
        return failure(e, action="delete")
    return see_other("/exercises")
