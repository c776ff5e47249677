"""Partial (AJAX-style) actions on the exercises and sets of one workout."""
from uuid import UUID

from fastapi import APIRouter, Depends

from liftlog.deps.auth import get_repositories
from liftlog.errors import LiftlogError, NotFound
from liftlog.repositories import Repositories
from liftlog.routers.forms import dump, failure, form_values, validate
from liftlog.routers.workouts import ToggleForm
from liftlog.schemas.workout_exercise import (
    WorkoutExerciseCreate,
    WorkoutExerciseRead,
    WorkoutExerciseUpdate,
)
from liftlog.schemas.workout_set import WorkoutSetCreate, WorkoutSetRead, WorkoutSetUpdate

router = APIRouter(prefix="/workout/{workout_id}", tags=["workout items"])


def _exercise_in_workout(repos: Repositories, workout_id: UUID, workout_exercise_id: UUID):
    we = repos.workout_exercises.get_by_id(workout_exercise_id)
    if we is None or we.workout_session_id != workout_id:
        raise NotFound("Exercise not found in this workout")
    return we


def _set_in_workout(repos: Repositories, workout_id: UUID, set_id: UUID) -> None:
    # sets the user cannot see fall through to the repository's ownership check
    s = repos.workout_sets.get_by_id(set_id)
    if s is not None and s.workout_exercise.workout_session_id != workout_id:
        raise NotFound("Set not found in this workout")


# --- workout exercises --------------------------------------------------------

@router.post("/exercises")
def add_exercise(
    workout_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_exercises.require_user()
        payload = validate(WorkoutExerciseCreate, values, workout_session_id=workout_id)
        we = repos.workout_exercises.add(payload)
    except LiftlogError as e:
        return failure(e, action="add-exercise", values=values)
    return {"success": True, "exercise": dump(WorkoutExerciseRead, we)}


@router.post("/exercises/{workout_exercise_id}/update")
def update_exercise(
    workout_id: UUID,
    workout_exercise_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_exercises.require_user()
        payload = validate(WorkoutExerciseUpdate, values)
        _exercise_in_workout(repos, workout_id, workout_exercise_id)
        we = repos.workout_exercises.update(workout_exercise_id, payload)
    except LiftlogError as e:
        return failure(e, action="update-exercise", values=values)
    return {"success": True, "exercise": dump(WorkoutExerciseRead, we)}


@router.post("/exercises/{workout_exercise_id}/toggle-complete")
def toggle_exercise(
    workout_id: UUID,
    workout_exercise_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_exercises.require_user()
        form = validate(ToggleForm, values)
        _exercise_in_workout(repos, workout_id, workout_exercise_id)
        we = repos.workout_exercises.toggle_complete(workout_exercise_id, form.is_completed)
    except LiftlogError as e:
        return failure(e, action="toggle-exercise", values=values)
    return {"success": True, "exercise": dump(WorkoutExerciseRead, we)}


@router.post("/exercises/{workout_exercise_id}/delete")
def delete_exercise(
    workout_id: UUID,
    workout_exercise_id: UUID,
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_exercises.require_user()
        _exercise_in_workout(repos, workout_id, workout_exercise_id)
        repos.workout_exercises.delete(workout_exercise_id)
    except LiftlogError as e:
        return failure(e, action="delete-exercise")
    return {"success": True}


# --- sets ---------------------------------------------------------------------

@router.post("/exercises/{workout_exercise_id}/sets")
def add_set(
    workout_id: UUID,
    workout_exercise_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sets.require_user()
        payload = validate(WorkoutSetCreate, values, workout_exercise_id=workout_exercise_id)
        _exercise_in_workout(repos, workout_id, workout_exercise_id)
        s = repos.workout_sets.add(payload)
    except LiftlogError as e:
        return failure(e, action="add-set", values=values)
    return {"success": True, "set": dump(WorkoutSetRead, s)}


@router.post("/sets/{set_id}/update")
def update_set(
    workout_id: UUID,
    set_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sets.require_user()
        payload = validate(WorkoutSetUpdate, values)
        _set_in_workout(repos, workout_id, set_id)
        s = repos.workout_sets.update(set_id, payload)
    except LiftlogError as e:
        return failure(e, action="update-set", values=values)
    return {"success": True, "set": dump(WorkoutSetRead, s)}


@router.post("/sets/{set_id}/delete")
def delete_set(
    workout_id: UUID,
    set_id: UUID,
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sets.require_user()
        _set_in_workout(repos, workout_id, set_id)
        repos.workout_sets.delete(set_id)
    except LiftlogError as e:
        return failure(e, action="delete-set")
    return {"success": True}
