import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from liftlog.deps.auth import get_optional_user, get_repositories, require_page_user
from liftlog.errors import LiftlogError, NotAuthorized, NotFound, ValidationError
from liftlog.repositories import Repositories
from liftlog.routers.forms import dump, failure, form_values, see_other, validate
from liftlog.schemas.auth import CurrentUser
from liftlog.schemas.exercise import ExerciseRead
from liftlog.schemas.workout_exercise import WorkoutExerciseCreate, WorkoutExerciseUpdate
from liftlog.schemas.workout_save import IdList, SaveWorkoutForm
from liftlog.schemas.workout_session import (
    WorkoutSessionCreate,
    WorkoutSessionRead,
    WorkoutSessionUpdate,
)
from liftlog.schemas.workout_set import WorkoutSetCreate, WorkoutSetUpdate
from liftlog.schemas.workout_type import WorkoutTypeRead

log = logging.getLogger(__name__)

router = APIRouter(tags=["workouts"])


class NewWorkoutForm(WorkoutSessionCreate):
    # exercises to start the workout with, in display order
    exercise_ids: IdList = []


class ToggleForm(BaseModel):
    is_completed: bool = False


class HistoryToggleForm(ToggleForm):
    workout_id: UUID


def shape_workout(workout) -> dict[str, Any]:
    """Serialize a session with exercises and sets sorted by order_index."""
    data = dump(WorkoutSessionRead, workout)
    exercises = sorted(data.get("workout_exercise") or [], key=lambda e: e["order_index"])
    for exercise in exercises:
        exercise["workout_set"] = sorted(exercise.get("workout_set") or [], key=lambda s: s["order_index"])
    data["workout_exercise"] = exercises
    return data


def _list_workouts(user: Optional[CurrentUser], repos: Repositories) -> dict:
    if user is None:
        return {"workouts": []}
    try:
        workouts = repos.workout_sessions.list()
    except LiftlogError as e:
        log.error("Error loading workouts: %s", e.message)
        return {"workouts": []}
    return {"workouts": [shape_workout(w) for w in workouts]}


# --- pages ------------------------------------------------------------------

@router.get("/")
def home_page(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    repos: Repositories = Depends(get_repositories),
):
    return _list_workouts(user, repos)


@router.get("/history")
def history_page(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    repos: Repositories = Depends(get_repositories),
):
    return _list_workouts(user, repos)


@router.get("/workout/new")
def new_workout_page(
    user: Optional[CurrentUser] = Depends(get_optional_user),
    repos: Repositories = Depends(get_repositories),
):
    if user is None:
        return {"workoutTypes": [], "exercises": []}
    workout_types, exercises = [], []
    try:
        workout_types = [dump(WorkoutTypeRead, t) for t in repos.workout_types.list()]
    except LiftlogError as e:
        log.error("Error loading workout types: %s", e.message)
    try:
        exercises = [dump(ExerciseRead, x) for x in repos.exercises.list()]
    except LiftlogError as e:
        log.error("Error loading exercises: %s", e.message)
    return {"workoutTypes": workout_types, "exercises": exercises}


@router.get("/workout/{workout_id}")
def workout_page(
    workout_id: UUID,
    _user: CurrentUser = Depends(require_page_user),
    repos: Repositories = Depends(get_repositories),
):
    try:
        workout = repos.workout_sessions.get_by_id(workout_id)
    except LiftlogError as e:
        log.error("Error loading workout %s: %s", workout_id, e.message)
        workout = None
    if workout is None:
        raise NotFound("Workout not found")

    workout_types, available = [], []
    try:
        workout_types = [dump(WorkoutTypeRead, t) for t in repos.workout_types.list()]
        available = [dump(ExerciseRead, x) for x in repos.exercises.list()]
    except LiftlogError as e:
        log.error("Error loading workout options: %s", e.message)
    return {
        "workout": shape_workout(workout),
        "workoutTypes": workout_types,
        "availableExercises": available,
    }


# --- session actions ----------------------------------------------------------

@router.post("/workout/new")
def create_workout(
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sessions.require_user()
        form = validate(NewWorkoutForm, values)
        if repos.workout_types.get_by_id(form.workout_type_id) is None:
            raise ValidationError(
                "Unknown workout type", values=values, errors={"workout_type_id": "Unknown workout type"}
            )
        with repos.atomic():
            workout = repos.workout_sessions.create(
                WorkoutSessionCreate(**form.model_dump(exclude={"exercise_ids"}))
            )
            for index, exercise_id in enumerate(form.exercise_ids):
                repos.workout_exercises.add(
                    WorkoutExerciseCreate(
                        workout_session_id=workout.id, exercise_id=exercise_id, order_index=index
                    )
                )
            workout_id = workout.id
    except LiftlogError as e:
        return failure(e, action="create", values=values)
    return see_other(f"/workout/{workout_id}")


@router.post("/workout/{workout_id}/update")
def update_workout(
    workout_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sessions.require_user()
        payload = validate(WorkoutSessionUpdate, values)
        repos.workout_sessions.update(workout_id, payload)
    except LiftlogError as e:
        return failure(e, action="update", values=values)
    return see_other("/history")


@router.post("/workout/{workout_id}/delete")
def delete_workout(
    workout_id: UUID,
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sessions.delete(workout_id)
    except LiftlogError as e:
        return failure(e, action="delete")
    return see_other("/history")


@router.post("/workout/{workout_id}/toggle-complete")
def toggle_workout(
    workout_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sessions.require_user()
        form = validate(ToggleForm, values)
        workout = repos.workout_sessions.toggle_complete(workout_id, form.is_completed)
    except LiftlogError as e:
        return failure(e, action="toggle-complete", values=values)
    return {"success": True, "workout": shape_workout(workout)}


@router.post("/history/toggle-complete")
def toggle_workout_from_history(
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    try:
        repos.workout_sessions.require_user()
        form = validate(HistoryToggleForm, values)
        workout = repos.workout_sessions.toggle_complete(form.workout_id, form.is_completed)
    except LiftlogError as e:
        return failure(e, action="toggle-complete", values=values)
    return {"success": True, "workout": shape_workout(workout)}


@router.post("/workout/{workout_id}/save")
def save_workout(
    workout_id: UUID,
    values: dict = Depends(form_values),
    repos: Repositories = Depends(get_repositories),
):
    """
    Save the whole workout editor in one go.

    Every field is parsed before anything is written. The deletions, the
    exercise/set edits and the session update then run in one transaction,
    so a failure part-way leaves the workout as it was.
    """
    try:
        repos.workout_sessions.require_user()
        form = validate(SaveWorkoutForm, values)
        if not repos.workout_sessions.exists(workout_id):
            raise NotAuthorized("Not authorized to update this workout session")
        with repos.atomic():
            repos.workout_sets.delete_many(form.removed_set_ids, workout_session_id=workout_id)
            repos.workout_exercises.delete_many(
                form.removed_exercise_ids, workout_session_id=workout_id
            )
            _apply_exercise_edits(repos, workout_id, form)
            repos.workout_sessions.update(workout_id, WorkoutSessionUpdate(**form.session_changes()))
    except LiftlogError as e:
        return failure(e, action="save", values=values)
    return see_other("/history")


def _apply_exercise_edits(repos: Repositories, workout_id: UUID, form: SaveWorkoutForm) -> None:
    for edit in form.exercises:
        if edit.id is not None:
            we = repos.workout_exercises.update(edit.id, WorkoutExerciseUpdate(**edit.changes()))
            if we.workout_session_id != workout_id:
                raise NotAuthorized("Exercise does not belong to this workout")
        else:
            we = repos.workout_exercises.add(
                WorkoutExerciseCreate(
                    workout_session_id=workout_id,
                    exercise_id=edit.exercise_id,
                    order_index=edit.order_index,
                    notes=edit.notes,
                )
            )
            if edit.is_completed:
                we = repos.workout_exercises.toggle_complete(we.id, True)

        for set_edit in edit.sets:
            fields = set_edit.changes()
            if set_edit.id is not None:
                s = repos.workout_sets.update(set_edit.id, WorkoutSetUpdate(**fields))
                if s.workout_exercise_id != we.id:
                    raise NotAuthorized("Set does not belong to this exercise")
            else:
                repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, **fields))
