import datetime as dt

import pytest
from sqlalchemy import func, select

from liftlog.errors import NotAuthenticated, NotAuthorized, ValidationError
from liftlog.models import WorkoutExercise, WorkoutSession, WorkoutSet
from liftlog.repositories import Repositories
from liftlog.schemas.exercise import ExerciseCreate, ExerciseUpdate
from liftlog.schemas.workout_exercise import WorkoutExerciseCreate
from liftlog.schemas.workout_session import WorkoutSessionCreate, WorkoutSessionUpdate
from liftlog.schemas.workout_set import WorkoutSetCreate, WorkoutSetUpdate


def count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def make_workout(repos, workout_type_id, *, date=dt.date(2024, 5, 1), exercise_names=("Squat",)):
    workout = repos.workout_sessions.create(
        WorkoutSessionCreate(workout_type_id=workout_type_id, date=date)
    )
    items = []
    for i, name in enumerate(exercise_names):
        ex = repos.exercises.create(ExerciseCreate(name=name))
        items.append(repos.workout_exercises.add(
            WorkoutExerciseCreate(workout_session_id=workout.id, exercise_id=ex.id, order_index=i)
        ))
    return workout, items


def test_operations_without_user_raise_not_authenticated(db):
    repos = Repositories(db, None)
    with pytest.raises(NotAuthenticated):
        repos.exercises.list()
    with pytest.raises(NotAuthenticated):
        repos.workout_sessions.list()


def test_exercise_crud_and_partial_update(db, alice):
    repos = Repositories(db, alice)
    ex = repos.exercises.create(ExerciseCreate(name="  Bench Press  ", notes="flat"))
    assert ex.name == "Bench Press"
    assert ex.user_id == alice.id
    assert ex.exercise_type.value == "strength"

    updated = repos.exercises.update(ex.id, ExerciseUpdate(notes="incline"))
    assert updated.notes == "incline"
    assert updated.name == "Bench Press"  # untouched

    ex_id = ex.id
    assert [e.id for e in repos.exercises.list()] == [ex_id]
    repos.exercises.delete(ex_id)
    assert repos.exercises.get_by_id(ex_id) is None


def test_exercise_list_newest_first(db, alice):
    repos = Repositories(db, alice)
    first = repos.exercises.create(ExerciseCreate(name="A"))
    second = repos.exercises.create(ExerciseCreate(name="B"))
    first.created_at = second.created_at - dt.timedelta(minutes=1)
    db.commit()
    assert [e.id for e in repos.exercises.list()] == [second.id, first.id]


def test_foreign_rows_are_invisible(db, alice, bob, workout_type_id):
    mine = Repositories(db, alice)
    theirs = Repositories(db, bob)
    workout, (we,) = make_workout(mine, workout_type_id)
    s = mine.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5, weight=100))

    assert theirs.workout_sessions.get_by_id(workout.id) is None
    assert theirs.workout_exercises.get_by_id(we.id) is None
    assert theirs.workout_sets.get_by_id(s.id) is None
    assert theirs.exercises.get_by_id(we.exercise_id) is None
    assert theirs.workout_sessions.list() == []
    assert theirs.exercises.list() == []


def test_foreign_mutations_are_rejected(db, alice, bob, workout_type_id):
    mine = Repositories(db, alice)
    theirs = Repositories(db, bob)
    workout, (we,) = make_workout(mine, workout_type_id)
    s = mine.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5, weight=100))

    with pytest.raises(NotAuthorized) as exc:
        theirs.workout_sets.update(s.id, WorkoutSetUpdate(reps=10))
    assert exc.value.message == "Not authorized to update this set"
    with pytest.raises(NotAuthorized) as exc:
        theirs.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=3))
    assert exc.value.message == "Not authorized to add sets to this exercise"
    with pytest.raises(NotAuthorized):
        theirs.workout_exercises.delete(we.id)
    with pytest.raises(NotAuthorized):
        theirs.workout_sessions.update(workout.id, WorkoutSessionUpdate(notes="mine now"))
    with pytest.raises(NotAuthorized):
        theirs.exercises.update(we.exercise_id, ExerciseUpdate(name="Stolen"))

    db.expire_all()
    assert mine.workout_sets.get_by_id(s.id).reps == 5
    assert mine.workout_sessions.get_by_id(workout.id).notes is None


def test_adding_someone_elses_exercise_is_rejected(db, alice, bob, workout_type_id):
    mine = Repositories(db, alice)
    theirs = Repositories(db, bob)
    foreign = theirs.exercises.create(ExerciseCreate(name="Deadlift"))
    workout, _ = make_workout(mine, workout_type_id, exercise_names=())
    with pytest.raises(NotAuthorized):
        mine.workout_exercises.add(
            WorkoutExerciseCreate(workout_session_id=workout.id, exercise_id=foreign.id)
        )


def test_set_partial_update_keeps_other_fields(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    _, (we,) = make_workout(repos, workout_type_id)
    s = repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5, weight=80))

    updated = repos.workout_sets.update(s.id, WorkoutSetUpdate(weight=85))
    assert updated.weight == 85
    assert updated.reps == 5
    assert updated.order_index == 0


def test_name_snapshot_survives_rename_and_delete(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    workout, (we,) = make_workout(repos, workout_type_id, exercise_names=("Row",))
    assert we.name_snapshot == "Row"

    repos.exercises.update(we.exercise_id, ExerciseUpdate(name="Barbell Row"))
    assert repos.workout_exercises.get_by_id(we.id).name_snapshot == "Row"

    repos.exercises.delete(we.exercise_id)
    db.expire_all()
    kept = repos.workout_exercises.get_by_id(we.id)
    assert kept.name_snapshot == "Row"
    assert kept.exercise_id is None


def test_explicit_name_snapshot_wins(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    workout, _ = make_workout(repos, workout_type_id, exercise_names=())
    ex = repos.exercises.create(ExerciseCreate(name="Press"))
    we = repos.workout_exercises.add(
        WorkoutExerciseCreate(workout_session_id=workout.id, exercise_id=ex.id, name_snapshot="OHP")
    )
    assert we.name_snapshot == "OHP"


def test_toggle_twice_restores_state(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    workout, (we,) = make_workout(repos, workout_type_id)

    assert repos.workout_sessions.toggle_complete(workout.id, True).is_completed is True
    assert repos.workout_sessions.toggle_complete(workout.id, False).is_completed is False
    assert repos.workout_exercises.toggle_complete(we.id, True).is_completed is True
    assert repos.workout_exercises.toggle_complete(we.id, False).is_completed is False


def test_session_list_newest_date_first(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    old, _ = make_workout(repos, workout_type_id, date=dt.date(2024, 1, 1), exercise_names=())
    new, _ = make_workout(repos, workout_type_id, date=dt.date(2024, 6, 1), exercise_names=())
    assert [w.id for w in repos.workout_sessions.list()] == [new.id, old.id]


def test_session_read_includes_ordered_children(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    workout, items = make_workout(repos, workout_type_id, exercise_names=("A", "B"))
    repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=items[0].id, reps=8, order_index=1))
    repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=items[0].id, reps=10, order_index=0))
    db.expire_all()

    loaded = repos.workout_sessions.get_by_id(workout.id)
    assert loaded.workout_type.key == "strength"
    assert [we.name_snapshot for we in loaded.workout_exercise] == ["A", "B"]
    assert [s.reps for s in loaded.workout_exercise[0].workout_set] == [10, 8]


def test_delete_session_removes_children(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    workout, items = make_workout(repos, workout_type_id, exercise_names=("A", "B"))
    for we in items:
        repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5))
    other, _ = make_workout(repos, workout_type_id, exercise_names=("C",))
    workout_id, other_id = workout.id, other.id

    repos.workout_sessions.delete(workout_id)

    assert repos.workout_sessions.get_by_id(workout_id) is None
    assert count(db, WorkoutSession) == 1
    assert count(db, WorkoutExercise) == 1
    assert count(db, WorkoutSet) == 0
    assert repos.workout_sessions.get_by_id(other_id) is not None


def test_delete_workout_exercise_removes_its_sets(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    _, (a, b) = make_workout(repos, workout_type_id, exercise_names=("A", "B"))
    repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=a.id, reps=5))
    kept_id = repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=b.id, reps=5)).id
    a_id = a.id

    repos.workout_exercises.delete(a_id)

    assert repos.workout_exercises.get_by_id(a_id) is None
    assert [s.id for s in repos.workout_sets.list()] == [kept_id]


def test_delete_many_empty_issues_no_queries(db, alice, count_queries):
    repos = Repositories(db, alice)
    repos.workout_sets.delete_many([])
    repos.workout_exercises.delete_many([])
    assert count_queries == []


def test_delete_many_sets(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    _, (we,) = make_workout(repos, workout_type_id)
    ids = [repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=r)).id for r in (5, 6, 7)]

    repos.workout_sets.delete_many([ids[0], ids[2], ids[0]])

    assert [s.id for s in repos.workout_sets.list(we.id)] == [ids[1]]


def test_delete_many_with_foreign_id_deletes_nothing(db, alice, bob, workout_type_id):
    mine = Repositories(db, alice)
    theirs = Repositories(db, bob)
    _, (we,) = make_workout(mine, workout_type_id)
    _, (foreign,) = make_workout(theirs, workout_type_id)

    with pytest.raises(NotAuthorized):
        mine.workout_exercises.delete_many([we.id, foreign.id])
    assert count(db, WorkoutExercise) == 2


def test_full_workout_scenario(db, alice, bob, workout_type_id):
    mine = Repositories(db, alice)
    squat = mine.exercises.create(ExerciseCreate(name="Squat"))
    workout = mine.workout_sessions.create(
        WorkoutSessionCreate(workout_type_id=workout_type_id, date=dt.date(2024, 5, 1))
    )
    we = mine.workout_exercises.add(
        WorkoutExerciseCreate(workout_session_id=workout.id, exercise_id=squat.id)
    )
    s = mine.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5, weight=100))

    with pytest.raises(NotAuthorized):
        Repositories(db, bob).workout_sets.update(s.id, WorkoutSetUpdate(reps=1))

    mine.workout_sets.update(s.id, WorkoutSetUpdate(reps=6))
    mine.workout_sessions.toggle_complete(workout.id, True)
    db.expire_all()

    loaded = mine.workout_sessions.get_by_id(workout.id)
    assert loaded.is_completed is True
    assert loaded.workout_exercise[0].name_snapshot == "Squat"
    assert loaded.workout_exercise[0].workout_set[0].reps == 6
    assert loaded.workout_exercise[0].workout_set[0].weight == 100


def test_atomic_rolls_back_every_write(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    _, (we,) = make_workout(repos, workout_type_id)

    with pytest.raises(NotAuthorized):
        with repos.atomic():
            repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5))
            raise NotAuthorized()
    assert count(db, WorkoutSet) == 0


def test_workout_types_are_global(db, bob, workout_type_id):
    repos = Repositories(db, bob)
    assert [t.key for t in repos.workout_types.list()] == ["cardio", "strength"]
    assert repos.workout_types.get_by_key("strength").id == workout_type_id
    assert repos.workout_types.get_by_id(workout_type_id).name == "Strength"
    assert repos.workout_types.get_by_key("yoga") is None
    # no user needed
    assert len(Repositories(db, None).workout_types.list()) == 2


def test_set_update_cannot_leave_set_without_effort(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    _, (we,) = make_workout(repos, workout_type_id)
    strength = repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, reps=5, weight=80))
    cardio = repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=we.id, calories=200))

    with pytest.raises(ValidationError):
        repos.workout_sets.update(strength.id, WorkoutSetUpdate(reps=0))
    with pytest.raises(ValidationError):
        repos.workout_sets.update(cardio.id, WorkoutSetUpdate(calories=None))
    db.expire_all()
    assert repos.workout_sets.get_by_id(strength.id).reps == 5

    # effort moved to another field is fine
    assert repos.workout_sets.update(strength.id, WorkoutSetUpdate(reps=0, distance=1.5)).reps == 0


def test_delete_many_scoped_to_one_workout(db, alice, workout_type_id):
    repos = Repositories(db, alice)
    first, (a,) = make_workout(repos, workout_type_id)
    second, (b,) = make_workout(repos, workout_type_id)
    set_b = repos.workout_sets.add(WorkoutSetCreate(workout_exercise_id=b.id, reps=5)).id
    first_id, a_id, b_id = first.id, a.id, b.id

    with pytest.raises(NotAuthorized):
        repos.workout_exercises.delete_many([a_id, b_id], workout_session_id=first_id)
    with pytest.raises(NotAuthorized):
        repos.workout_sets.delete_many([set_b], workout_session_id=first_id)
    assert count(db, WorkoutExercise) == 2
    assert count(db, WorkoutSet) == 1

    repos.workout_exercises.delete_many([a_id], workout_session_id=first_id)
    assert repos.workout_exercises.get_by_id(a_id) is None
    assert repos.workout_exercises.get_by_id(b_id) is not None
