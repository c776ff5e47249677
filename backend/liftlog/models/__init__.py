from liftlog.models.exercise import Exercise, ExerciseType
from liftlog.models.workout_type import WorkoutType
from liftlog.models.workout_session import WorkoutSession
from liftlog.models.workout_exercise import WorkoutExercise
from liftlog.models.workout_set import WorkoutSet

__all__ = [
    "Exercise",
    "ExerciseType",
    "WorkoutType",
    "WorkoutSession",
    "WorkoutExercise",
    "WorkoutSet",
]
