from liftlog.schemas.auth import AuthSession, CurrentUser, SignInForm
from liftlog.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from liftlog.schemas.workout_type import WorkoutTypeRead
from liftlog.schemas.workout_set import WorkoutSetCreate, WorkoutSetRead, WorkoutSetUpdate
from liftlog.schemas.workout_exercise import (
    WorkoutExerciseCreate,
    WorkoutExerciseRead,
    WorkoutExerciseUpdate,
)
from liftlog.schemas.workout_session import (
    WorkoutSessionCreate,
    WorkoutSessionRead,
    WorkoutSessionUpdate,
)
from liftlog.schemas.workout_save import ExerciseEdit, SaveWorkoutForm, SetEdit
