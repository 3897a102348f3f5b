"""doughplan: dough formulation, fermentation kinetics and live bake schedules."""

from .errors import (
    ConcurrentModification,
    DoughPlanError,
    ImpossibleFormulation,
    InvalidBakeTime,
    InvalidPreferment,
    InvalidTransition,
    ScheduleNotFound,
    UnsupportedMethod,
    ValidationError,
)
from .formulation import compute_formulation
from .models import (
    FermentationMethod,
    FormulationRequest,
    FormulationResult,
    PrefermentSpec,
    PrefermentType,
    YeastKind,
)
from .persistence import get_repository
from .schedule import ScheduleStep, StepKind, generate_schedule
from .styles import DoughStyle, MixerType
from .tracking import (
    ActiveSchedule,
    ScheduleTracker,
    create_active_schedule,
    due_notifications,
    transition,
)

__version__ = "0.1.0"
__all__ = [
    "compute_formulation",
    "generate_schedule",
    "create_active_schedule",
    "transition",
    "due_notifications",
    "get_repository",
    "ScheduleTracker",
    "FormulationRequest",
    "FormulationResult",
    "PrefermentSpec",
    "PrefermentType",
    "FermentationMethod",
    "YeastKind",
    "DoughStyle",
    "MixerType",
    "ScheduleStep",
    "StepKind",
    "ActiveSchedule",
    "DoughPlanError",
    "ValidationError",
    "UnsupportedMethod",
    "InvalidPreferment",
    "ImpossibleFormulation",
    "InvalidTransition",
    "InvalidBakeTime",
    "ScheduleNotFound",
    "ConcurrentModification",
]
