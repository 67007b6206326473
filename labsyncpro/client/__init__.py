from .api import LabSyncClient
from .confirmation import ConfirmationOptions, Confirmer, PromptConfirmer, StaticConfirmer
from .controller import CapacityPlanningController, SeatTile
from .errors import (
    ApiError,
    LookupFailed,
    NetworkError,
    NotFound,
    ScheduleCreationFailed,
    ServerValidationError,
)
from .notifications import Notification, Notifier
from .schedules import ScheduleResolver
from .state import CapacityState, DisplayMode, Phase, RequestGenerations

__all__ = [
    "LabSyncClient",
    "ConfirmationOptions", "Confirmer", "PromptConfirmer", "StaticConfirmer",
    "CapacityPlanningController", "SeatTile",
    "ApiError", "LookupFailed", "NetworkError", "NotFound", "ScheduleCreationFailed", "ServerValidationError",
    "Notification", "Notifier",
    "ScheduleResolver",
    "CapacityState", "DisplayMode", "Phase", "RequestGenerations",
]
