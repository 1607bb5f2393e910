from .controller import AcquisitionController
from .state import AcquisitionState, GeoDenied, Idle, Loaded, Loading, Notice, StateStore

__all__ = [
    "AcquisitionController",
    "AcquisitionState",
    "GeoDenied",
    "Idle",
    "Loaded",
    "Loading",
    "Notice",
    "StateStore",
]
