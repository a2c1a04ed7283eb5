"""Session state: libraries, selection and history."""

from .history import HistoryLedger
from .library import AssetLibrary
from .selection import AssetKind, SelectionGuard
from .session import STEPS, SessionState

__all__ = [
    "AssetKind",
    "AssetLibrary",
    "HistoryLedger",
    "STEPS",
    "SelectionGuard",
    "SessionState",
]
