from .auth import User, SessionToken, USER_STATUSES
from .security import SecurityEvent
from .records import UnclaimedRecord, CollectionRecord, ReportRecord, Area, UNCLAIMED_STATUSES

__all__ = [
    'User', 'SessionToken', 'USER_STATUSES',
    'SecurityEvent',
    'UnclaimedRecord', 'CollectionRecord', 'ReportRecord', 'Area', 'UNCLAIMED_STATUSES',
]
