from enum import Enum


class ConcertStatus(str, Enum):
    """Admin review state of a submitted concert"""

    PENDING = 'pending'
    INFO_REQUESTED = 'info_requested'
    APPROVED = 'approved'
    REJECTED = 'rejected'
