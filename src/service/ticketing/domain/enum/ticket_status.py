from enum import Enum


class TicketStatus(str, Enum):
    MINTED = 'minted'
    LISTED = 'listed'
    USED = 'used'
