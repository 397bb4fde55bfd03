"""Seat channel event names, client actions and error texts."""

from typing import Final


class WebSocketConfig:
    ROOM_PREFIX: Final[str] = 'concert_'

    class MessageType:
        """Events pushed by the server."""

        CONNECTED: Final[str] = 'connected'
        AUTHENTICATED: Final[str] = 'authenticated'
        AUTH_ERROR: Final[str] = 'authError'
        SEAT_LOCKED: Final[str] = 'seatLocked'
        SEAT_UNAVAILABLE: Final[str] = 'seatUnavailable'
        SEAT_RELEASED: Final[str] = 'seatReleased'
        SEAT_STATUS: Final[str] = 'seatStatus'
        SEAT_STATUS_UPDATE: Final[str] = 'seatStatusUpdate'
        SEAT_STATUS_CHANGED: Final[str] = 'seatStatusChanged'
        CONCERT_LOCKS: Final[str] = 'concertLocks'
        LOCK_EXPIRING: Final[str] = 'lockExpiring'
        LOCK_EXPIRED: Final[str] = 'lockExpired'
        PING: Final[str] = 'ping'
        PONG: Final[str] = 'pong'
        ERROR: Final[str] = 'error'

    class ActionType:
        """Actions sent by clients."""

        AUTHENTICATE: Final[str] = 'authenticate'
        SELECT_SEAT: Final[str] = 'selectSeat'
        RELEASE_SEAT: Final[str] = 'releaseSeat'
        GET_SEAT_STATUS: Final[str] = 'getSeatStatus'
        GET_CONCERT_LOCKS: Final[str] = 'getConcertLocks'
        REQUEST_SEAT_UPDATE: Final[str] = 'requestSeatUpdate'
        PING: Final[str] = 'ping'

    class SeatAction:
        """Values of the ``action`` field inside seatStatusUpdate."""

        LOCKED: Final[str] = 'locked'
        PROCESSING: Final[str] = 'processing'
        AVAILABLE: Final[str] = 'available'
        MINTED: Final[str] = 'minted'


class WebSocketErrorMessages:
    INVALID_MESSAGE_FORMAT: Final[str] = 'Invalid message format'
    UNKNOWN_ACTION: Final[str] = 'Unknown action'
    NOT_AUTHENTICATED: Final[str] = 'Not authenticated'
    MISSING_FIELDS: Final[str] = 'Missing required fields'
    WALLET_MISMATCH: Final[str] = 'Wallet address does not match token'
    RELEASE_FAILED: Final[str] = 'No reservation found or not authorized'
    WRONG_ROOM: Final[str] = 'Not a member of this concert room'


def room_id(concert_id: int | str) -> str:
    return f'{WebSocketConfig.ROOM_PREFIX}{concert_id}'
