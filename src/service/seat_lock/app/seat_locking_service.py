"""
Seat locking service

Two lock kinds guard a seat against double minting:
- temporary: the user has the seat selected (TEMPORARY_LOCK_SECONDS)
- processing: the user's mint transaction is in flight (PROCESSING_LOCK_SECONDS)

A user holds at most one temporary lock per concert. Selecting another seat
releases the previous one. Expired locks count as free immediately, the
periodic sweep only notifies owners and deletes the leftovers.
"""

import time
from typing import Any, Callable, Optional

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import SeatUnavailableError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.platform.websocket.websocket_config import WebSocketConfig
from src.service.seat_lock.app.interface.i_minted_seat_checker import IMintedSeatChecker
from src.service.seat_lock.app.interface.i_seat_event_broadcaster import ISeatEventBroadcaster
from src.service.seat_lock.app.interface.i_seat_lock_store import ISeatLockStore
from src.service.seat_lock.domain.seat_lock_entity import (
    OWN_PROCESSING_MESSAGE,
    LockResult,
    LockType,
    SeatLock,
    UnavailableReason,
    build_seat_key,
    unavailable_message,
)


class SeatLockingService:
    def __init__(
        self,
        *,
        lock_store: ISeatLockStore,
        broadcaster: ISeatEventBroadcaster,
        minted_seat_checker: IMintedSeatChecker,
        clock: Callable[[], float] = time.time,
        temporary_lock_seconds: int = settings.TEMPORARY_LOCK_SECONDS,
        processing_lock_seconds: int = settings.PROCESSING_LOCK_SECONDS,
        warning_seconds: int = settings.LOCK_WARNING_SECONDS,
    ) -> None:
        self.lock_store = lock_store
        self.broadcaster = broadcaster
        self.minted_seat_checker = minted_seat_checker
        self._clock = clock
        self.temporary_lock_ms = temporary_lock_seconds * 1000
        self.processing_lock_ms = processing_lock_seconds * 1000
        self.warning_ms = warning_seconds * 1000

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ========== Locking ==========

    @Logger.io
    async def lock_seat_temporarily(
        self, *, concert_id: int, section_name: str, seat_number: str, user_id: int
    ) -> LockResult:
        result = await self._acquire(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            user_id=user_id,
            lock_type=LockType.TEMPORARY,
            duration_ms=self.temporary_lock_ms,
        )

        # One selection per user per concert
        for other in await self.lock_store.list_concert(concert_id, now_ms=self.now_ms()):
            if (
                other.user_id == user_id
                and other.lock_type == LockType.TEMPORARY
                and other.seat_key != result.seat_key
            ):
                await self._release_and_announce(other, user_id=user_id)

        await self.broadcaster.broadcast_seat_update(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            action=WebSocketConfig.SeatAction.LOCKED,
            user_id=user_id,
            extra={'lock_type': LockType.TEMPORARY.value, 'expires_at': result.expires_at},
        )
        return result

    @Logger.io
    async def lock_seat_for_processing(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        user_id: int,
        operation: str = 'mint',
    ) -> LockResult:
        result = await self._acquire(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            user_id=user_id,
            lock_type=LockType.PROCESSING,
            duration_ms=self.processing_lock_ms,
            operation=operation,
        )
        await self.broadcaster.broadcast_seat_update(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            action=WebSocketConfig.SeatAction.PROCESSING,
            user_id=user_id,
            extra={'lock_type': LockType.PROCESSING.value, 'expires_at': result.expires_at},
        )
        return result

    @Logger.io
    async def complete_processing(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        user_id: int,
        success: bool,
    ) -> bool:
        seat_key = build_seat_key(concert_id, section_name, seat_number)
        released = await self.lock_store.release(
            seat_key, user_id=user_id, lock_type=LockType.PROCESSING
        )
        action = (
            WebSocketConfig.SeatAction.MINTED if success else WebSocketConfig.SeatAction.AVAILABLE
        )
        await self.broadcaster.broadcast_seat_update(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            action=action,
            user_id=user_id,
        )
        Logger.base.info(
            f'🎟️ [SEAT_LOCK] Processing finished for {seat_key} (success={success}, '
            f'lock_found={released is not None})'
        )
        return released is not None

    @Logger.io
    async def unlock_seat(
        self, *, concert_id: int, section_name: str, seat_number: str, user_id: int
    ) -> bool:
        seat_key = build_seat_key(concert_id, section_name, seat_number)
        released = await self.lock_store.release(
            seat_key, user_id=user_id, lock_type=LockType.TEMPORARY
        )
        if released is None:
            return False
        await self._announce_release(released)
        return True

    @Logger.io
    async def release_user_locks(self, *, concert_id: int, user_id: int) -> int:
        """Drop every temporary lock the user holds in the concert (socket closed)."""
        count = 0
        for lock in await self.lock_store.list_concert(concert_id, now_ms=self.now_ms()):
            if lock.user_id == user_id and lock.lock_type == LockType.TEMPORARY:
                if await self._release_and_announce(lock, user_id=user_id):
                    count += 1
        return count

    # ========== Queries ==========

    @Logger.io
    async def check_seat_availability(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        user_id: Optional[int] = None,
    ) -> dict[str, Any]:
        seat_key = build_seat_key(concert_id, section_name, seat_number)
        result: dict[str, Any] = {
            'seat_key': seat_key,
            'available': True,
            'reason': None,
            'message': None,
            'locked_by_me': False,
            'lock_type': None,
            'expires_at': None,
            'time_remaining': None,
        }

        if await self.minted_seat_checker.is_minted(
            concert_id=concert_id, section_name=section_name, seat_number=seat_number
        ):
            reason = UnavailableReason.ALREADY_MINTED.value
            return result | {
                'available': False,
                'reason': reason,
                'message': unavailable_message(reason),
            }

        now_ms = self.now_ms()
        lock = await self.lock_store.get(seat_key, now_ms=now_ms)
        if lock is None:
            return result

        result |= {
            'lock_type': lock.lock_type.value,
            'expires_at': lock.expires_at,
            'time_remaining': lock.time_remaining(now_ms),
        }
        if user_id is not None and lock.user_id == user_id:
            return result | {'locked_by_me': True}

        reason = self._conflict_reason(lock).value
        return result | {
            'available': False,
            'reason': reason,
            'message': unavailable_message(reason),
        }

    async def get_locks_for_concert(self, concert_id: int) -> dict[str, Any]:
        now_ms = self.now_ms()
        locks = await self.lock_store.list_concert(concert_id, now_ms=now_ms)
        return {
            'concert_id': concert_id,
            'temporary_locks': [
                lock.to_dict(now_ms) for lock in locks if lock.lock_type == LockType.TEMPORARY
            ],
            'processing_locks': [
                lock.to_dict(now_ms) for lock in locks if lock.lock_type == LockType.PROCESSING
            ],
        }

    async def list_locks(self, concert_id: int) -> list[SeatLock]:
        return await self.lock_store.list_concert(concert_id, now_ms=self.now_ms())

    async def get_all_locks(self) -> dict[str, Any]:
        now_ms = self.now_ms()
        grouped: dict[str, list[dict[str, Any]]] = {}
        for lock in await self.lock_store.list_all(now_ms=now_ms):
            grouped.setdefault(str(lock.concert_id), []).append(lock.to_dict(now_ms))
        return {'concerts': grouped, 'total': sum(len(v) for v in grouped.values())}

    async def get_system_stats(self) -> dict[str, int]:
        locks = await self.lock_store.list_all(now_ms=self.now_ms())
        temporary = sum(1 for lock in locks if lock.lock_type == LockType.TEMPORARY)
        processing = len(locks) - temporary
        metrics.update_active_locks(temporary=temporary, processing=processing)
        return {
            'active_temp_locks': temporary,
            'active_processing_locks': processing,
            'total_active_locks': len(locks),
            'active_users': len({lock.user_id for lock in locks}),
        }

    # ========== Expiry ==========

    async def warn_expiring_locks(self) -> int:
        now_ms = self.now_ms()
        warned = 0
        for lock in await self.lock_store.list_all(now_ms=now_ms):
            if lock.warned or lock.lock_type != LockType.TEMPORARY:
                continue
            remaining = lock.time_remaining(now_ms)
            if 0 < remaining <= self.warning_ms:
                await self.lock_store.mark_warned(lock.seat_key)
                await self.broadcaster.notify_user(
                    concert_id=lock.concert_id,
                    user_id=lock.user_id,
                    event=WebSocketConfig.MessageType.LOCK_EXPIRING,
                    data=lock.to_dict(now_ms),
                )
                warned += 1
        return warned

    async def cleanup_expired_locks(self) -> int:
        now_ms = self.now_ms()
        expired = await self.lock_store.pop_expired(now_ms=now_ms)
        for lock in expired:
            await self.broadcaster.notify_user(
                concert_id=lock.concert_id,
                user_id=lock.user_id,
                event=WebSocketConfig.MessageType.LOCK_EXPIRED,
                data=lock.to_dict(now_ms),
            )
            await self.broadcaster.broadcast_seat_update(
                concert_id=lock.concert_id,
                section_name=lock.section_name,
                seat_number=lock.seat_number,
                action=WebSocketConfig.SeatAction.AVAILABLE,
            )
        if expired:
            metrics.record_expired_locks(len(expired))
            Logger.base.info(f'🧹 [SEAT_LOCK] Removed {len(expired)} expired locks')
        return len(expired)

    async def sweep(self) -> dict[str, int]:
        warned = await self.warn_expiring_locks()
        expired = await self.cleanup_expired_locks()
        return {'warned': warned, 'expired': expired}

    # ========== Internals ==========

    async def _acquire(
        self,
        *,
        concert_id: int,
        section_name: str,
        seat_number: str,
        user_id: int,
        lock_type: LockType,
        duration_ms: int,
        operation: Optional[str] = None,
    ) -> LockResult:
        seat_key = build_seat_key(concert_id, section_name, seat_number)

        if await self.minted_seat_checker.is_minted(
            concert_id=concert_id, section_name=section_name, seat_number=seat_number
        ):
            self._raise_unavailable(UnavailableReason.ALREADY_MINTED, lock_type, seat_key)

        now_ms = self.now_ms()
        lock = SeatLock(
            concert_id=concert_id,
            section_name=section_name,
            seat_number=seat_number,
            user_id=user_id,
            lock_type=lock_type,
            created_at=now_ms,
            expires_at=now_ms + duration_ms,
            operation=operation,
        )
        previous = await self.lock_store.get(seat_key, now_ms=now_ms)
        conflict = await self.lock_store.acquire(lock, now_ms=now_ms)
        if conflict is not None:
            own_mint = (
                conflict.user_id == user_id and conflict.lock_type == LockType.PROCESSING
            )
            self._raise_unavailable(
                self._conflict_reason(conflict),
                lock_type,
                seat_key,
                message=OWN_PROCESSING_MESSAGE if own_mint else None,
            )

        refreshed = previous is not None and previous.user_id == user_id
        metrics.record_seat_lock(
            lock_type=lock_type.value, result='refreshed' if refreshed else 'acquired'
        )
        return LockResult(
            seat_key=seat_key,
            lock_type=lock_type,
            expires_at=lock.expires_at,
            time_remaining=lock.time_remaining(now_ms),
            refreshed=refreshed,
        )

    async def _release_and_announce(self, lock: SeatLock, *, user_id: int) -> bool:
        released = await self.lock_store.release(
            lock.seat_key, user_id=user_id, lock_type=LockType.TEMPORARY
        )
        if released is None:
            return False
        await self._announce_release(released)
        return True

    async def _announce_release(self, lock: SeatLock) -> None:
        await self.broadcaster.notify_user(
            concert_id=lock.concert_id,
            user_id=lock.user_id,
            event=WebSocketConfig.MessageType.SEAT_RELEASED,
            data=lock.to_dict(self.now_ms()),
        )
        await self.broadcaster.broadcast_seat_update(
            concert_id=lock.concert_id,
            section_name=lock.section_name,
            seat_number=lock.seat_number,
            action=WebSocketConfig.SeatAction.AVAILABLE,
            user_id=lock.user_id,
        )

    @staticmethod
    def _conflict_reason(lock: SeatLock) -> UnavailableReason:
        if lock.lock_type == LockType.PROCESSING:
            return UnavailableReason.PROCESSING_CONFLICT
        return UnavailableReason.SEAT_LOCKED

    @staticmethod
    def _raise_unavailable(
        reason: UnavailableReason,
        lock_type: LockType,
        seat_key: str,
        *,
        message: Optional[str] = None,
    ) -> None:
        metrics.record_seat_lock(lock_type=lock_type.value, result=reason.value)
        raise SeatUnavailableError(
            message or unavailable_message(reason.value), reason=reason.value, seat_key=seat_key
        )
