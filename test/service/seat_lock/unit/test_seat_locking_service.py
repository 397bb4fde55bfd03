"""
Unit tests for SeatLockingService

Test coverage:
1. Temporary locks: exclusivity, refresh, one selection per user per concert
2. Processing locks: conflicts and completion
3. Availability queries and lock listings
4. Expiry: warnings before the deadline, cleanup after it
"""

import pytest

from src.platform.exception.exceptions import SeatUnavailableError
from src.platform.websocket.websocket_config import WebSocketConfig
from src.service.seat_lock.domain.seat_lock_entity import LockType


SEAT_A1 = {'concert_id': 1, 'section_name': 'VIP', 'seat_number': 'A1'}
SEAT_A2 = {'concert_id': 1, 'section_name': 'VIP', 'seat_number': 'A2'}


@pytest.mark.unit
@pytest.mark.asyncio
class TestTemporaryLocks:
    async def test_lock_is_granted_and_broadcast(self, service, broadcaster, clock):
        # When
        result = await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        # Then
        assert result.seat_key == '1-VIP-A1'
        assert result.lock_type == LockType.TEMPORARY
        assert result.time_remaining == 300_000
        assert result.expires_at == int(clock() * 1000) + 300_000
        assert not result.refreshed
        broadcaster.broadcast_seat_update.assert_awaited_once()
        kwargs = broadcaster.broadcast_seat_update.await_args.kwargs
        assert kwargs['action'] == WebSocketConfig.SeatAction.LOCKED
        assert kwargs['user_id'] == 5
        assert kwargs['extra']['lock_type'] == 'temporary'

    async def test_other_user_is_refused(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        with pytest.raises(SeatUnavailableError) as exc_info:
            await service.lock_seat_temporarily(**SEAT_A1, user_id=6)

        assert exc_info.value.reason == 'seat_locked'
        assert exc_info.value.seat_key == '1-VIP-A1'
        assert exc_info.value.message == 'This seat is currently selected by another user'

    async def test_owner_relock_refreshes_deadline(self, service, clock):
        # Given
        first = await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        clock.advance(100)

        # When
        second = await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        # Then
        assert second.refreshed
        assert second.expires_at == first.expires_at + 100_000

    async def test_selecting_another_seat_releases_the_previous_one(self, service, broadcaster):
        # Given
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        # When
        await service.lock_seat_temporarily(**SEAT_A2, user_id=5)

        # Then
        locks = await service.list_locks(1)
        assert [lock.seat_key for lock in locks] == ['1-VIP-A2']
        released = broadcaster.notify_user.await_args.kwargs
        assert released['event'] == WebSocketConfig.MessageType.SEAT_RELEASED
        assert released['data']['seat_key'] == '1-VIP-A1'
        actions = [c.kwargs['action'] for c in broadcaster.broadcast_seat_update.await_args_list]
        assert WebSocketConfig.SeatAction.AVAILABLE in actions

    async def test_selections_in_other_concerts_are_kept(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        await service.lock_seat_temporarily(**(SEAT_A1 | {'concert_id': 2}), user_id=5)

        assert len(await service.list_locks(1)) == 1
        assert len(await service.list_locks(2)) == 1

    async def test_minted_seat_cannot_be_locked(self, service, minted_seat_checker):
        minted_seat_checker.is_minted.return_value = True

        with pytest.raises(SeatUnavailableError) as exc_info:
            await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        assert exc_info.value.reason == 'already_minted'

    async def test_expired_lock_is_free_before_cleanup(self, service, clock):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        clock.advance(300)

        result = await service.lock_seat_temporarily(**SEAT_A1, user_id=6)

        assert result.seat_key == '1-VIP-A1'
        assert not result.refreshed

    async def test_unlock_only_by_owner(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        assert not await service.unlock_seat(**SEAT_A1, user_id=6)
        assert await service.unlock_seat(**SEAT_A1, user_id=5)
        assert not await service.unlock_seat(**SEAT_A1, user_id=5)

    async def test_release_user_locks(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        await service.lock_seat_temporarily(**SEAT_A2, user_id=6)

        assert await service.release_user_locks(concert_id=1, user_id=5) == 1
        assert [lock.user_id for lock in await service.list_locks(1)] == [6]


@pytest.mark.unit
@pytest.mark.asyncio
class TestProcessingLocks:
    async def test_owner_upgrades_selection_to_processing(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        result = await service.lock_seat_for_processing(**SEAT_A1, user_id=5)

        assert result.lock_type == LockType.PROCESSING
        assert result.time_remaining == 120_000
        locks = await service.list_locks(1)
        assert locks[0].operation == 'mint'

    @pytest.mark.parametrize(
        'user_id,message',
        [
            (5, 'Your purchase of this seat is already being processed'),
            (6, 'This seat is being processed by another user'),
        ],
    )
    async def test_processing_blocks_temporary_locks(self, service, user_id, message):
        await service.lock_seat_for_processing(**SEAT_A1, user_id=5)

        with pytest.raises(SeatUnavailableError) as exc_info:
            await service.lock_seat_temporarily(**SEAT_A1, user_id=user_id)

        assert exc_info.value.reason == 'processing_conflict'
        assert exc_info.value.message == message

    async def test_other_users_selection_blocks_processing(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=6)

        with pytest.raises(SeatUnavailableError) as exc_info:
            await service.lock_seat_for_processing(**SEAT_A1, user_id=5)

        assert exc_info.value.reason == 'seat_locked'

    @pytest.mark.parametrize(
        'success,action',
        [(True, WebSocketConfig.SeatAction.MINTED), (False, WebSocketConfig.SeatAction.AVAILABLE)],
    )
    async def test_complete_processing(self, service, broadcaster, success, action):
        await service.lock_seat_for_processing(**SEAT_A1, user_id=5)

        assert await service.complete_processing(**SEAT_A1, user_id=5, success=success)

        assert await service.list_locks(1) == []
        assert broadcaster.broadcast_seat_update.await_args.kwargs['action'] == action

    async def test_complete_processing_without_lock(self, service):
        assert not await service.complete_processing(**SEAT_A1, user_id=5, success=True)


@pytest.mark.unit
@pytest.mark.asyncio
class TestQueries:
    async def test_free_seat(self, service):
        status = await service.check_seat_availability(**SEAT_A1, user_id=5)

        assert status['available']
        assert status['reason'] is None
        assert status['seat_key'] == '1-VIP-A1'

    async def test_own_selection_is_available_to_owner(self, service, clock):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        clock.advance(10)

        status = await service.check_seat_availability(**SEAT_A1, user_id=5)

        assert status['available']
        assert status['locked_by_me']
        assert status['lock_type'] == 'temporary'
        assert status['time_remaining'] == 290_000

    async def test_others_see_the_lock(self, service):
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)

        status = await service.check_seat_availability(**SEAT_A1, user_id=6)

        assert not status['available']
        assert status['reason'] == 'seat_locked'
        assert not status['locked_by_me']

    async def test_minted_wins(self, service, minted_seat_checker):
        minted_seat_checker.is_minted.return_value = True

        status = await service.check_seat_availability(**SEAT_A1)

        assert status['reason'] == 'already_minted'
        assert status['message'] == 'This seat has already been purchased'

    async def test_lock_listings_and_stats(self, service):
        # Given
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        await service.lock_seat_for_processing(**SEAT_A2, user_id=6)
        await service.lock_seat_temporarily(**(SEAT_A1 | {'concert_id': 2}), user_id=6)

        # When
        concert_locks = await service.get_locks_for_concert(1)
        all_locks = await service.get_all_locks()
        stats = await service.get_system_stats()

        # Then
        assert [lock['seat_key'] for lock in concert_locks['temporary_locks']] == ['1-VIP-A1']
        assert [lock['seat_key'] for lock in concert_locks['processing_locks']] == ['1-VIP-A2']
        assert all_locks['total'] == 3
        assert set(all_locks['concerts']) == {'1', '2'}
        assert stats == {
            'active_temp_locks': 2,
            'active_processing_locks': 1,
            'total_active_locks': 3,
            'active_users': 2,
        }


@pytest.mark.unit
@pytest.mark.asyncio
class TestExpiry:
    async def test_owner_is_warned_once_before_expiry(self, service, broadcaster, clock):
        # Given
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        clock.advance(269)
        assert await service.warn_expiring_locks() == 0

        # When
        clock.advance(2)

        # Then
        assert await service.warn_expiring_locks() == 1
        assert await service.warn_expiring_locks() == 0
        kwargs = broadcaster.notify_user.await_args.kwargs
        assert kwargs['event'] == WebSocketConfig.MessageType.LOCK_EXPIRING
        assert kwargs['user_id'] == 5
        assert kwargs['data']['time_remaining'] == 29_000

    async def test_processing_locks_are_not_warned(self, service, clock):
        await service.lock_seat_for_processing(**SEAT_A1, user_id=5)
        clock.advance(100)

        assert await service.warn_expiring_locks() == 0

    async def test_sweep_removes_expired_locks_and_notifies(self, service, broadcaster, clock):
        # Given
        await service.lock_seat_temporarily(**SEAT_A1, user_id=5)
        await service.lock_seat_temporarily(**SEAT_A2, user_id=6)
        clock.advance(301)

        # When
        result = await service.sweep()

        # Then
        assert result == {'warned': 0, 'expired': 2}
        events = [c.kwargs['event'] for c in broadcaster.notify_user.await_args_list]
        assert events.count(WebSocketConfig.MessageType.LOCK_EXPIRED) == 2
        last_update = broadcaster.broadcast_seat_update.await_args.kwargs
        assert last_update['action'] == WebSocketConfig.SeatAction.AVAILABLE
        assert await service.sweep() == {'warned': 0, 'expired': 0}
