import anyio
from anyio.abc import TaskGroup

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.seat_lock.app.seat_locking_service import SeatLockingService


class LockExpiryMonitor:
    """Periodically warns owners of expiring locks and removes expired ones."""

    def __init__(
        self,
        *,
        seat_locking_service: SeatLockingService,
        interval_seconds: float = settings.LOCK_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self.seat_locking_service = seat_locking_service
        self.interval_seconds = interval_seconds

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._sweep_loop)  # pyrefly: ignore[bad-argument-type]
        Logger.base.info(f'⏱️ [LOCK_MONITOR] Started (every {self.interval_seconds}s)')

    async def run_once(self) -> dict[str, int]:
        return await self.seat_locking_service.sweep()

    async def _sweep_loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                # next tick retries
                Logger.base.exception(f'❌ [LOCK_MONITOR] Sweep failed: {e}')
            await anyio.sleep(self.interval_seconds)
