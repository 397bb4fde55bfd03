from prometheus_client import Counter, Gauge


class TicketingMetrics:
    """Seat-locking and minting metrics exposed on /metrics."""

    def __init__(self) -> None:
        # ========== Seat Lock Metrics ==========
        self.seat_lock_requests = Counter(
            'seat_lock_requests_total',
            'Seat lock attempts by lock type and outcome',
            ['lock_type', 'result'],  # result: acquired/refreshed/<unavailable reason>
        )

        self.seat_locks_active = Gauge(
            'seat_locks_active',
            'Currently held seat locks',
            ['lock_type'],
        )

        self.seat_locks_expired = Counter(
            'seat_locks_expired_total',
            'Seat locks removed by the expiry sweep',
        )

        # ========== Ticket Metrics ==========
        self.tickets_minted = Counter(
            'tickets_minted_total',
            'Tickets recorded after a successful mint',
            ['concert_id'],
        )

        # ========== WebSocket Metrics ==========
        self.websocket_connections_active = Gauge(
            'websocket_connections_active',
            'Open seat channel connections',
        )

    # ========== Helper Methods ==========

    def record_seat_lock(self, *, lock_type: str, result: str) -> None:
        self.seat_lock_requests.labels(lock_type=lock_type, result=result).inc()

    def update_active_locks(self, *, temporary: int, processing: int) -> None:
        self.seat_locks_active.labels(lock_type='temporary').set(temporary)
        self.seat_locks_active.labels(lock_type='processing').set(processing)

    def record_expired_locks(self, count: int) -> None:
        if count:
            self.seat_locks_expired.inc(count)

    def record_ticket_minted(self, *, concert_id: int) -> None:
        self.tickets_minted.labels(concert_id=str(concert_id)).inc()


# Global metrics instance
metrics = TicketingMetrics()
