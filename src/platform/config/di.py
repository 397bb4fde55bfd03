"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.platform.websocket.connection_manager import WebSocketConnectionManager
from src.service.seat_lock.app.lock_expiry_monitor import LockExpiryMonitor
from src.service.seat_lock.app.seat_locking_service import SeatLockingService
from src.service.seat_lock.driven_adapter.state.in_memory_seat_lock_store import (
    InMemorySeatLockStore,
)
from src.service.seat_lock.driven_adapter.state.kvrocks_seat_lock_store import (
    KvrocksSeatLockStore,
)
from src.service.seat_lock.driven_adapter.websocket.seat_event_broadcaster_impl import (
    SeatEventBroadcasterImpl,
)
from src.service.seat_lock.driving_adapter.websocket.seat_channel_handler import (
    SeatChannelHandler,
)
from src.service.ticketing.driven_adapter.repo.concert_command_repo_impl import (
    ConcertCommandRepoImpl,
)
from src.service.ticketing.driven_adapter.repo.concert_query_repo_impl import ConcertQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.minted_seat_checker_impl import (
    MintedSeatCheckerImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
    TicketCommandRepoImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import TicketQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.user_command_repo_impl import UserCommandRepoImpl
from src.service.ticketing.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl
from src.service.ticketing.driven_adapter.security.in_memory_nonce_store import (
    InMemoryNonceStore,
)
from src.service.ticketing.driven_adapter.security.nacl_wallet_signature_verifier import (
    NaclWalletSignatureVerifier,
)
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Database (AsyncEngineManager picks the engine for the running loop)
    database = providers.Singleton(Database)

    # Repositories (stateless - use session_factory per-request)
    user_command_repo = providers.Singleton(
        UserCommandRepoImpl, session_factory=database.provided.session
    )
    user_query_repo = providers.Singleton(
        UserQueryRepoImpl, session_factory=database.provided.session
    )
    concert_command_repo = providers.Singleton(
        ConcertCommandRepoImpl, session_factory=database.provided.session
    )
    concert_query_repo = providers.Singleton(
        ConcertQueryRepoImpl, session_factory=database.provided.session
    )
    ticket_command_repo = providers.Singleton(
        TicketCommandRepoImpl, session_factory=database.provided.session
    )
    ticket_query_repo = providers.Singleton(
        TicketQueryRepoImpl, session_factory=database.provided.session
    )

    # Auth
    jwt_auth = providers.Singleton(JwtAuth)
    nonce_store = providers.Singleton(InMemoryNonceStore)
    wallet_signature_verifier = providers.Singleton(NaclWalletSignatureVerifier)

    # WebSocket rooms (one per concert)
    connection_manager = providers.Singleton(WebSocketConnectionManager)

    # Seat locking: SEAT_LOCK_BACKEND picks the store
    seat_lock_store = providers.Selector(
        lambda: settings.SEAT_LOCK_BACKEND,
        memory=providers.Singleton(InMemorySeatLockStore),
        kvrocks=providers.Singleton(KvrocksSeatLockStore),
    )
    seat_event_broadcaster = providers.Singleton(
        SeatEventBroadcasterImpl, connection_manager=connection_manager
    )
    minted_seat_checker = providers.Singleton(
        MintedSeatCheckerImpl, ticket_query_repo=ticket_query_repo
    )
    seat_locking_service = providers.Singleton(
        SeatLockingService,
        lock_store=seat_lock_store,
        broadcaster=seat_event_broadcaster,
        minted_seat_checker=minted_seat_checker,
    )
    lock_expiry_monitor = providers.Singleton(
        LockExpiryMonitor, seat_locking_service=seat_locking_service
    )
    seat_channel_handler = providers.Singleton(
        SeatChannelHandler,
        connection_manager=connection_manager,
        seat_locking_service=seat_locking_service,
        jwt_auth=jwt_auth,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
