"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.seat_lock.driving_adapter.http_controller import seat_lock_controller
from src.service.seat_lock.driving_adapter.websocket import seat_websocket_controller
from src.service.ticketing.app.command import (
    buy_ticket_use_case,
    create_concert_use_case,
    delete_ticket_use_case,
    dev_login_use_case,
    issue_nonce_use_case,
    mint_ticket_use_case,
    review_concert_use_case,
    submit_additional_info_use_case,
    ticket_listing_use_case,
    verify_ticket_use_case,
    wallet_login_use_case,
)
from src.service.ticketing.app.query import (
    get_concert_use_case,
    get_seat_map_use_case,
    list_concerts_use_case,
    marketplace_query_use_case,
    ticket_query_use_case,
    user_query_use_case,
)
from src.service.ticketing.driving_adapter.http_controller import auth_controller
from src.service.ticketing.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    # Use cases (depends classmethods)
    issue_nonce_use_case,
    wallet_login_use_case,
    dev_login_use_case,
    create_concert_use_case,
    review_concert_use_case,
    submit_additional_info_use_case,
    mint_ticket_use_case,
    ticket_listing_use_case,
    buy_ticket_use_case,
    verify_ticket_use_case,
    delete_ticket_use_case,
    user_query_use_case,
    list_concerts_use_case,
    get_concert_use_case,
    get_seat_map_use_case,
    ticket_query_use_case,
    marketplace_query_use_case,
    # Controllers injecting providers directly
    role_auth,
    auth_controller,
    seat_lock_controller,
    seat_websocket_controller,
]
