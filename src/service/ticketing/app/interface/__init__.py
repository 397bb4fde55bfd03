"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_concert_command_repo import IConcertCommandRepo
from src.service.ticketing.app.interface.i_concert_query_repo import IConcertQueryRepo
from src.service.ticketing.app.interface.i_nonce_store import INonceStore
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.app.interface.i_wallet_signature_verifier import (
    IWalletSignatureVerifier,
)

__all__ = [
    'IConcertCommandRepo',
    'IConcertQueryRepo',
    'INonceStore',
    'ITicketCommandRepo',
    'ITicketQueryRepo',
    'IUserCommandRepo',
    'IUserQueryRepo',
    'IWalletSignatureVerifier',
]
