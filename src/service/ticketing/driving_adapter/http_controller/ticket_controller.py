from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.buy_ticket_use_case import BuyTicketUseCase
from src.service.ticketing.app.command.delete_ticket_use_case import DeleteTicketUseCase
from src.service.ticketing.app.command.mint_ticket_use_case import MintTicketUseCase
from src.service.ticketing.app.command.ticket_listing_use_case import TicketListingUseCase
from src.service.ticketing.app.command.verify_ticket_use_case import VerifyTicketUseCase
from src.service.ticketing.app.query.marketplace_query_use_case import MarketplaceQueryUseCase
from src.service.ticketing.app.query.ticket_query_use_case import TicketQueryUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    RoleAuthStrategy,
    get_current_user,
)
from src.service.ticketing.driving_adapter.schema.ticket_schema import (
    BlockchainVerifyResponse,
    BuyTicketRequest,
    ListTicketRequest,
    MarketplaceStatsResponse,
    MintedSeatsResponse,
    MintTicketRequest,
    MintTicketResponse,
    TicketEnvelope,
    TicketHistoryListResponse,
    TicketHistoryResponse,
    TicketListResponse,
    TicketResponse,
    VerificationResponse,
)


router = APIRouter()


@router.post('/mint', status_code=status.HTTP_201_CREATED)
@Logger.io
async def mint_ticket(
    request: MintTicketRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: MintTicketUseCase = Depends(MintTicketUseCase.depends),
) -> MintTicketResponse:
    result = await use_case.mint(
        buyer=current_user,
        concert_id=request.concert_id,
        section_name=request.section_name,
        seat_number=request.seat_number,
        transaction_signature=request.transaction_signature,
        mint_address=request.mint_address,
    )
    return MintTicketResponse(
        msg='Ticket minted successfully',
        ticket=TicketResponse.from_entity(result['ticket']),
        seat_key=result['seat_key'],
    )


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_my_tickets(
    current_user: UserEntity = Depends(get_current_user),
    use_case: TicketQueryUseCase = Depends(TicketQueryUseCase.depends),
) -> TicketListResponse:
    rows = await use_case.list_my_tickets(current_user)
    return TicketListResponse(
        tickets=[
            TicketResponse.from_entity(ticket, concert, joined=True) for ticket, concert in rows
        ],
        count=len(rows),
    )


# Fixed paths must stay above /{ticket_id}


@router.get('/market', status_code=status.HTTP_200_OK)
@Logger.io
async def list_market(
    use_case: MarketplaceQueryUseCase = Depends(MarketplaceQueryUseCase.depends),
) -> TicketListResponse:
    rows = await use_case.list_listings()
    return TicketListResponse(
        tickets=[
            TicketResponse.from_entity(ticket, concert, joined=True) for ticket, concert in rows
        ],
        count=len(rows),
    )


@router.get('/marketplace/stats', status_code=status.HTTP_200_OK)
@Logger.io
async def get_marketplace_stats(
    use_case: MarketplaceQueryUseCase = Depends(MarketplaceQueryUseCase.depends),
) -> MarketplaceStatsResponse:
    return MarketplaceStatsResponse(**await use_case.get_stats())


@router.get('/concerts/{concert_id}/minted-seats', status_code=status.HTTP_200_OK)
@Logger.io
async def get_minted_seats(
    concert_id: int,
    use_case: MarketplaceQueryUseCase = Depends(MarketplaceQueryUseCase.depends),
) -> MintedSeatsResponse:
    # Seat pickers poll this; a failure shows every seat as free instead of erroring
    try:
        seats = await use_case.list_minted_seats(concert_id)
    except Exception as e:
        Logger.base.error(f'❌ [MINTED_SEATS] concert {concert_id}: {e}')
        seats = []
    return MintedSeatsResponse(concert_id=concert_id, seats=seats, count=len(seats))


@router.get('/{ticket_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TicketQueryUseCase = Depends(TicketQueryUseCase.depends),
) -> TicketEnvelope:
    ticket, concert = await use_case.get_ticket(
        ticket_id=ticket_id,
        viewer=current_user,
        viewer_is_admin=RoleAuthStrategy.is_admin(current_user),
    )
    return TicketEnvelope(ticket=TicketResponse.from_entity(ticket, concert, joined=True))


@router.get('/{ticket_id}/history', status_code=status.HTTP_200_OK)
@Logger.io
async def get_ticket_history(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TicketQueryUseCase = Depends(TicketQueryUseCase.depends),
) -> TicketHistoryListResponse:
    history = await use_case.get_history(
        ticket_id=ticket_id,
        viewer=current_user,
        viewer_is_admin=RoleAuthStrategy.is_admin(current_user),
    )
    return TicketHistoryListResponse(
        ticket_id=ticket_id,
        history=[TicketHistoryResponse.from_entry(entry) for entry in history],
    )


@router.delete('/{ticket_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: DeleteTicketUseCase = Depends(DeleteTicketUseCase.depends),
) -> dict:
    await use_case.delete(ticket_id=ticket_id, owner=current_user)
    return {'success': True, 'msg': 'Ticket deleted'}


@router.post('/{ticket_id}/list', status_code=status.HTTP_200_OK)
@Logger.io
async def list_ticket_for_sale(
    ticket_id: int,
    request: ListTicketRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TicketListingUseCase = Depends(TicketListingUseCase.depends),
) -> TicketEnvelope:
    ticket = await use_case.list_for_sale(
        ticket_id=ticket_id, owner=current_user, price=request.price
    )
    return TicketEnvelope(msg='Ticket listed for sale', ticket=TicketResponse.from_entity(ticket))


@router.delete('/{ticket_id}/list', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_ticket_listing(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TicketListingUseCase = Depends(TicketListingUseCase.depends),
) -> TicketEnvelope:
    ticket = await use_case.cancel_listing(ticket_id=ticket_id, owner=current_user)
    return TicketEnvelope(msg='Listing cancelled', ticket=TicketResponse.from_entity(ticket))


@router.post('/{ticket_id}/buy', status_code=status.HTTP_200_OK)
@Logger.io
async def buy_ticket(
    ticket_id: int,
    request: BuyTicketRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: BuyTicketUseCase = Depends(BuyTicketUseCase.depends),
) -> TicketEnvelope:
    ticket = await use_case.buy(
        ticket_id=ticket_id,
        buyer=current_user,
        transaction_signature=request.transaction_signature,
    )
    return TicketEnvelope(msg='Ticket purchased', ticket=TicketResponse.from_entity(ticket))


@router.put('/{ticket_id}/verify', status_code=status.HTTP_200_OK)
@Logger.io
async def verify_ticket(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: VerifyTicketUseCase = Depends(VerifyTicketUseCase.depends),
) -> TicketEnvelope:
    ticket = await use_case.verify(
        ticket_id=ticket_id,
        verifier=current_user,
        verifier_is_admin=RoleAuthStrategy.is_admin(current_user),
    )
    return TicketEnvelope(msg='Ticket verified', ticket=TicketResponse.from_entity(ticket))


@router.post('/{ticket_id}/verify-blockchain', status_code=status.HTTP_200_OK)
@Logger.io
async def verify_ticket_on_chain(
    ticket_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: VerifyTicketUseCase = Depends(VerifyTicketUseCase.depends),
) -> BlockchainVerifyResponse:
    ticket, validation = await use_case.verify_blockchain(ticket_id=ticket_id, owner=current_user)
    return BlockchainVerifyResponse(
        verification=VerificationResponse(
            is_valid=validation.is_valid,
            status=validation.status,
            has_transaction_signature=validation.has_transaction_signature,
            has_mint_address=validation.has_mint_address,
            concert_found=validation.concert_found,
            verified_by=current_user.wallet_address,
            timestamp=datetime.now(timezone.utc),
        ),
        ticket=TicketResponse.from_entity(ticket),
    )
