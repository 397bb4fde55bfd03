from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.seat_map import normalize_seat_code


# Statuses that older clients wrote for tickets that made it on chain
MINTED_STATUSES = frozenset({'minted', 'completed', 'confirmed', 'active', 'sold'})
PLACEHOLDER_SIGNATURE_PREFIXES = ('dummy_', 'error_')


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TicketAction:
    MINT = 'mint'
    LIST = 'list'
    UNLIST = 'unlist'
    TRANSFER = 'transfer'
    VERIFY = 'verify'
    BLOCKCHAIN_VERIFY = 'blockchain_verify'


@attrs.define
class TicketHistoryEntry:
    action: str
    from_wallet: Optional[str] = None
    to_wallet: Optional[str] = None
    price: Optional[float] = None
    transaction_signature: Optional[str] = None
    timestamp: datetime = attrs.field(factory=_now)


@attrs.define
class TicketEntity:
    concert_id: int
    owner_id: int
    owner_wallet: str
    section_name: str
    seat_number: str
    price: float = 0.0
    transaction_signature: str = ''
    mint_address: str = ''
    status: TicketStatus = TicketStatus.MINTED
    is_used: bool = False
    is_listed: bool = False
    listing_price: Optional[float] = None
    listing_date: Optional[datetime] = None
    transaction_history: list[TicketHistoryEntry] = attrs.field(factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def mint(
        cls,
        *,
        concert_id: int,
        owner_id: int,
        owner_wallet: str,
        section_name: str,
        seat_number: str,
        price: float,
        transaction_signature: str,
        mint_address: str = '',
    ) -> 'TicketEntity':
        if not transaction_signature:
            raise DomainError('Transaction signature is required')
        return cls(
            concert_id=concert_id,
            owner_id=owner_id,
            owner_wallet=owner_wallet,
            section_name=section_name,
            seat_number=seat_number,
            price=price,
            transaction_signature=transaction_signature,
            mint_address=mint_address,
            status=TicketStatus.MINTED,
            transaction_history=[
                TicketHistoryEntry(
                    action=TicketAction.MINT,
                    to_wallet=owner_wallet,
                    price=price,
                    transaction_signature=transaction_signature,
                )
            ],
        )

    @property
    def seat_code(self) -> str:
        return normalize_seat_code(self.section_name, self.seat_number)

    def counts_as_minted(self) -> bool:
        """Whether the ticket belongs in the minted-seats listing of its concert."""
        if not self.section_name or not self.seat_number or self.is_used:
            return False
        if self.owner_id:
            return True
        signature = self.transaction_signature or ''
        if signature and not signature.startswith(PLACEHOLDER_SIGNATURE_PREFIXES):
            return True
        return str(getattr(self.status, 'value', self.status)) in MINTED_STATUSES

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id

    def ensure_owned_by(self, user_id: int) -> None:
        if not self.is_owned_by(user_id):
            raise ForbiddenError('Not authorized to manage this ticket')

    def list_for_sale(self, *, price: float) -> None:
        if self.is_used:
            raise DomainError('Used tickets cannot be listed')
        if price is None or price <= 0:
            raise DomainError('Listing price must be positive')
        self.is_listed = True
        self.listing_price = price
        self.listing_date = _now()
        self.status = TicketStatus.LISTED
        self.transaction_history.append(
            TicketHistoryEntry(action=TicketAction.LIST, from_wallet=self.owner_wallet, price=price)
        )

    def cancel_listing(self) -> None:
        if not self.is_listed:
            raise DomainError('Ticket is not listed')
        self._clear_listing()
        self.transaction_history.append(
            TicketHistoryEntry(action=TicketAction.UNLIST, from_wallet=self.owner_wallet)
        )

    def transfer_to(
        self, *, buyer_id: int, buyer_wallet: str, transaction_signature: str
    ) -> None:
        if not self.is_listed or not self.listing_price:
            raise DomainError('Ticket is not for sale')
        if self.is_used:
            raise DomainError('Used tickets cannot be sold')
        if buyer_id == self.owner_id:
            raise DomainError('You already own this ticket')
        if not transaction_signature:
            raise DomainError('Transaction signature is required')

        self.transaction_history.append(
            TicketHistoryEntry(
                action=TicketAction.TRANSFER,
                from_wallet=self.owner_wallet,
                to_wallet=buyer_wallet,
                price=self.listing_price,
                transaction_signature=transaction_signature,
            )
        )
        self.owner_id = buyer_id
        self.owner_wallet = buyer_wallet
        self._clear_listing()

    def mark_used(self, *, verifier_wallet: str) -> None:
        if self.is_used:
            raise DomainError('Ticket has already been used')
        self.is_used = True
        self.status = TicketStatus.USED
        self.is_listed = False
        self.listing_price = None
        self.listing_date = None
        self.transaction_history.append(
            TicketHistoryEntry(
                action=TicketAction.VERIFY, from_wallet=verifier_wallet, to_wallet=self.owner_wallet
            )
        )

    def record_blockchain_verification(self, *, verifier_wallet: str) -> None:
        self.transaction_history.append(
            TicketHistoryEntry(action=TicketAction.BLOCKCHAIN_VERIFY, from_wallet=verifier_wallet)
        )

    def ensure_deletable(self) -> None:
        if self.is_used:
            raise DomainError('Used tickets cannot be deleted')

    def _clear_listing(self) -> None:
        self.is_listed = False
        self.listing_price = None
        self.listing_date = None
        self.status = TicketStatus.MINTED
