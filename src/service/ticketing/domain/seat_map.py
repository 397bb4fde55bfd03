"""
Seat map generation for concert sections.

A section only stores how many seats it has. The grid is derived from that
count so every client draws the same layout:

    cols = ceil(sqrt(total * 2)), rows = ceil(total / cols)

Seats are numbered row-major. The last row may be partially filled.
Each seat is addressed by a seat code ``{section}-{row}{column}``, for example
``VIP-B4``.
"""

from enum import Enum
import math
import re
from typing import Iterator, Mapping, Optional

import attrs

from src.service.ticketing.domain.entity.concert_entity import ConcertEntity


_SEAT_NUMBER_PATTERN = re.compile(r'^([A-Z]+)([1-9][0-9]*)$')


class SeatStatus(str, Enum):
    OWNED = 'owned'
    MINTED = 'minted'
    PROCESSING = 'processing'
    SELECTED = 'selected'
    LOCKED = 'locked'
    AVAILABLE = 'available'


@attrs.define(frozen=True)
class Seat:
    code: str
    seat_number: str
    row: str
    column: int


@attrs.define(frozen=True)
class SeatLockView:
    """Lock state of a seat as seen by the seat map (kept free of lock-store types)."""

    lock_type: str  # temporary | processing
    user_id: int


def grid_dimensions(total_seats: int) -> tuple[int, int]:
    """Return (rows, cols) for a section holding total_seats seats."""
    if total_seats <= 0:
        return 0, 0
    cols = math.ceil(math.sqrt(total_seats * 2))
    rows = math.ceil(total_seats / cols)
    if rows * cols < total_seats:
        cols += 1
    return rows, cols


def row_label(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA"""
    if index < 0:
        raise ValueError(f'Row index must be >= 0: {index}')
    label = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = chr(65 + remainder) + label
    return label


def row_index(label: str) -> int:
    index = 0
    for char in label:
        index = index * 26 + (ord(char) - 64)
    return index - 1


def generate_seats(section_name: str, total_seats: int) -> Iterator[Seat]:
    _, cols = grid_dimensions(total_seats)
    for position in range(total_seats):
        row, col = divmod(position, cols)
        label = row_label(row)
        seat_number = f'{label}{col + 1}'
        yield Seat(
            code=f'{section_name}-{seat_number}',
            seat_number=seat_number,
            row=label,
            column=col + 1,
        )


def parse_seat_code(code: str) -> tuple[str, str]:
    """Split 'VIP-B4' into ('VIP', 'B4'). Section names may contain dashes."""
    section, sep, seat_number = code.rpartition('-')
    if not sep or not section or not seat_number:
        raise ValueError(f'Invalid seat code: {code}')
    return section, seat_number


def normalize_seat_code(section_name: str, seat_number: str) -> str:
    if seat_number.startswith(f'{section_name}-'):
        return seat_number
    return f'{section_name}-{seat_number}'


def is_valid_seat(total_seats: int, seat_number: str) -> bool:
    match = _SEAT_NUMBER_PATTERN.match(seat_number)
    if not match:
        return False
    rows, cols = grid_dimensions(total_seats)
    row = row_index(match.group(1))
    col = int(match.group(2)) - 1
    if row >= rows or col >= cols:
        return False
    return row * cols + col < total_seats


def resolve_seat_status(
    code: str,
    *,
    owned_codes: set[str],
    minted_codes: set[str],
    locks: Mapping[str, SeatLockView],
    viewer_id: Optional[int],
) -> SeatStatus:
    if code in owned_codes:
        return SeatStatus.OWNED
    if code in minted_codes:
        return SeatStatus.MINTED
    lock = locks.get(code)
    if lock is None:
        return SeatStatus.AVAILABLE
    if lock.lock_type == 'processing':
        return SeatStatus.PROCESSING
    if viewer_id is not None and lock.user_id == viewer_id:
        return SeatStatus.SELECTED
    return SeatStatus.LOCKED


def build_section_seat_map(
    section_name: str,
    total_seats: int,
    *,
    owned_codes: set[str],
    minted_codes: set[str],
    locks: Mapping[str, SeatLockView],
    viewer_id: Optional[int] = None,
) -> dict:
    rows, cols = grid_dimensions(total_seats)
    counts = {status.value: 0 for status in SeatStatus}
    seats = []
    for seat in generate_seats(section_name, total_seats):
        status = resolve_seat_status(
            seat.code,
            owned_codes=owned_codes,
            minted_codes=minted_codes,
            locks=locks,
            viewer_id=viewer_id,
        )
        counts[status.value] += 1
        seats.append({**attrs.asdict(seat), 'status': status.value})

    return {
        'section': section_name,
        'rows': rows,
        'columns': cols,
        'total': total_seats,
        'seats': seats,
        'counts': counts,
    }


def availability_summary(concert: ConcertEntity) -> dict:
    sections = []
    for section in concert.sections:
        available = section.available_seats or 0
        percentage = (
            _round_half_up(available / section.total_seats * 100) if section.total_seats else 0
        )
        sections.append(
            {
                'name': section.name,
                'price': section.price,
                'total': section.total_seats,
                'available': available,
                'percentage': percentage,
            }
        )
    return {
        'sections': sections,
        'total': concert.total_seats,
        'available': concert.available_seats,
    }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
