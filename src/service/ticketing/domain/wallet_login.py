import re
from typing import Optional


LOGIN_MESSAGE_PREFIX = 'Sign this message to authenticate with Concert NFT Tickets: '
_NONCE_PATTERN = re.compile(rf'^{re.escape(LOGIN_MESSAGE_PREFIX)}(\d{{1,6}})$')


def build_login_message(nonce: int) -> str:
    return f'{LOGIN_MESSAGE_PREFIX}{nonce}'


def extract_nonce(message: str) -> Optional[int]:
    match = _NONCE_PATTERN.match(message.strip())
    return int(match.group(1)) if match else None
