import secrets
import string
from typing import Awaitable, Callable

from chatflow.config import settings
from chatflow.core.exceptions import ShareTokenExhaustedError
from chatflow.core.logging import get_logger

logger = get_logger("share_token")

ALPHABET = string.ascii_lowercase + string.digits


def generate_token(length: int) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


async def generate_unique_share_token(
    exists: Callable[[str], Awaitable[bool]],
    length: int = settings.SHARE_TOKEN_LENGTH,
    max_attempts: int = settings.SHARE_TOKEN_MAX_ATTEMPTS,
) -> str:
    """
    Draw random tokens until `exists` reports one as free.
    Raises ShareTokenExhaustedError after `max_attempts` collisions.
    """
    for attempt in range(1, max_attempts + 1):
        token = generate_token(length)
        if not await exists(token):
            return token
        logger.warning(f"Share token collision on attempt {attempt}/{max_attempts}")
    raise ShareTokenExhaustedError(f"Could not allocate a unique share token after {max_attempts} attempts")
