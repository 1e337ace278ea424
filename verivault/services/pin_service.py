"""
PIN Service
PIN verification, PIN changes and redemption of verifications by submissions
"""
import logging
import re
from typing import Any, Dict, Optional

from flask import current_app

from verivault.errors import (
    AuthenticationError,
    InvalidPinFormatError,
    MissingFieldError,
    NotFoundError,
)
from verivault.models import User
from verivault.stores import get_stores
from verivault.utils.audit import log_audit
from verivault.utils.timeutil import now_iso, now_millis
from verivault.utils.watermark import compute_watermark_hash

logger = logging.getLogger(__name__)

PIN_RE = re.compile(r'^\d{4}$')


def is_valid_pin(pin: Any) -> bool:
    return isinstance(pin, str) and bool(PIN_RE.match(pin))


def _normalize_pin(pin: Any) -> Optional[str]:
    if pin is None or pin == '':
        return None
    return str(pin)


def find_user(user_id: Any = None, username: Optional[str] = None) -> Optional[User]:
    """Look a user up by id first, then by username"""
    users = get_stores().users
    if user_id not in (None, ''):
        user = users.get(user_id)
        if user:
            return user
    if username:
        return users.first(lambda u: u.username == username)
    return None


def _verification_ttl_ms() -> int:
    return int(current_app.config['PIN_VERIFICATION_TTL']) * 1000


def prune_expired_verifications(issued: Dict[str, Dict[str, Any]], now: int) -> None:
    """Forget issued verifications older than PIN_VERIFICATION_TTL"""
    cutoff = now - _verification_ttl_ms()
    for key in [k for k, v in issued.items() if v.get('issuedAt', 0) <= cutoff]:
        del issued[key]


def verify_pin(user_id: Any, pin: Any) -> Dict[str, Any]:
    """
    Check a user's PIN and issue verification data

    Returns:
        dict: userHash, timestamp and verificationHash

    Raises:
        MissingFieldError: userId or pin missing
        NotFoundError: unknown user
        AuthenticationError: wrong PIN
    """
    pin = _normalize_pin(pin)
    if user_id in (None, '') or pin is None:
        raise MissingFieldError()

    user = find_user(user_id=user_id)
    if not user:
        raise NotFoundError('User not found')

    if not user.check_pin(pin):
        logger.warning(f"Invalid PIN attempt for user {user.id}")
        raise AuthenticationError('Invalid PIN')

    issued_at = now_millis()
    verification = {
        'userHash': user.pin_hash[:8],
        'timestamp': now_iso(),
        'verificationHash': compute_watermark_hash(user.id, pin, issued_at),
    }
    issued = get_stores().issued_verifications
    prune_expired_verifications(issued, issued_at)
    issued[verification['verificationHash']] = {
        'userId': user.id,
        'username': user.username,
        'issuedAt': issued_at,
        **verification,
    }
    logger.info(f"PIN verified for user {user.username}")
    return verification


def update_pin(user_id: Any, old_pin: Any, new_pin: Any) -> User:
    """
    Replace a user's PIN after checking the current one

    Raises:
        MissingFieldError: any field missing
        InvalidPinFormatError: new PIN is not exactly 4 digits
        NotFoundError: unknown user
        AuthenticationError: current PIN is wrong
    """
    old_pin = _normalize_pin(old_pin)
    new_pin = _normalize_pin(new_pin)
    if user_id in (None, '') or old_pin is None or new_pin is None:
        raise MissingFieldError()

    if not is_valid_pin(new_pin):
        raise InvalidPinFormatError()

    user = find_user(user_id=user_id)
    if not user:
        raise NotFoundError('User not found')

    if not user.check_pin(old_pin):
        raise AuthenticationError('Current PIN is incorrect')

    user.set_pin(new_pin)
    log_audit('user', 'pin_update', user_id=user.id, entity_id=user.id)
    logger.info(f"PIN updated for user {user.username}")
    return user


def redeem(verification_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn submitted verification data into a proven verification

    A submission either carries the PIN itself (checked against the user
    named by userId or username) or a verificationHash issued earlier by
    verify_pin. Issued hashes are single use and expire after
    PIN_VERIFICATION_TTL seconds. The result always has pinVerified set.

    Raises:
        MissingFieldError: no PIN and no verificationHash
        InvalidPinFormatError: a PIN that is not exactly 4 digits
        NotFoundError: PIN given for an unknown user
        AuthenticationError: wrong PIN or an unknown, used or expired verificationHash
    """
    if not isinstance(verification_data, dict):
        raise MissingFieldError()

    pin = _normalize_pin(verification_data.get('pin'))
    if pin is not None:
        if not is_valid_pin(pin):
            raise InvalidPinFormatError()
        user = find_user(verification_data.get('userId'), verification_data.get('username'))
        if not user:
            raise NotFoundError('User not found')
        if not user.check_pin(pin):
            raise AuthenticationError('Invalid PIN')
        return {
            'username': user.username,
            'userId': user.id,
            'userHash': user.pin_hash[:8],
            'timestamp': now_iso(),
            'verificationHash': compute_watermark_hash(user.id, pin, now_millis()),
            'pinVerified': True,
        }

    verification_hash = verification_data.get('verificationHash')
    if not verification_hash:
        raise MissingFieldError()

    # Each issued hash backs exactly one submission
    issued = get_stores().issued_verifications.pop(str(verification_hash), None)
    if not issued or issued.get('issuedAt', 0) <= now_millis() - _verification_ttl_ms():
        raise AuthenticationError('PIN verification required')

    return {
        'username': issued['username'],
        'userId': issued['userId'],
        'userHash': issued['userHash'],
        'timestamp': issued['timestamp'],
        'verificationHash': verification_hash,
        'pinVerified': True,
    }
