"""
Report watermark helpers

The watermark is a plaintext audit tag embedded in rendered reports so a
printed document can be correlated with its submission afterwards. It is not
a signature: anyone can read or forge the string, so it gives no tamper
evidence.
"""
import hashlib
import re
from typing import Dict, Optional, Union

DEFAULT_VERSION = 'VV2.0'

WATERMARK_PATTERN = re.compile(r'^[0-9a-f]{8}\|.+\|[A-Z0-9\-]+\|VV[0-9.]+$')


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode('utf-8')).hexdigest()


def compute_pin_hash(pin: str) -> str:
    """Stored per-user PIN hash (full sha256 hex)"""
    return sha256_hex(pin)


def compute_watermark_hash(user_id: Union[int, str], pin: str, timestamp_millis: int) -> str:
    """sha256("<userId>-<pin>-<millis>") truncated to 16 hex characters"""
    return sha256_hex(f"{user_id}-{pin}-{timestamp_millis}")[:16]


def build_watermark(user_hash: str, timestamp: str, submission_id: str, version: str = DEFAULT_VERSION) -> str:
    """hash|timestamp|submissionId|version"""
    return f"{user_hash}|{timestamp}|{submission_id}|{version}"


def parse_watermark(text: str) -> Optional[Dict[str, str]]:
    """Split a watermark back into its parts, or None if it is not one"""
    if not text or not WATERMARK_PATTERN.match(text):
        return None
    user_hash, rest = text.split('|', 1)
    timestamp, submission_id, version = rest.rsplit('|', 2)
    return {
        'userHash': user_hash,
        'timestamp': timestamp,
        'submissionId': submission_id,
        'version': version,
    }


def find_watermark(document: str) -> Optional[str]:
    """Locate the watermark div contents in a rendered HTML report"""
    match = re.search(r'<div class="watermark">([^<]*)</div>', document or '')
    if not match:
        return None
    candidate = match.group(1).strip()
    return candidate if WATERMARK_PATTERN.match(candidate) else None
