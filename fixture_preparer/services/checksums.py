"""sha256 verification of prepared fixtures.

Verification is opt-in and independent from ``prepare``: a file that fails
verification is reported, never re-created.
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Dict, Iterable, List, Optional

from ..errors import ChecksumMismatch

logger = logging.getLogger(__name__)

OK = 'ok'
MISSING = 'missing'
MISMATCH = 'mismatch'
UNCHECKED = 'unchecked'


def sha256_file(path: str) -> str:
    h = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def verify_fixtures(working_dir: str, names: Iterable[str],
                    checksums: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Return a status per fixture name.

    ``missing`` when the file does not exist, ``unchecked`` when no digest is
    configured for it, otherwise ``ok`` or ``mismatch``.
    """
    checksums = checksums or {}
    statuses: Dict[str, str] = {}
    for name in names:
        path = os.path.join(working_dir, name)
        if not os.path.exists(path):
            statuses[name] = MISSING
            continue
        expected = checksums.get(name)
        if not expected:
            statuses[name] = UNCHECKED
            continue
        actual = sha256_file(path)
        if actual == str(expected).strip().lower():
            statuses[name] = OK
        else:
            logger.warning("Hash mismatch for %s: expected %s, got %s", name, expected, actual)
            statuses[name] = MISMATCH
    return statuses


def ensure_checksums(statuses: Dict[str, str]) -> None:
    """Raise ``ChecksumMismatch`` if any fixture has a mismatching digest."""
    mismatched: List[str] = [name for name, status in statuses.items() if status == MISMATCH]
    if mismatched:
        raise ChecksumMismatch(mismatched)
