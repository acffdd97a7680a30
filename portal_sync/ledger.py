"""
Ledger of source pages that were already uploaded to the portal.

Persisted as a JSON array (uploaded.json) in insertion order. Membership is
checked as a set; the file is always rewritten in full on record().

No file locking: two processes can both pass contains() for the same key
before either records it. Single-process use is assumed.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union
from urllib.parse import urlparse

from .errors import LedgerCorruption, StorageError

logger = logging.getLogger(__name__)


def key_for_url(url: str) -> str:
    """Ledger key for a source URL: its trailing path segment.

    https://example.com/Company/acme-corp/ -> "acme-corp"
    """
    parsed = urlparse(url.strip())
    segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]
    return segment or parsed.netloc


def decode_entries(raw: str) -> List[str]:
    """Decode the persisted ledger, raising LedgerCorruption on anything but a list of strings."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LedgerCorruption(f"invalid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise LedgerCorruption(f"expected a JSON array of strings, got {type(data).__name__}")
    return data


class Ledger:
    """Append-only, ordered set of processed source keys."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._entries: List[str] = []

    def load(self) -> "Ledger":
        """Load keys from disk. A missing or corrupt file yields an empty ledger."""
        self._entries = []
        if not self.path.exists():
            logger.info(f"📒 No ledger at {self.path}, starting empty")
            return self

        try:
            self._entries = decode_entries(self.path.read_text(encoding="utf-8"))
        except (LedgerCorruption, OSError, UnicodeDecodeError) as e:
            logger.warning(f"⚠️  Ignoring unreadable ledger {self.path}: {e}")
            self._entries = []
            return self

        logger.info(f"📒 Loaded {len(self._entries)} uploaded keys from {self.path}")
        return self

    def contains(self, key: str) -> bool:
        return key in self._entries

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def record(self, key: str) -> None:
        """Append key and rewrite the ledger file."""
        if key in self._entries:
            logger.info(f"📒 {key} already recorded")
            return
        self.persist(self._entries + [key])
        self._entries.append(key)
        logger.info(f"📒 Recorded {key} (total: {len(self._entries)})")

    def persist(self, entries: Optional[List[str]] = None) -> None:
        """Rewrite the ledger file with entries (defaults to the in-memory sequence)."""
        entries = self._entries if entries is None else entries
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to save ledger to {self.path}: {e}") from e
