import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from scorekid.config import MATCHES_FILE
from scorekid.models import Match

logger = logging.getLogger(__name__)


class MatchStore(Protocol):
    """Persistence port. The scoring core never touches storage itself."""

    def save(self, match: Match) -> None:
        ...

    def load_for_profile(self, profile_id: str) -> List[Match]:
        ...


def _newest_first(matches: List[Match]) -> List[Match]:
    return sorted(matches, key=lambda m: m.date, reverse=True)


class InMemoryMatchStore:

    def __init__(self):
        self._matches: List[Match] = []

    def save(self, match: Match) -> None:
        self._matches.append(match)

    def load_for_profile(self, profile_id: str) -> List[Match]:
        return _newest_first([m for m in self._matches if m.profile_id == profile_id])


class JsonMatchStore:
    """
    All matches in one JSON list file, last write wins.

    An unreadable or corrupt file reads as an empty history rather than
    an error; broken entries are skipped.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else MATCHES_FILE

    def save(self, match: Match) -> None:
        records = self._read_records()
        records.append(match.to_dict())

        self._write_records(records)

        logger.info("Saved match %s for profile %s", match.id, match.profile_id)

    def load_for_profile(self, profile_id: str) -> List[Match]:
        matches: List[Match] = []
        for i, record in enumerate(self._read_records()):
            if record.get("profile_id") != profile_id:
                continue
            try:
                matches.append(Match.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable match record %d in %s: %s", i, self.path, e)
        return _newest_first(matches)

    def _write_records(self, records: List[Dict[str, Any]]) -> None:
        # The history file is always either the old list or the new one, never partial
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _read_records(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not read match history %s: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.error("Match history %s is not a list, ignoring it", self.path)
            return []

        return [r for r in data if isinstance(r, dict)]
