"""
Last-session storage.

Keeps exactly one record on disk: the most recently completed session.
Saving overwrites the previous record. Storage is best effort: a failed
write or read is logged as a warning and never interrupts play.
"""

import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from slingshot_models.session import SessionRecord
from sling.logging import get_data_dir, get_logger

log = get_logger('storage')

LAST_SESSION_FILENAME = 'last_session.json'


def default_store_path() -> Path:
    """Location of the last-session file.

    Honors SLING_STORAGE_PATH, otherwise lives in the user data directory.
    """
    env_path = os.environ.get('SLING_STORAGE_PATH')
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / LAST_SESSION_FILENAME


class SessionStore:
    """
    Single-slot persistent store for sealed session records.

    Args:
        path: JSON file to write (default: default_store_path())

    Example:
        store = SessionStore(tmp_path / "last.json")
        store.save(record)
        assert store.load() == record
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else default_store_path()

    def save(self, record: SessionRecord) -> bool:
        """Persist ``record``, replacing any previous one.

        Returns:
            True if written, False if storage was unavailable
        """
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(record.to_json(), encoding='utf-8')
            tmp_path.replace(self.path)
        except OSError as e:
            log.warning("Could not save last session to %s: %s", self.path, e)
            return False
        log.debug("Saved session %s to %s", record.session_id, self.path)
        return True

    def load(self) -> Optional[SessionRecord]:
        """Load the stored record, or None if absent or unreadable."""
        try:
            text = self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            log.warning("Could not load last session from %s: %s", self.path, e)
            return None

        try:
            return SessionRecord.from_json(text)
        except ValidationError as e:
            log.warning("Ignoring unreadable session record in %s: %s", self.path, e)
            return None

    def clear(self) -> None:
        """Forget the stored record."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning("Could not remove %s: %s", self.path, e)

    def exists(self) -> bool:
        """Check whether a record is stored."""
        return self.path.exists()
