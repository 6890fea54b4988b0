"""LocalState adapters: JSON files on disk, or a plain dictionary."""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from cityhealth.domain.shared.port.local_state import LocalState

logger = logging.getLogger(__name__)


class JsonFileLocalState(LocalState):
    """Stores each key as ``<state_dir>/<key>.json``.

    Unreadable files are treated as missing (and logged) so a corrupt entry
    never breaks the session.
    """

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir.expanduser()
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe_key = Path(key).name
        if not safe_key or safe_key != key:
            raise ValueError(f"Invalid state key: {key}")
        return self.state_dir / f"{safe_key}.json"

    def read(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable state file %s", path, exc_info=True)
            return None

    def write(self, key: str, value: Any) -> None:
        path = self._path(key)
        # Atomic write: write to temp file then rename
        fd, tmp_name = tempfile.mkstemp(dir=self.state_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class InMemoryLocalState(LocalState):
    """Dictionary-backed state, for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(initial or {})

    def read(self, key: str) -> Any | None:
        return copy.deepcopy(self._values.get(key))

    def write(self, key: str, value: Any) -> None:
        # Round-trip through JSON so only serializable state is accepted
        self._values[key] = json.loads(json.dumps(value))

    def remove(self, key: str) -> None:
        self._values.pop(key, None)
