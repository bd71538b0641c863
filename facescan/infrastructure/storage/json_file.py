"""JSON file implementation of the profile store."""
import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from facescan.core.exceptions import ProfileImportError, ProfileStoreError
from facescan.core.logging import get_logger
from facescan.domain.entities.profile import IdentityProfile
from facescan.infrastructure.storage.documents import export_people, parse_people
from facescan.infrastructure.storage.memory import InMemoryProfileStore

logger = get_logger(__name__)


class JsonFileProfileStore(InMemoryProfileStore):
    """Profile store persisted as one JSON document.

    The file holds the same versioned document used for export, plus the
    selection. It is rewritten atomically after every mutation.

    Example:
        ```python
        store = JsonFileProfileStore("profiles.json")
        alice = await store.create("Alice")
        await store.add_sample(alice.id, descriptor)
        ```
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Load existing state from ``path`` if the file exists.

        Raises:
            ProfileStoreError: If the file exists but cannot be parsed
        """
        self.path = Path(path)
        profiles = []
        selection = {}
        if self.path.exists():
            try:
                with self.path.open("r", encoding="utf-8") as fh:
                    document = parse_people(json.load(fh))
            except (OSError, json.JSONDecodeError, ProfileImportError) as e:
                logger.error("Failed to load profile store", path=str(self.path), error=str(e))
                raise ProfileStoreError(f"Failed to load profile store: {e}") from e
            profiles = document.people
            selection = document.selection
            logger.info(
                "Loaded profile store",
                path=str(self.path),
                profiles_count=len(profiles)
            )
        super().__init__(profiles, selection)

    async def _persist(self, profiles: List[IdentityProfile], selection: Dict[str, bool]) -> None:
        await asyncio.to_thread(self._write, export_people(profiles, selection))

    def _write(self, payload: Dict[str, Any]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            logger.error("Failed to write profile store", path=str(self.path), error=str(e))
            raise ProfileStoreError(f"Failed to write profile store: {e}") from e
