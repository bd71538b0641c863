"""Profile store interface for enrolled identities."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ...entities.face import Embedding
from ...entities.profile import IdentityProfile
from ...value_objects.scanning import ProfileSnapshot


class ProfileStore(ABC):
    """Interface for persisting enrolled people and the scan selection.

    Every mutation of the profile list resynchronizes the selection before it
    returns, so the selection never references a missing profile.
    """

    @abstractmethod
    async def list(self) -> List[IdentityProfile]:
        """Return copies of all profiles in enrollment order."""
        pass

    @abstractmethod
    async def get(self, profile_id: str) -> IdentityProfile:
        """
        Return a copy of one profile.

        Raises:
            ProfileNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def snapshot(self) -> ProfileSnapshot:
        """Return a consistent, detached copy of profiles and selection."""
        pass

    @abstractmethod
    async def create(self, name: str) -> IdentityProfile:
        """Enroll a new person with no samples."""
        pass

    @abstractmethod
    async def add_sample(self, profile_id: str, embedding: Embedding) -> IdentityProfile:
        """
        Append a descriptor to a profile.

        Raises:
            ProfileNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def remove_sample(self, profile_id: str, index: int) -> IdentityProfile:
        """
        Remove one descriptor by position.

        Raises:
            ProfileNotFoundError: If the id or the sample index is unknown
        """
        pass

    @abstractmethod
    async def clear_samples(self, profile_id: str) -> IdentityProfile:
        """Drop every descriptor of a profile, keeping the profile."""
        pass

    @abstractmethod
    async def delete(self, profile_id: str) -> None:
        """
        Delete a profile.

        Raises:
            ProfileNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Delete every profile and the whole selection."""
        pass

    @abstractmethod
    async def replace_all(
        self,
        profiles: Sequence[IdentityProfile],
        selection: Optional[Dict[str, bool]] = None,
    ) -> None:
        """Replace the profile list, e.g. on import.

        Flags in ``selection`` override the current ones; ids it does not
        mention keep their flag or start selected.
        """
        pass

    @abstractmethod
    async def selection(self) -> Dict[str, bool]:
        """Return a copy of the selection set."""
        pass

    @abstractmethod
    async def set_selected(self, profile_id: str, selected: bool) -> Dict[str, bool]:
        """
        Include or exclude one profile from scans.

        Raises:
            ProfileNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def set_all_selected(self, selected: bool) -> Dict[str, bool]:
        """Include or exclude every profile."""
        pass
