"""In-memory implementation of the profile store."""
import asyncio
from typing import Dict, List, Optional, Sequence

from facescan.core.exceptions import EmbeddingMismatchError, ProfileNotFoundError
from facescan.core.logging import get_logger
from facescan.domain.entities.face import Embedding, as_embedding
from facescan.domain.entities.profile import IdentityProfile
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.domain.value_objects.scanning import ProfileSnapshot
from facescan.services.matching.selection import resync

logger = get_logger(__name__)


def _detached(profile: IdentityProfile) -> IdentityProfile:
    # Samples are read-only arrays, so copying the list is enough.
    return profile.model_copy(update={"samples": list(profile.samples)})


class InMemoryProfileStore(ProfileStore):
    """Profile store keeping everything in process memory.

    All reads return detached copies and every operation runs under one lock,
    so a scan snapshot never observes a half-applied mutation. Mutations build
    the next state on new lists and only install it once ``_persist`` returns,
    so a failed write leaves the store as it was.
    """

    def __init__(
        self,
        profiles: Sequence[IdentityProfile] = (),
        selection: Dict[str, bool] = None,
    ) -> None:
        self._lock = asyncio.Lock()
        self._profiles: List[IdentityProfile] = [_detached(p) for p in profiles]
        self._selection: Dict[str, bool] = resync(self._profiles, selection or {})

    async def _persist(self, profiles: List[IdentityProfile], selection: Dict[str, bool]) -> None:
        """Hook for subclasses that write the next state somewhere before it is installed."""

    async def _commit(
        self,
        profiles: List[IdentityProfile],
        selection: Optional[Dict[str, bool]] = None,
    ) -> None:
        selection = resync(profiles, self._selection if selection is None else selection)
        await self._persist(profiles, selection)
        self._profiles = profiles
        self._selection = selection

    def _find(self, profile_id: str) -> IdentityProfile:
        for profile in self._profiles:
            if profile.id == profile_id:
                return profile
        raise ProfileNotFoundError(
            f"Profile not found: {profile_id}",
            details={"profile_id": profile_id}
        )

    def _with_replaced(self, updated: IdentityProfile) -> List[IdentityProfile]:
        return [updated if p.id == updated.id else p for p in self._profiles]

    def _check_dimension(self, sample: Embedding) -> None:
        for profile in self._profiles:
            if profile.samples:
                expected = profile.samples[0].shape
                if sample.shape != expected:
                    raise EmbeddingMismatchError(
                        "Sample dimensionality differs from enrolled samples",
                        details={"expected_shape": expected, "sample_shape": sample.shape}
                    )
                return

    async def list(self) -> List[IdentityProfile]:
        async with self._lock:
            return [_detached(p) for p in self._profiles]

    async def get(self, profile_id: str) -> IdentityProfile:
        async with self._lock:
            return _detached(self._find(profile_id))

    async def snapshot(self) -> ProfileSnapshot:
        async with self._lock:
            return ProfileSnapshot(
                profiles=tuple(_detached(p) for p in self._profiles),
                selection=dict(self._selection),
            )

    async def create(self, name: str) -> IdentityProfile:
        async with self._lock:
            profile = IdentityProfile(name=name.strip())
            await self._commit([*self._profiles, profile])
            logger.info("Created profile", profile_id=profile.id, name=profile.name)
            return _detached(profile)

    async def add_sample(self, profile_id: str, embedding: Embedding) -> IdentityProfile:
        sample = as_embedding(embedding)
        async with self._lock:
            profile = self._find(profile_id)
            self._check_dimension(sample)
            updated = profile.model_copy(update={"samples": [*profile.samples, sample]})
            await self._commit(self._with_replaced(updated))
            logger.info(
                "Added sample",
                profile_id=profile_id,
                samples_count=updated.sample_count
            )
            return _detached(updated)

    async def remove_sample(self, profile_id: str, index: int) -> IdentityProfile:
        async with self._lock:
            profile = self._find(profile_id)
            if not 0 <= index < profile.sample_count:
                raise ProfileNotFoundError(
                    f"Sample {index} not found for profile {profile_id}",
                    details={"profile_id": profile_id, "index": index}
                )
            samples = [s for i, s in enumerate(profile.samples) if i != index]
            updated = profile.model_copy(update={"samples": samples})
            await self._commit(self._with_replaced(updated))
            logger.info("Removed sample", profile_id=profile_id, index=index)
            return _detached(updated)

    async def clear_samples(self, profile_id: str) -> IdentityProfile:
        async with self._lock:
            updated = self._find(profile_id).model_copy(update={"samples": []})
            await self._commit(self._with_replaced(updated))
            logger.info("Cleared samples", profile_id=profile_id)
            return _detached(updated)

    async def delete(self, profile_id: str) -> None:
        async with self._lock:
            profile = self._find(profile_id)
            await self._commit([p for p in self._profiles if p.id != profile.id])
            logger.info("Deleted profile", profile_id=profile_id)

    async def clear(self) -> None:
        async with self._lock:
            await self._commit([], {})
            logger.info("Cleared all profiles")

    async def replace_all(
        self,
        profiles: Sequence[IdentityProfile],
        selection: Optional[Dict[str, bool]] = None,
    ) -> None:
        async with self._lock:
            await self._commit(
                [_detached(p) for p in profiles],
                {**self._selection, **(selection or {})},
            )
            logger.info("Replaced profiles", profiles_count=len(self._profiles))

    async def selection(self) -> Dict[str, bool]:
        async with self._lock:
            return dict(self._selection)

    async def set_selected(self, profile_id: str, selected: bool) -> Dict[str, bool]:
        async with self._lock:
            self._find(profile_id)
            await self._commit(self._profiles, {**self._selection, profile_id: selected})
            return dict(self._selection)

    async def set_all_selected(self, selected: bool) -> Dict[str, bool]:
        async with self._lock:
            await self._commit(self._profiles, {p.id: selected for p in self._profiles})
            return dict(self._selection)
