"""Selection set helpers: which enrolled people take part in a scan."""
from typing import Dict, List, Mapping, Sequence

from facescan.domain.entities.profile import IdentityProfile

SelectionSet = Dict[str, bool]


def is_active(profile_id: str, selection: Mapping[str, bool]) -> bool:
    """A profile is active unless explicitly deselected."""
    return selection.get(profile_id) is not False


def active_identities(
    profiles: Sequence[IdentityProfile],
    selection: Mapping[str, bool],
) -> List[IdentityProfile]:
    """Profiles taking part in a scan, in profile order."""
    return [profile for profile in profiles if is_active(profile.id, selection)]


def resync(profiles: Sequence[IdentityProfile], selection: Mapping[str, bool]) -> SelectionSet:
    """New selection with every known profile present and no unknown ids.

    Missing profiles default to selected; existing flags are kept.
    """
    return {profile.id: selection.get(profile.id, True) for profile in profiles}


def pool_sample_count(identities: Sequence[IdentityProfile]) -> int:
    return sum(identity.sample_count for identity in identities)
