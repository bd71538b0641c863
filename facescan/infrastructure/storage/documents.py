"""Versioned JSON documents for exporting and importing enrolled people."""
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel, Field, ValidationError

from facescan.core.exceptions import ProfileImportError
from facescan.domain.entities.profile import IdentityProfile

DOCUMENT_VERSION = 2
SUPPORTED_VERSIONS = (1, 2)


class PeopleDocument(BaseModel):
    """Exported people list, e.g. ``{"version": 2, "people": [...]}``."""
    version: int = Field(DOCUMENT_VERSION, description="Document format version")
    people: List[IdentityProfile] = Field(..., description="Enrolled people with samples")
    selection: Dict[str, bool] = Field(default_factory=dict, description="Scan selection flags")


def export_people(profiles: Sequence[IdentityProfile], selection: Dict[str, bool] = None) -> Dict[str, Any]:
    """Build the JSON-ready export document."""
    document = PeopleDocument(people=list(profiles), selection=dict(selection or {}))
    return document.model_dump(mode="json")


def parse_people(data: Any) -> PeopleDocument:
    """Validate an imported document.

    Version 1 documents carry the same people layout and no selection.

    Raises:
        ProfileImportError: If the document is not a people export or is malformed
    """
    if not isinstance(data, dict) or not isinstance(data.get("people"), list):
        raise ProfileImportError("Invalid format: expected an object with a 'people' list")

    version = data.get("version", 1)
    if version not in SUPPORTED_VERSIONS:
        raise ProfileImportError(
            f"Unsupported document version: {version}",
            details={"supported": list(SUPPORTED_VERSIONS)}
        )

    try:
        document = PeopleDocument.model_validate({**data, "version": version})
    except (ValidationError, ValueError) as e:
        raise ProfileImportError(f"Invalid people document: {e}") from e

    ids = [profile.id for profile in document.people]
    if len(ids) != len(set(ids)):
        raise ProfileImportError("Invalid people document: duplicate profile ids")
    return document
