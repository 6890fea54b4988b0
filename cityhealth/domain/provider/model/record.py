"""Provider records as stored by the managed database."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cityhealth.domain.shared.model.value import ProviderId


class ProviderCategory(StrEnum):
    CLINIC = "clinic"
    HOSPITAL = "hospital"
    DOCTOR = "doctor"
    PHARMACY = "pharmacy"
    LAB = "lab"


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None


class ProviderRecord(BaseModel):
    """A healthcare provider.

    The backend owns the lifecycle (creation, verification, claiming); the
    client only reads records and bumps the view counter. Unknown fields are
    kept so projections and relevance scoring see everything the backend sent.
    """

    model_config = ConfigDict(extra="allow")

    id: ProviderId
    name: str = ""
    name_ar: str | None = None
    name_fr: str | None = None
    specialty: str | None = None
    specialty_ar: str | None = None
    specialty_fr: str | None = None
    type: ProviderCategory
    city: str | None = None
    address: Address = Field(default_factory=Address)
    phone: str | None = None
    verified: bool = False
    claimed: bool = False
    rating: float = 0.0
    accessibility: bool = False
    home_visits: bool = False
    available_24_7: bool = False
    view_count: int = 0
    image_url: str | None = None

    def localized_name(self, language: str) -> str:
        """Display name in the given language, falling back to the default name."""
        localized = {"ar": self.name_ar, "fr": self.name_fr}.get(language)
        return localized or self.name

    def to_document(self) -> dict[str, Any]:
        """Flat document form, as returned by the backend (enums as strings)."""
        return self.model_dump(mode="json")


def project(document: dict[str, Any], fields: list[str] | None) -> dict[str, Any]:
    """Keep only the requested fields of a document; identity is always kept.

    Fields absent from the document are skipped rather than filled with None.
    """
    if fields is None:
        return dict(document)
    projected: dict[str, Any] = {"id": document["id"]}
    for name in fields:
        if name in document:
            projected[name] = document[name]
    return projected
