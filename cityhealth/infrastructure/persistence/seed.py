"""Demo provider records for local runs without a configured database."""

import logging
from typing import Any

from cityhealth.domain.provider.model.record import Address, ProviderCategory, ProviderRecord
from cityhealth.domain.shared.model.value import ProviderId
from cityhealth.infrastructure.persistence.repository.provider import SqlProviderStore

logger = logging.getLogger(__name__)


def _record(
    id: str,
    name: str,
    type: ProviderCategory,
    city: str,
    rating: float,
    **extra: Any,
) -> dict[str, Any]:
    return ProviderRecord(
        id=ProviderId(id),
        name=name,
        type=type,
        city=city,
        address=Address(city=city, street=extra.pop("street", None)),
        rating=rating,
        verified=extra.pop("verified", True),
        **extra,
    ).to_document()


DEMO_PROVIDERS: list[dict[str, Any]] = [
    _record(
        "chu-sba",
        "CHU Abdelkader Hassani",
        ProviderCategory.HOSPITAL,
        "Sidi Bel Abbès",
        4.6,
        name_fr="CHU Abdelkader Hassani",
        name_ar="المستشفى الجامعي عبد القادر حساني",
        specialty="General hospital",
        available_24_7=True,
        accessibility=True,
        street="Boulevard de l'ALN",
    ),
    _record(
        "clinique-el-amel",
        "Clinique El Amel",
        ProviderCategory.CLINIC,
        "Sidi Bel Abbès",
        4.4,
        name_fr="Clinique El Amel",
        name_ar="عيادة الأمل",
        specialty="Maternity",
        accessibility=True,
    ),
    _record(
        "dr-benali",
        "Dr. Karim Benali",
        ProviderCategory.DOCTOR,
        "Sidi Bel Abbès",
        4.8,
        specialty="Cardiology",
        specialty_fr="Cardiologie",
        specialty_ar="أمراض القلب",
        home_visits=True,
    ),
    _record(
        "dr-haddad",
        "Dr. Samira Haddad",
        ProviderCategory.DOCTOR,
        "Oran",
        4.5,
        specialty="Pediatrics",
        specialty_fr="Pédiatrie",
        specialty_ar="طب الأطفال",
        home_visits=True,
        accessibility=True,
    ),
    _record(
        "dr-mansouri",
        "Dr. Yacine Mansouri",
        ProviderCategory.DOCTOR,
        "Oran",
        4.1,
        specialty="Dermatology",
        specialty_fr="Dermatologie",
    ),
    _record(
        "pharmacie-centrale",
        "Pharmacie Centrale",
        ProviderCategory.PHARMACY,
        "Sidi Bel Abbès",
        4.3,
        name_ar="الصيدلية المركزية",
        available_24_7=True,
    ),
    _record(
        "pharmacie-ennour",
        "Pharmacie En-Nour",
        ProviderCategory.PHARMACY,
        "Oran",
        3.9,
        name_ar="صيدلية النور",
    ),
    _record(
        "labo-pasteur",
        "Laboratoire Pasteur",
        ProviderCategory.LAB,
        "Sidi Bel Abbès",
        4.2,
        specialty="Medical analysis",
        specialty_fr="Analyses médicales",
    ),
    _record(
        "ehu-oran",
        "EHU 1er Novembre",
        ProviderCategory.HOSPITAL,
        "Oran",
        4.0,
        available_24_7=True,
        accessibility=True,
    ),
    _record(
        "clinique-es-salam",
        "Clinique Es-Salam",
        ProviderCategory.CLINIC,
        "Tlemcen",
        3.8,
        name_ar="عيادة السلام",
        specialty="Ophthalmology",
    ),
    _record(
        "dr-unverified",
        "Dr. Pending Review",
        ProviderCategory.DOCTOR,
        "Tlemcen",
        5.0,
        verified=False,
    ),
]


async def seed_providers(store: SqlProviderStore, documents: list[dict[str, Any]] | None = None) -> int:
    """Insert or refresh the given documents (the demo set by default). Idempotent."""
    documents = DEMO_PROVIDERS if documents is None else documents
    for document in documents:
        await store.save(document)
    logger.info("Seeded %d providers", len(documents))
    return len(documents)
