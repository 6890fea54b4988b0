"""Client-side free-text filtering and relevance ranking of provider documents."""

from typing import Any

NAME_WEIGHT = 10.0
SPECIALTY_WEIGHT = 5.0
TYPE_WEIGHT = 3.0
CITY_WEIGHT = 2.0
VERIFIED_BOOST = 1.0
RATING_FACTOR = 0.5

_NAME_FIELDS = ("name", "name_ar", "name_fr")
_SPECIALTY_FIELDS = ("specialty", "specialty_ar", "specialty_fr")


def terms_of(query: str) -> list[str]:
    return query.lower().split()


def _text(document: dict[str, Any], name: str) -> str:
    value = document.get(name)
    return value.lower() if isinstance(value, str) else ""


def _address(document: dict[str, Any], name: str) -> str:
    address = document.get("address")
    if not isinstance(address, dict):
        return ""
    value = address.get(name)
    return value.lower() if isinstance(value, str) else ""


def searchable_text(document: dict[str, Any]) -> str:
    parts = [_text(document, f) for f in (*_NAME_FIELDS, *_SPECIALTY_FIELDS)]
    parts += [_address(document, "street"), _address(document, "city"), _text(document, "type")]
    return " ".join(parts)


def matches(document: dict[str, Any], terms: list[str]) -> bool:
    """True when every term appears somewhere in the document's searchable text."""
    text = searchable_text(document)
    return all(term in text for term in terms)


def relevance(document: dict[str, Any], terms: list[str]) -> float:
    score = 0.0
    for term in terms:
        score += NAME_WEIGHT * sum(term in _text(document, f) for f in _NAME_FIELDS)
        score += SPECIALTY_WEIGHT * sum(term in _text(document, f) for f in _SPECIALTY_FIELDS)
        if term in _text(document, "type"):
            score += TYPE_WEIGHT
        if term in _address(document, "city"):
            score += CITY_WEIGHT
    if document.get("verified"):
        score += VERIFIED_BOOST
    score += RATING_FACTOR * float(document.get("rating") or 0)
    return score


def filter_and_rank(documents: list[dict[str, Any]], query: str) -> list[dict[str, Any]]:
    """Keep documents matching every term, most relevant first.

    The sort is stable, so equally relevant documents keep backend order.
    """
    terms = terms_of(query)
    if not terms:
        return documents
    kept = [doc for doc in documents if matches(doc, terms)]
    return sorted(kept, key=lambda doc: relevance(doc, terms), reverse=True)
