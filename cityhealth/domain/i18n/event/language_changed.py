from typing import Literal

from cityhealth.domain.shared.event import Event


class LanguageChanged(Event):
    """Emitted when the active language switches (after its dictionary is loaded)."""

    language: str
    direction: Literal["ltr", "rtl"]
