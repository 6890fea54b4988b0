"""Translator - dictionary lookup with fallback language and interpolation."""

import logging
import re
from dataclasses import field
from typing import Any, Literal

from cityhealth.config import I18nConfig
from cityhealth.domain.i18n.event.language_changed import LanguageChanged
from cityhealth.domain.i18n.port.catalog_loader import CatalogLoader
from cityhealth.domain.shared.error import CityHealthError
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.shared.port.local_state import LANGUAGE_KEY, LocalState
from cityhealth.domain.shared.service import Service

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def lookup(catalog: dict[str, Any], key: str) -> Any | None:
    """Walk a dotted key (``errors.search``) through nested dictionaries."""
    node: Any = catalog
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def interpolate(text: str, params: dict[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders; unknown placeholders are left as is."""
    return _PLACEHOLDER.sub(
        lambda m: str(params[m.group(1)]) if m.group(1) in params else m.group(0), text
    )


def parse_accept_language(header: str) -> list[str]:
    """Primary language subtags from an Accept-Language header, by preference."""
    ranked: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        if not tag or tag == "*":
            continue
        quality = 1.0
        for param in params.split(";"):
            name, _, value = param.strip().partition("=")
            if name == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality > 0:
            ranked.append((-quality, position, tag.split("-")[0].lower()))
    return [tag for _, _, tag in sorted(ranked)]


class Translator(Service):
    """Holds loaded dictionaries and the active language.

    Lookups try the requested (or active) language, then the fallback
    language, then return the key itself.
    """

    loader: CatalogLoader
    state: LocalState
    bus: EventBus
    config: I18nConfig
    language: str = ""
    _catalogs: dict[str, dict[str, Any]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.language:
            self.language = self.config.fallback

    def detect(self, accept_language: str | None) -> str:
        for tag in parse_accept_language(accept_language or ""):
            if tag in self.config.supported:
                return tag
        return self.config.fallback

    def resolve_language(self, language: str | None) -> str:
        if language and language in self.config.supported:
            return language
        if language:
            logger.warning("Language %s not supported, using %s", language, self.config.fallback)
        return self.config.fallback

    async def initialize(self, accept_language: str | None = None) -> str:
        """Pick the saved language, else the best match for the client, and load it."""
        saved = self.state.read(LANGUAGE_KEY)
        language = saved if isinstance(saved, str) and saved else self.detect(accept_language)
        language = self.resolve_language(language)
        await self.ensure_loaded(self.config.fallback)
        await self.ensure_loaded(language)
        self.language = language
        return language

    async def ensure_loaded(self, language: str) -> bool:
        """Load a dictionary once. Returns False (and logs) if it cannot be loaded."""
        if language in self._catalogs:
            return True
        try:
            self._catalogs[language] = await self.loader.load(language)
        except CityHealthError as e:
            logger.error("Failed to load translations for %s: %s", language, e.message)
            return False
        logger.debug("Loaded translations for %s", language)
        return True

    async def set_language(self, language: str) -> str:
        language = self.resolve_language(language)
        if not await self.ensure_loaded(language):
            language = self.config.fallback
            await self.ensure_loaded(language)
        self.language = language
        self.state.write(LANGUAGE_KEY, language)
        await self.bus.publish(LanguageChanged(language=language, direction=self.direction(language)))
        return language

    def is_rtl(self, language: str | None = None) -> bool:
        return (language or self.language) in self.config.rtl

    def direction(self, language: str | None = None) -> Literal["ltr", "rtl"]:
        return "rtl" if self.is_rtl(language) else "ltr"

    def has(self, key: str, language: str | None = None) -> bool:
        return lookup(self._catalogs.get(language or self.language, {}), key) is not None

    def t(self, key: str, language: str | None = None, **params: Any) -> str:
        language = language or self.language
        value = lookup(self._catalogs.get(language, {}), key)
        if value is None and language != self.config.fallback:
            value = lookup(self._catalogs.get(self.config.fallback, {}), key)
        if value is None:
            logger.debug("Translation not found for key: %s", key)
            return key
        if not isinstance(value, str):
            return key
        return interpolate(value, params) if params else value

    def catalog(self, language: str) -> dict[str, Any]:
        return self._catalogs.get(language, {})
