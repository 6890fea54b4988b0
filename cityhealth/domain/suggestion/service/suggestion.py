"""SuggestionService - merges provider suggestions from independent strategies."""

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import field
from typing import Any

import logfire

from cityhealth.config import SuggestionsConfig
from cityhealth.domain.provider.model.query import verified_providers
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.port.local_state import (
    DISMISSED_SUGGESTIONS_KEY,
    USER_INTERACTIONS_KEY,
    LocalState,
)
from cityhealth.domain.shared.service import Service
from cityhealth.domain.suggestion.model.value import (
    INTEREST_KINDS,
    Interaction,
    InteractionKind,
    Reason,
    SuggestionContext,
    SuggestionItem,
)

logger = logging.getLogger(__name__)

Strategy = Callable[[SuggestionContext], Awaitable[list[dict[str, Any]]]]


class SuggestionService(Service):
    """Suggestion engine.

    Strategies run concurrently and are merged in reason order once all have
    settled or the configured wait expires. A failing or late strategy
    contributes nothing. Dismissed providers never appear.
    """

    store: ProviderStore
    search: SearchService
    state: LocalState
    config: SuggestionsConfig
    rng: random.Random = field(default_factory=random.Random)
    wall_clock: Callable[[], float] = time.time

    def _strategies(self) -> dict[Reason, Strategy]:
        return {
            Reason.HISTORY: self._from_history,
            Reason.POPULAR: self._popular,
            Reason.LOCATION: self._nearby,
            Reason.INTERACTION: self._from_interactions,
            Reason.EMERGENCY: self._emergency,
        }

    async def get_suggestions(self, context: SuggestionContext) -> list[SuggestionItem]:
        with logfire.span("GetSuggestions"):
            candidates = await self._gather(context)
            dismissed = self.dismissed()

            seen: set[str] = set()
            merged: list[SuggestionItem] = []
            for reason in Reason:
                for provider in candidates.get(reason, []):
                    provider_id = str(provider["id"])
                    if provider_id in seen or provider_id in dismissed:
                        continue
                    seen.add(provider_id)
                    merged.append(
                        SuggestionItem(
                            provider=provider,
                            reason=reason,
                            score=float(provider.get("rating") or 0),
                        )
                    )

            self.rng.shuffle(merged)
            around_the_clock = {str(p["id"]) for p in candidates.get(Reason.EMERGENCY, [])}
            return self._truncate(merged, around_the_clock)

    async def _gather(self, context: SuggestionContext) -> dict[Reason, list[dict[str, Any]]]:
        tasks = {
            reason: asyncio.create_task(strategy(context), name=f"suggest-{reason.value}")
            for reason, strategy in self._strategies().items()
        }
        _, pending = await asyncio.wait(
            tasks.values(), timeout=self.config.strategy_timeout_seconds
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        results: dict[Reason, list[dict[str, Any]]] = {}
        for reason, task in tasks.items():
            if task in pending:
                logger.warning(
                    "Suggestion strategy %s timed out after %.1fs",
                    reason.value,
                    self.config.strategy_timeout_seconds,
                )
                continue
            error = task.exception()
            if error is not None:
                logger.warning(
                    "Suggestion strategy %s failed: %s", reason.value, error, exc_info=error
                )
                continue
            results[reason] = task.result()
        return results

    def _truncate(
        self, items: list[SuggestionItem], protected: set[str]
    ) -> list[SuggestionItem]:
        """Cut to the limit, dropping items outside `protected` first.

        Emergency providers stay protected even when dedup tagged them with
        an earlier reason.
        """
        limit = self.config.limit
        if len(items) <= limit:
            return items
        protected = protected | {i.provider_id for i in items if i.reason is Reason.EMERGENCY}
        emergency = [i for i in items if i.provider_id in protected]
        others = [i for i in items if i.provider_id not in protected]
        kept = {i.provider_id for i in emergency[:limit]}
        kept |= {i.provider_id for i in others[: max(limit - len(kept), 0)]}
        return [i for i in items if i.provider_id in kept]

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _top_of_type(self, service_type: str, limit: int) -> list[dict[str, Any]]:
        query = verified_providers().where("type", service_type).order("rating").take(limit)
        return (await self.store.query(query)).documents

    async def _from_history(self, context: SuggestionContext) -> list[dict[str, Any]]:
        types: list[str] = []
        for entry in self.search.history():
            if entry.service_type and entry.service_type not in types:
                types.append(entry.service_type)
            if len(types) >= self.config.history_types:
                break
        providers: list[dict[str, Any]] = []
        for service_type in types:
            providers += await self._top_of_type(service_type, self.config.per_strategy)
        return providers

    async def _popular(self, context: SuggestionContext) -> list[dict[str, Any]]:
        return await self.search.popular(self.config.popular_limit)

    async def _nearby(self, context: SuggestionContext) -> list[dict[str, Any]]:
        if not context.location:
            return []
        query = verified_providers()
        if context.service_type is not None:
            query = query.where("type", context.service_type.value)
        query = query.where("city", context.location).order("rating").take(self.config.per_strategy)
        return (await self.store.query(query)).documents

    async def _from_interactions(self, context: SuggestionContext) -> list[dict[str, Any]]:
        recent = [i for i in self.interactions() if i.kind in INTEREST_KINDS]
        if not recent:
            return []
        excluded = {i.id for i in recent}

        types: list[str] = []
        for interaction in recent:
            service_type = interaction.type
            if service_type is None:
                document = await self.store.get(interaction.id)
                service_type = document.get("type") if document else None
            if service_type and service_type not in types:
                types.append(service_type)
            if len(types) >= self.config.history_types:
                break

        providers: list[dict[str, Any]] = []
        for service_type in types:
            # Over-fetch so excluding the interacted items still fills the quota
            fetched = await self._top_of_type(service_type, self.config.per_strategy + len(excluded))
            providers += [p for p in fetched if str(p["id"]) not in excluded][
                : self.config.per_strategy
            ]
        return providers

    async def _emergency(self, context: SuggestionContext) -> list[dict[str, Any]]:
        return await self.search.emergency(self.config.emergency_limit)

    # ------------------------------------------------------------------
    # Dismissed set and interaction log
    # ------------------------------------------------------------------

    def dismissed(self) -> set[str]:
        return {str(e["id"]) for e in self.state.read_list(DISMISSED_SUGGESTIONS_KEY) if "id" in e}

    def dismiss(self, provider_id: str) -> bool:
        """Hide a provider from future suggestions. Returns False if already hidden."""
        entries = self.state.read_list(DISMISSED_SUGGESTIONS_KEY)
        if any(e.get("id") == provider_id for e in entries):
            return False
        entries.insert(0, {"id": provider_id, "timestamp": self.wall_clock()})
        self.state.write(DISMISSED_SUGGESTIONS_KEY, entries)
        logger.debug("Dismissed suggestion %s", provider_id)
        return True

    def clear_dismissed(self) -> None:
        self.state.remove(DISMISSED_SUGGESTIONS_KEY)

    def interactions(self) -> list[Interaction]:
        entries = []
        for raw in self.state.read_list(USER_INTERACTIONS_KEY):
            try:
                entries.append(Interaction.model_validate(raw))
            except ValueError:
                logger.warning("Skipping malformed interaction entry: %r", raw)
        return entries

    def track_interaction(
        self,
        provider_id: str,
        kind: InteractionKind,
        data: dict[str, Any] | None = None,
    ) -> Interaction:
        data = data or {}
        interaction = Interaction(
            id=provider_id,
            kind=kind,
            type=data.get("type"),
            timestamp=self.wall_clock(),
            data=data,
        )
        entries = self.state.read_list(USER_INTERACTIONS_KEY)
        entries.insert(0, interaction.model_dump(mode="json"))
        self.state.write(USER_INTERACTIONS_KEY, entries[: self.config.interaction_limit])
        return interaction
