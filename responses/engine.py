"""Chat engine: ties together understanding, dispatch and composition.

Entry point for the chat route:
    result = engine.handle(query)

Returns a ChatResult with the Reply and, for logging, the Understanding.
The engine never raises: data-store failures become an apology reply and
set ChatResult.error so the route can pick the status code.
"""

from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from catalog.models import Catalogs
from catalog.store import CatalogStore
from config import Config, get_config
from responses.composer import ResponseComposer
from responses.dispatcher import (
    InfoOutcome,
    NeedMoreSpecificity,
    ProviderOutcome,
    SearchOutcome,
    dispatch,
)
from responses.reply import Reply
from understanding.intents import conversational_intent, understand
from understanding.models import Intent, Understanding


@dataclass
class ChatResult:
    reply: Reply
    understanding: Optional[Understanding] = None
    error: Optional[str] = None

    @property
    def result_count(self) -> int:
        return len(self.reply.results) if self.reply.results is not None else 0


class ChatEngine:
    def __init__(self, store: CatalogStore, cfg: Optional[Config] = None) -> None:
        self._store = store
        self._cfg = cfg or get_config()
        self._composer = ResponseComposer(self._cfg.chat)

    def handle(self, query: Any) -> ChatResult:
        """Answer one chat query. Stateless; catalogs are re-read every call."""
        if not isinstance(query, str) or not query.strip():
            return ChatResult(reply=self._composer.empty_query())

        try:
            canned = conversational_intent(query)
            if canned is not None:
                understanding = Understanding(intent=canned)
                catalogs = None
            else:
                catalogs = Catalogs.load(self._store)
                understanding = understand(query, catalogs)

            logger.info(
                f"Query understood as {understanding.intent.value}: "
                f"{understanding.to_dict()['entities']}"
            )
            reply = self._respond(understanding, catalogs)
        except Exception as e:
            logger.exception(f"Chat query failed: {e}")
            return ChatResult(reply=self._composer.error(), error=str(e))

        return ChatResult(reply=reply, understanding=understanding)

    def _respond(self, understanding: Understanding, catalogs: Optional[Catalogs]) -> Reply:
        intent = understanding.intent
        if intent == Intent.GREETING:
            return self._composer.greeting()
        if intent == Intent.HELP:
            return self._composer.help()
        if intent == Intent.UNKNOWN:
            return self._composer.unknown()

        outcome = dispatch(
            understanding,
            self._store,
            catalogs.organizations if catalogs else [],
            limit=self._cfg.chat.max_results,
        )
        if isinstance(outcome, NeedMoreSpecificity):
            return self._composer.need_more_specificity()
        if isinstance(outcome, SearchOutcome):
            return self._composer.search(outcome)
        if isinstance(outcome, ProviderOutcome):
            return self._composer.provider_details(
                outcome, understanding.entities.information_request
            )
        if isinstance(outcome, InfoOutcome):
            return self._composer.info(outcome)
        return self._composer.unknown()


def handle_chat_query(query: Any, store: CatalogStore, cfg: Optional[Config] = None) -> Reply:
    """Convenience wrapper returning only the Reply."""
    return ChatEngine(store, cfg).handle(query).reply
