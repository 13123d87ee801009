"""AI enrichment gateway with an offline fallback.

Every public operation returns a well-formed result. When no provider key is
configured the gateway runs in demo mode and answers from the keyword
heuristics in :mod:`api.services.mock_analysis`. In live mode any provider
error, timeout, empty answer or unparseable answer is logged and answered
from the same fallbacks.
"""

from __future__ import annotations

import asyncio
import json
import random
import re
from collections.abc import Sequence

import structlog
from pydantic import BaseModel, TypeAdapter

from connectors.openai import OpenAIConnector

from ..config import Settings
from ..models import Analysis, Note, RelatedNote
from ..observability import get_app_metrics, get_tracer
from ..prompts import (
    get_analyze_prompt,
    get_improve_prompt,
    get_related_prompt,
    get_suggestions_prompt,
)
from .mock_analysis import DEFAULT_SUGGESTIONS, generate_mock_analysis

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)

MAX_RELATED_NOTES = 3

# Placeholder similarity range for demo mode; not a ranking
PLACEHOLDER_SIMILARITY_RANGE = (0.3, 0.8)

CANDIDATE_PREVIEW_CHARS = 200

# An answer without these keys is treated as unparseable
REQUIRED_ANALYSIS_FIELDS = frozenset({"topics", "tags"})

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)

_string_list = TypeAdapter(list[str])


class EmptyProviderResponse(Exception):
    """The provider answered without any content."""


class _ProviderMatch(BaseModel):
    id: str
    similarity: float


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def placeholder_related(candidates: Sequence[Note]) -> list[RelatedNote]:
    """Pick the first candidates with made-up similarity scores.

    Scores are drawn from a generator seeded with the note id so the same
    note always gets the same value. They carry no meaning and the result
    is not ordered by them.
    """
    low, high = PLACEHOLDER_SIMILARITY_RANGE
    return [
        RelatedNote(
            id=note.id,
            title=note.title,
            similarity=round(random.Random(note.id).uniform(low, high), 2),
        )
        for note in candidates[:MAX_RELATED_NOTES]
    ]


class AIGateway:
    """Best-effort access to the AI text-analysis provider."""

    def __init__(self, settings: Settings, connector: OpenAIConnector | None = None):
        self.settings = settings
        self.connector = connector
        if self.connector is None and settings.ai_enabled:
            self.connector = OpenAIConnector(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.ai_request_timeout,
            )
        self.metrics = get_app_metrics()

    @property
    def live(self) -> bool:
        """True when calls go to the provider rather than the demo fallback."""
        return self.settings.ai_enabled and self.connector is not None

    async def aclose(self) -> None:
        """Release the provider connection."""
        if self.connector is not None:
            await self.connector.close()

    async def analyze(self, content: str, title: str | None = "") -> Analysis:
        """Extract topics, tags, suggestions and improvements for a note."""
        with tracer.start_as_current_span("ai.analyze") as span:
            if not self._begin("analyze", span):
                return generate_mock_analysis(content, title)

            try:
                raw = await self._complete(
                    "analyze",
                    get_analyze_prompt(content, title or ""),
                    temperature=0.7,
                    json_mode=True,
                )
                analysis = Analysis.model_validate_json(strip_code_fence(raw))
                missing = REQUIRED_ANALYSIS_FIELDS - analysis.model_fields_set
                if missing:
                    raise ValueError(f"Analysis is missing {', '.join(sorted(missing))}")
                return analysis
            except Exception as e:
                self._record_failure("analyze", e, span)
                return generate_mock_analysis(content, title)

    async def suggest(self, content: str) -> list[str]:
        """Propose ways to complete or expand the content."""
        with tracer.start_as_current_span("ai.suggest") as span:
            if not self._begin("suggest", span):
                return list(DEFAULT_SUGGESTIONS)

            try:
                raw = await self._complete(
                    "suggest", get_suggestions_prompt(content), temperature=0.8, json_mode=True
                )
                payload = json.loads(strip_code_fence(raw))
                if isinstance(payload, dict):
                    payload = payload.get("suggestions")
                suggestions = _string_list.validate_python(payload, strict=True)
                if not suggestions:
                    raise EmptyProviderResponse("Provider returned no suggestions")
                return suggestions
            except Exception as e:
                self._record_failure("suggest", e, span)
                return list(DEFAULT_SUGGESTIONS)

    async def improve(self, content: str) -> str:
        """Rewrite the content for grammar and style.

        Demo mode appends the configured marker suffix so the caller can see
        that no rewrite took place. A failed live call returns the content
        unchanged.
        """
        with tracer.start_as_current_span("ai.improve") as span:
            if not self._begin("improve", span):
                return content + self.settings.demo_improve_suffix

            try:
                raw = await self._complete("improve", get_improve_prompt(content), temperature=0.3)
                return raw.strip()
            except Exception as e:
                self._record_failure("improve", e, span)
                return content

    async def find_related(self, content: str, candidates: Sequence[Note]) -> list[RelatedNote]:
        """Find up to three candidate notes related to the content.

        Live results are restricted to known candidates, clamped to [0, 1]
        and sorted by descending similarity.
        """
        with tracer.start_as_current_span("ai.find_related") as span:
            span.set_attribute("ai.candidate_count", len(candidates))
            if not candidates:
                return []

            if not self._begin("find_related", span):
                return placeholder_related(candidates)

            lines = "\n".join(
                f'- ID: {note.id}, Title: "{note.title}", '
                f'Content: "{note.content[:CANDIDATE_PREVIEW_CHARS]}..."'
                for note in candidates
            )

            try:
                raw = await self._complete(
                    "find_related",
                    get_related_prompt(content, lines),
                    temperature=0.5,
                    json_mode=True,
                )
                payload = json.loads(strip_code_fence(raw))
                if isinstance(payload, dict):
                    payload = payload.get("related")
                matches = TypeAdapter(list[_ProviderMatch]).validate_python(payload)
            except Exception as e:
                self._record_failure("find_related", e, span)
                return placeholder_related(candidates)

            by_id = {note.id: note for note in candidates}
            best: dict[str, RelatedNote] = {}
            for match in matches:
                if match.id not in by_id:
                    continue
                similarity = min(1.0, max(0.0, match.similarity))
                # Repeated ids keep their highest score
                if match.id in best and best[match.id].similarity >= similarity:
                    continue
                best[match.id] = RelatedNote(
                    id=match.id, title=by_id[match.id].title, similarity=similarity
                )

            related = sorted(best.values(), key=lambda item: item.similarity, reverse=True)
            return related[:MAX_RELATED_NOTES]

    def _begin(self, operation: str, span) -> bool:
        """Record the request and report whether the provider should be used."""
        mode = "live" if self.live else "demo"
        span.set_attribute("ai.mode", mode)
        self.metrics.ai_requests.add(1, {"operation": operation, "mode": mode})
        if mode == "demo":
            logger.debug("ai_demo_mode", operation=operation)
        return self.live

    async def _complete(
        self, operation: str, prompt: str, temperature: float, json_mode: bool = False
    ) -> str:
        """Send a single-message prompt and return the answer text."""
        response = await asyncio.wait_for(
            self.connector.chat_completion(
                messages=[{"role": "user", "content": prompt}],
                model=self.settings.openai_model,
                temperature=temperature,
                response_format={"type": "json_object"} if json_mode else None,
            ),
            timeout=self.settings.ai_request_timeout,
        )

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise EmptyProviderResponse("No response from AI")

        if response.usage:
            logger.info(
                "ai_request_completed",
                operation=operation,
                model=self.settings.openai_model,
                total_tokens=response.usage.total_tokens,
                estimated_cost_usd=round(
                    self.connector.estimate_cost(
                        model=self.settings.openai_model,
                        prompt_tokens=response.usage.prompt_tokens,
                        completion_tokens=response.usage.completion_tokens,
                    ),
                    6,
                ),
            )

        return text

    def _record_failure(self, operation: str, error: Exception, span) -> None:
        reason = "timeout" if isinstance(error, TimeoutError) else type(error).__name__
        logger.warning(
            "ai_request_failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )
        span.record_exception(error)
        span.set_attribute("ai.fallback", True)
        self.metrics.ai_fallbacks.add(1, {"operation": operation, "reason": reason})
