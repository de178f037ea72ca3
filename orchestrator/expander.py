"""
AnswerExpander - asks each provider to deepen its own previous answer.

Shares the fan-out's guarantees: one answer per requested provider, in
request order, with unknown providers and missing keys reported as error
answers instead of exceptions.
"""

import asyncio
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from config.provider_config import ProviderConfig, parse_provider_configs
from models.errors import InputValidationError
from models.provider_answer import ProviderAnswer, ProviderName
from orchestrator.multi_orchestrator import MultiModelOrchestrator
from tools.web.research_pack import build_retrieval_instructions
from utils.logger import get_logger

logger = get_logger(__name__)

EXPAND_TEMPERATURE = 0.35
EXPAND_MAX_TOKENS = 1000

NO_NEW_FACTS_REPLY = "No additional confirmed facts found."

FOCUS_INSTRUCTIONS: dict[str, str] = {
    "general": (
        "- Add more useful factual detail without being verbose.\n"
        "- Prefer concrete numbers, names, dates.\n"
    ),
    "size": (
        "- Focus on quantitative specs: square footage (range if uncertain), floors, rentable area.\n"
        "- If multiple numbers exist, list the range and say which source/provider reported it.\n"
    ),
    "team": (
        "- Focus on who built it: developer/owner, architect, general contractor, engineers.\n"
        "- Name companies and people; be precise.\n"
    ),
    "timeline": (
        "- Focus on timeline: groundbreaking/start, completion/opening, major renovations/renames.\n"
        "- Include years and sequence.\n"
    ),
    "naming": (
        "- Focus on alternate names and branding: prior/current names and why/when they changed.\n"
    ),
}


def focus_instructions(focus: str | None) -> str:
    """Instruction lines for a focus value; unknown values mean general."""
    key = (focus or "general").strip().lower()
    return FOCUS_INSTRUCTIONS.get(key, FOCUS_INSTRUCTIONS["general"])


def build_expand_prompt(
    original_prompt: str,
    previous_text: str | None,
    focus: str | None,
    provider: str,
) -> str:
    provider_specific = ""
    if provider == ProviderName.GEMINI.value:
        provider_specific = (
            "IMPORTANT: Only add NEW factual details not already present in your previous "
            f"answer. If you cannot add any confirmed new facts, reply exactly: '{NO_NEW_FACTS_REPLY}'\n"
        )

    return (
        "You are expanding your prior answer with more detail.\n"
        + provider_specific
        + "Constraints:\n"
        "- Do NOT mention snippets or web results.\n"
        "- Prefer concrete names, dates, numbers.\n"
        "- Avoid repeating your previous sentences.\n"
        + focus_instructions(focus)
        + "\nOriginal question:\n"
        + original_prompt
        + "\n\nYour previous answer:\n"
        + (previous_text or "(none)")
        + "\n"
    )


def previous_text_for(provider: str, previous_answers: Sequence[ProviderAnswer]) -> str | None:
    for answer in previous_answers:
        if answer.provider == provider:
            return answer.text
    return None


class AnswerExpander:
    """
    Example usage:
        expander = AnswerExpander(orchestrator)
        answers = await expander.expand(prompt, run.answers, ["openai"], focus="timeline")
    """

    def __init__(self, orchestrator: MultiModelOrchestrator):
        self.orchestrator = orchestrator

    async def expand(
        self,
        original_prompt: str,
        previous_answers: Sequence[ProviderAnswer],
        providers: Sequence[str],
        api_keys: Mapping[str, str] | None = None,
        provider_configs: Mapping[str, Any] | None = None,
        focus: str | None = "general",
        use_retrieval: bool = False,
        system_prompt: str | None = None,
    ) -> list[ProviderAnswer]:
        """
        Deepen each provider's previous answer concurrently.

        Raises:
            InputValidationError: original prompt missing
        """
        original_prompt = (original_prompt or "").strip()
        if not original_prompt:
            raise InputValidationError("Missing original prompt.")

        provider_ids = [str(p) for p in providers or []]
        request_group_id = str(uuid.uuid4())
        configs = parse_provider_configs(dict(provider_configs or {}))

        sources = await self.orchestrator.retrieve(original_prompt, use_retrieval)
        system = ((system_prompt + "\n\n") if system_prompt else "") + build_retrieval_instructions(
            sources
        )

        logger.info(
            f"Expanding answers for {len(provider_ids)} providers",
            extra={
                "extra_fields": {
                    "request_group_id": request_group_id,
                    "providers": provider_ids,
                    "focus": focus,
                    "source_count": len(sources),
                }
            },
        )

        tasks = []
        for provider_id in provider_ids:
            prompt = build_expand_prompt(
                original_prompt,
                previous_text_for(provider_id, previous_answers),
                focus,
                provider_id.lower(),
            )
            request = self.orchestrator.build_request(
                prompt,
                system.strip() or None,
                configs.get(provider_id.strip().lower(), ProviderConfig()),
                temperature=EXPAND_TEMPERATURE,
                max_tokens=EXPAND_MAX_TOKENS,
            )
            tasks.append(
                self.orchestrator.call_provider(
                    provider_id, request, api_keys, self.orchestrator.default_timeout_s
                )
            )

        answers = list(await asyncio.gather(*tasks))
        logger.info(
            "Expansion complete",
            extra={
                "extra_fields": {
                    "request_group_id": request_group_id,
                    "success_count": sum(1 for a in answers if a.is_success),
                }
            },
        )
        return answers
