"""Build the system instruction and user message for delegated synthesis."""

from collections.abc import Sequence

from config.config import AggregationSettings
from models.fact import Fact
from models.provider_answer import ProviderAnswer
from tools.web.contracts import RetrievalSource


def build_system_instruction(settings: AggregationSettings, has_sources: bool) -> str:
    """
    Output-format rules for the synthesis model.

    Citation rules depend on whether any web sources were supplied.
    """
    if has_sources:
        citation_rule = (
            "- citations is an array of web source ids like [1,2], taken ONLY from the "
            "WEB SOURCES section. Never cite an id that is not listed there."
        )
    else:
        citation_rule = "- No web sources were provided, so every citations array must be []."

    lines = [
        "You are a meta-summarizer for a multi-provider AI app.",
        "",
        "GOAL:",
        "Given a user prompt, multiple provider answers, pre-ranked facts and optional "
        "web snippets, produce the best possible final answer.",
        "",
        "RULES:",
        "- Do NOT refuse unless the user request is genuinely unsafe or prohibited.",
        "- Answer directly when possible.",
        "- Prefer facts reported by several providers (CONSENSUS FACTS) over single-provider details.",
        "- Prefer provider answers over snippets when they conflict.",
        "- If answers conflict, explicitly list the disagreement and choose the most likely correct option.",
        "- Do not invent facts. If unsure, clearly state uncertainty and what would confirm it.",
        "",
        "OUTPUT REQUIREMENTS:",
        "Return STRICT JSON only (no markdown, no prose before or after) with exactly these keys:",
        "{",
        '  "finalAnswer": string,',
        f'  "keyFacts": string[],          // at most {settings.max_key_facts}, no duplicates',
        '  "sentences": { "text": string, "citations": number[], "confidence": number }[],'
        f"  // at most {settings.max_sentences}",
        f'  "disagreements": string[]      // at most {settings.max_disagreements}',
        "}",
        "",
        "CITATIONS:",
        citation_rule,
        "",
        "CONFIDENCE:",
        "- An integer from 0 to 100.",
        "",
        "Keep JSON valid. Do NOT include any additional keys. Do NOT output a sources field.",
    ]
    return "\n".join(lines)


def build_provider_section(answers: Sequence[ProviderAnswer]) -> str:
    blocks: list[str] = []
    for answer in answers:
        text = (answer.text or "").strip()
        if answer.error:
            status = f"ERROR: {answer.error}"
        else:
            status = "OK" if text else "EMPTY"
        lines = [
            f"PROVIDER: {answer.provider}",
            f"MODEL: {answer.model or 'n/a'}",
            f"STATUS: {status}",
        ]
        if text and not answer.error:
            lines.append(f"ANSWER:\n{text}")
        blocks.append("\n".join(lines))
    return "\n\n---\n\n".join(blocks)


def build_fact_section(facts: Sequence[Fact]) -> str:
    return "\n".join(f"- {fact.text} (providers: {', '.join(fact.providers)})" for fact in facts)


def build_sources_section(sources: Sequence[RetrievalSource], limit: int = 10) -> str:
    blocks: list[str] = []
    for source in list(sources)[:limit]:
        lines = [f"[{source.id}] {source.title or 'Source'}"]
        if source.url:
            lines.append(source.url)
        if source.snippet:
            lines.append(f"SNIPPET:\n{source.snippet}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_user_message(
    prompt: str,
    answers: Sequence[ProviderAnswer],
    consensus: Sequence[Fact],
    unique: Sequence[Fact],
    sources: Sequence[RetrievalSource],
    settings: AggregationSettings,
) -> str:
    sections = [
        f"USER PROMPT:\n{prompt.strip()}",
        f"PROVIDER ANSWERS:\n{build_provider_section(answers) or '(none)'}",
        f"CONSENSUS FACTS (reported by 2+ providers):\n{build_fact_section(consensus) or '(none)'}",
        f"UNIQUE FACTS (single provider):\n{build_fact_section(unique) or '(none)'}",
        "WEB SOURCES (optional):\n"
        + (build_sources_section(sources, settings.max_prompt_sources) or "(none)"),
    ]
    return "\n\n".join(sections)
