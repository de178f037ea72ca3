"""Render retrieval sources as evidence blocks for provider prompts."""

from collections.abc import Sequence

from .contracts import RetrievalSource

SOURCES_HEADER = "SOURCES (use these as evidence and cite as [1], [2], etc.):"


def build_sources_block(sources: Sequence[RetrievalSource]) -> str:
    """
    Evidence block appended to the user prompt before fan-out.

    Returns an empty string when there are no sources.
    """
    if not sources:
        return ""
    entries = []
    for source in sources:
        header = f"[{source.id}] {source.title}"
        if source.url:
            header += f" - {source.url}"
        entries.append(f"{header}\n{source.snippet}")
    return f"\n\n{SOURCES_HEADER}\n\n" + "\n\n".join(entries) + "\n"


def build_retrieval_instructions(sources: Sequence[RetrievalSource]) -> str:
    """
    Evidence block for the system prompt of an expansion request.

    Providers are told to use the snippets silently rather than mention them.
    """
    if not sources:
        return ""
    snippets = "\n\n".join(
        f"Source [{s.id}] {s.title}{f' ({s.url})' if s.url else ''}\n{s.snippet}" for s in sources
    )
    return (
        "WEB EVIDENCE (use as evidence only):\n"
        "- Do NOT mention snippets or web results.\n"
        "- Synthesize in your own words.\n\n"
        f"{snippets}\n"
    )


def augment_prompt(prompt: str, sources: Sequence[RetrievalSource]) -> str:
    return prompt + build_sources_block(sources)
