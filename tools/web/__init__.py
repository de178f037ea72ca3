"""Web retrieval tools."""

from .contracts import RetrievalSource
from .research_pack import augment_prompt, build_retrieval_instructions, build_sources_block
from .tavily_client import TavilyRetriever

__all__ = [
    "RetrievalSource",
    "TavilyRetriever",
    "augment_prompt",
    "build_retrieval_instructions",
    "build_sources_block",
]
