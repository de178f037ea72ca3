"""Factory for the retrieval collector."""

from config.config import Config
from utils.logger import get_logger

from .tavily_client import TavilyRetriever

logger = get_logger(__name__)


def create_retriever(config: Config) -> TavilyRetriever:
    """
    Build the Tavily retriever from an explicit Config.

    A retriever without a key is still returned; its searches yield [].
    """
    if not config.TAVILY_API_KEY:
        logger.warning("TAVILY_API_KEY not set; web retrieval will be skipped")
    return TavilyRetriever(api_key=config.TAVILY_API_KEY, timeout_s=config.RETRIEVAL_TIMEOUT_S)
