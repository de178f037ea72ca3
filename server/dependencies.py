"""FastAPI dependencies for configuration and pipeline access."""

from config.config import Config
from orchestrator.meta_client import MetaClient
from utils.logger import get_logger

logger = get_logger(__name__)


def get_config() -> Config:
    """Server configuration, read from the environment on each request."""
    return Config()


def get_meta_client() -> MetaClient:
    """
    Build the pipeline for one request.

    Holds no state across requests; tests replace it through
    ``app.dependency_overrides``.
    """
    return MetaClient.from_config(get_config())
