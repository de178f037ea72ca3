"""
Models package for provider answers, facts and summaries.
"""

from .fact import Claim, Fact
from .provider_answer import ProviderAnswer, ProviderName, ProviderRequest
from .run_result import FanOutResult, RunResult
from .summary import Summary, SummarySentence

__all__ = [
    "Claim",
    "Fact",
    "FanOutResult",
    "ProviderAnswer",
    "ProviderName",
    "ProviderRequest",
    "RunResult",
    "Summary",
    "SummarySentence",
]
