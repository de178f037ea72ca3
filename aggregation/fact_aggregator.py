"""
FactAggregator - merges claims from every provider answer into a ranked,
deduplicated fact list.

Merge rule: a claim joins the FIRST existing fact whose representative text
scores at or above the merge threshold; otherwise it starts a new fact.
Facts are never re-clustered, so the result depends on the order of the
answers passed in. Callers must fix that order (request order) before
aggregating.
"""

import re
from collections.abc import Iterable, Iterator, Sequence

from aggregation.sentence_splitter import split_sentences
from aggregation.similarity import jaccard, similarity, tokenize
from config.config import AggregationSettings
from models.fact import Claim, Fact
from models.provider_answer import ProviderAnswer
from utils.logger import get_logger

logger = get_logger(__name__)

FILLER_PHRASES: tuple[str, ...] = (
    "based on the information provided",
    "based on the provided information",
    "would you like to know more",
    "would you like me to",
    "let me know if you",
    "feel free to ask",
    "i hope this helps",
    "hope this helps",
    "as an ai language model",
    "as an ai model",
    "i don't have real-time",
    "i do not have real-time",
    "i don't have access to real-time",
    "my knowledge cutoff",
    "as of my last update",
    "not found in the provided sources",
)

_NUMBER = re.compile(r"^\d+(?:[.,]\d+)?$")


def is_filler(text: str, phrases: Iterable[str] = FILLER_PHRASES) -> bool:
    """True when the claim is meta commentary rather than a factual assertion."""
    lowered = text.lower()
    return any(p in lowered for p in phrases)


class FactAggregator:
    """
    Turns a list of ProviderAnswers into a ranked list of Facts.

    Example:
        aggregator = FactAggregator()
        facts = aggregator.aggregate(answers)
        for fact in facts:
            print(fact.corroboration, fact.text)
    """

    def __init__(
        self,
        settings: AggregationSettings | None = None,
        filler_phrases: Sequence[str] = FILLER_PHRASES,
    ):
        self.settings = settings or AggregationSettings()
        self.filler_phrases = tuple(p.lower() for p in filler_phrases)

    def extract_claims(self, answer: ProviderAnswer) -> Iterator[Claim]:
        """
        Yield the claims of one answer.

        Errored or empty answers yield nothing.
        """
        if not answer.has_usable_text:
            return
        for sentence in split_sentences(answer.text, min_chars=self.settings.min_claim_chars):
            if is_filler(sentence, self.filler_phrases):
                continue
            yield Claim(text=sentence, provider=answer.provider)

    def merge(self, facts: list[Fact], claim: Claim) -> Fact:
        """
        Merge ``claim`` into the first sufficiently similar fact, or append a
        new fact. Returns the fact that received the claim.
        """
        threshold = self.settings.merge_threshold
        for fact in facts:
            if similarity(claim.text, fact.text) >= threshold:
                fact.add_provider(claim.provider)
                return fact
        fact = Fact.from_claim(len(facts) + 1, claim)
        facts.append(fact)
        return fact

    @staticmethod
    def rank(facts: Iterable[Fact]) -> list[Fact]:
        """Most corroborated first; longer (more specific) text breaks ties."""
        return sorted(facts, key=lambda f: (-f.corroboration, -len(f.text)))

    def aggregate(self, answers: Sequence[ProviderAnswer]) -> list[Fact]:
        """
        Build the ranked, truncated fact list for one run.

        Args:
            answers: ProviderAnswers in request order

        Returns:
            At most ``settings.max_facts`` facts
        """
        facts: list[Fact] = []
        claim_count = 0
        skipped = 0

        for answer in answers:
            if not answer.has_usable_text:
                skipped += 1
                continue
            for claim in self.extract_claims(answer):
                claim_count += 1
                self.merge(facts, claim)

        ranked = self.rank(facts)[: self.settings.max_facts]

        logger.info(
            "Fact aggregation complete",
            extra={
                "extra_fields": {
                    "answers": len(answers),
                    "skipped_answers": skipped,
                    "claims": claim_count,
                    "facts": len(facts),
                    "facts_kept": len(ranked),
                }
            },
        )
        return ranked


def split_consensus(
    facts: Sequence[Fact], max_consensus: int = 14, max_unique: int = 14
) -> tuple[list[Fact], list[Fact]]:
    """
    Partition ranked facts into consensus (2+ providers) and unique
    (single provider) lists, each truncated independently.
    """
    consensus = [f for f in facts if len(f.providers) >= 2][:max_consensus]
    unique = [f for f in facts if len(f.providers) == 1][:max_unique]
    return consensus, unique


def find_numeric_conflicts(
    facts: Sequence[Fact], threshold: float = 0.72, limit: int = 20
) -> list[str]:
    """
    Describe pairs of facts that say the same thing with different numbers.

    Two facts conflict when they come from disjoint provider sets, their
    non-numeric tokens are at least ``threshold`` similar, and their numeric
    tokens differ (e.g. "60 floors" vs "62 floors").
    """
    conflicts: list[str] = []
    prepared = []
    for fact in facts:
        tokens = tokenize(fact.text)
        numbers = {t for t in tokens if _NUMBER.match(t)}
        prepared.append((fact, tokens - numbers, numbers))

    for i, (left, left_words, left_numbers) in enumerate(prepared):
        for right, right_words, right_numbers in prepared[i + 1 :]:
            if not left_numbers or not right_numbers or left_numbers == right_numbers:
                continue
            if set(left.providers) & set(right.providers):
                continue
            if jaccard(left_words, right_words) < threshold:
                continue
            conflicts.append(
                f'{", ".join(left.providers)}: "{left.text}" vs '
                f'{", ".join(right.providers)}: "{right.text}"'
            )
            if len(conflicts) >= limit:
                return conflicts
    return conflicts
