"""
Tests for FactAggregator: claim extraction, first-match merging, ranking
and the consensus/unique split.
"""

import pytest

from aggregation.fact_aggregator import (
    FactAggregator,
    find_numeric_conflicts,
    is_filler,
    split_consensus,
)
from config.config import AggregationSettings
from models.fact import Claim, Fact
from models.provider_answer import ProviderAnswer


def make_answer(provider, text="", error=None):
    return ProviderAnswer(provider=provider, model="fake-model", text=text, latency_ms=10, error=error)


@pytest.fixture
def aggregator():
    return FactAggregator()


class TestExtractClaims:
    def test_errored_answer_contributes_nothing(self, aggregator):
        answer = make_answer("openai", text="The tower has 60 floors.", error="boom")
        assert list(aggregator.extract_claims(answer)) == []

    def test_empty_answer_contributes_nothing(self, aggregator):
        assert list(aggregator.extract_claims(make_answer("openai", text="   "))) == []

    def test_filler_sentences_skipped(self, aggregator):
        answer = make_answer(
            "openai",
            text="The tower has 60 floors. I hope this helps with your research.",
        )
        claims = list(aggregator.extract_claims(answer))
        assert claims == [Claim(text="The tower has 60 floors.", provider="openai")]

    def test_is_filler(self):
        assert is_filler("Let me know if you need anything else.")
        assert not is_filler("The bridge opened in 1937.")


class TestAggregate:
    def test_paraphrased_claims_merge(self, aggregator):
        answers = [
            make_answer("openai", text="The tower has 60 floors."),
            make_answer("anthropic", text="The tower has 60 floors total."),
            make_answer("gemini", text="Construction began in 2005."),
        ]

        facts = aggregator.aggregate(answers)

        assert len(facts) == 2
        assert facts[0].providers == ["openai", "anthropic"]
        assert facts[0].text == "The tower has 60 floors."
        assert facts[1].providers == ["gemini"]
        assert facts[1].text == "Construction began in 2005."

    def test_all_errors_yield_no_facts(self, aggregator):
        answers = [
            make_answer("openai", error="API key not set (client or server)."),
            make_answer("gemini", error="Provider call failed: boom"),
        ]
        assert aggregator.aggregate(answers) == []

    def test_same_provider_counted_once(self, aggregator):
        answers = [
            make_answer(
                "openai",
                text="The tower has 60 floors. The tower has 60 floors total.",
            )
        ]
        facts = aggregator.aggregate(answers)
        assert len(facts) == 1
        assert facts[0].providers == ["openai"]
        assert facts[0].corroboration == 1

    def test_idempotent(self, aggregator):
        answers = [
            make_answer("openai", text="The tower has 60 floors. It was designed by Foster."),
            make_answer("xai", text="The tower has 60 floors total. Construction began in 2005."),
        ]
        first = [f.to_dict() for f in aggregator.aggregate(answers)]
        second = [f.to_dict() for f in aggregator.aggregate(answers)]
        assert first == second

    def test_ranking_by_providers_then_length(self, aggregator):
        answers = [
            make_answer(
                "openai",
                text=(
                    "A short remark about bridges. "
                    "A considerably longer sentence describing the tunnel system. "
                    "The tower has 60 floors."
                ),
            ),
            make_answer("gemini", text="The tower has 60 floors total."),
        ]

        facts = aggregator.aggregate(answers)

        assert [len(f.providers) for f in facts] == [2, 1, 1]
        assert facts[1].text == "A considerably longer sentence describing the tunnel system."
        assert facts[2].text == "A short remark about bridges."
        for left, right in zip(facts, facts[1:]):
            assert (len(left.providers), len(left.text)) >= (len(right.providers), len(right.text))

    def test_fact_list_capped(self, aggregator):
        text = " ".join(f"Token{i}a token{i}b token{i}c token{i}d." for i in range(50))
        facts = aggregator.aggregate([make_answer("openai", text=text)])
        assert len(facts) == 40

    def test_cap_is_configurable(self):
        aggregator = FactAggregator(AggregationSettings(max_facts=5))
        text = " ".join(f"Token{i}a token{i}b token{i}c token{i}d." for i in range(10))
        assert len(aggregator.aggregate([make_answer("openai", text=text)])) == 5


class TestMerge:
    def test_first_match_wins(self, aggregator):
        facts = [
            Fact(id=1, text="alpha beta gamma delta", providers=["openai"]),
            Fact(id=2, text="alpha beta gamma delta epsilon", providers=["gemini"]),
        ]

        target = aggregator.merge(facts, Claim(text="alpha beta gamma delta epsilon", provider="xai"))

        assert target.id == 1
        assert facts[0].providers == ["openai", "xai"]
        assert facts[1].providers == ["gemini"]

    def test_new_fact_gets_next_id(self, aggregator):
        facts = [Fact(id=1, text="alpha beta gamma delta", providers=["openai"])]
        target = aggregator.merge(facts, Claim(text="something else entirely", provider="xai"))
        assert target.id == 2
        assert len(facts) == 2


class TestSplitConsensus:
    def test_partition_and_caps(self):
        facts = [Fact(id=i, text=f"fact {i}", providers=["a", "b"]) for i in range(20)]
        facts += [Fact(id=100 + i, text=f"unique {i}", providers=["a"]) for i in range(20)]

        consensus, unique = split_consensus(facts)

        assert len(consensus) == 14
        assert len(unique) == 14
        assert all(f.is_consensus for f in consensus)
        assert not any(f.is_consensus for f in unique)


class TestNumericConflicts:
    def test_differing_numbers_reported(self, aggregator):
        answers = [
            make_answer("openai", text="The tower has 60 floors."),
            make_answer("gemini", text="The tower has 62 floors."),
        ]
        facts = aggregator.aggregate(answers)

        conflicts = find_numeric_conflicts(facts)

        assert conflicts == ['openai: "The tower has 60 floors." vs gemini: "The tower has 62 floors."']

    def test_same_provider_not_a_conflict(self):
        facts = [
            Fact(id=1, text="The tower has 60 floors.", providers=["openai"]),
            Fact(id=2, text="The tower has 62 floors.", providers=["openai"]),
        ]
        assert find_numeric_conflicts(facts) == []

    def test_unrelated_numbers_ignored(self):
        facts = [
            Fact(id=1, text="The tower has 60 floors.", providers=["openai"]),
            Fact(id=2, text="Construction began in 2005.", providers=["gemini"]),
        ]
        assert find_numeric_conflicts(facts) == []
