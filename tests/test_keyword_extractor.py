"""Tests pour l'extracteur de mots-clés adossé à un LLM."""

from __future__ import annotations

import json

import pytest

from reco_backend.domain.keywords import KeywordResolver
from reco_backend.infra.keyword_extractor import KEYWORD_SCHEMA, LLMKeywordExtractor
from reco_backend.infra.llm.base import LLMError
from tests.fakes import FailingLLM, FakeLLM

LABELS = ["Café", "montagne", "Drone"]


def test_extract_parses_keywords() -> None:
    llm = FakeLLM('{"keywords": ["Café", 3, "Drone", "montagne"]}')
    extractor = LLMKeywordExtractor(llm)
    assert extractor.extract("Publicité pour un café", LABELS, 2) == ["Café", "Drone"]


def test_extract_sends_vocabulary_and_schema() -> None:
    llm = FakeLLM()
    LLMKeywordExtractor(llm, temperature=0.1).extract("Publicité pour un café", LABELS, 3)
    call = llm.calls[0]
    assert call["json_schema"] == KEYWORD_SCHEMA
    assert call["temperature"] == pytest.approx(0.1)
    assert call["messages"][0]["role"] == "system"
    user = json.loads(call["messages"][1]["content"])
    assert user["available_keywords"] == LABELS
    assert user["description"] == "Publicité pour un café"
    assert "3" in user["rules"][0]


@pytest.mark.parametrize("raw", ["pas du json", '{"mots": []}', '["Café"]'])
def test_extract_rejects_unusable_response(raw: str) -> None:
    with pytest.raises(LLMError):
        LLMKeywordExtractor(FakeLLM(raw)).extract("Publicité pour un café", LABELS, 3)


def test_resolver_falls_back_when_llm_unavailable() -> None:
    resolver = KeywordResolver(LLMKeywordExtractor(FailingLLM()))
    resolution = resolver.resolve("Publicité pour un café en montagne", LABELS, 4)
    assert resolution.source == "fallback"
    assert resolution.labels == {"Café", "montagne"}
