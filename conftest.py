"""
Pytest configuration: UTF-8 output and shared fixtures.

Sits at the repository root so that `src.text_model` is importable from tests.
"""

import os

import pytest

from src.text_model import (
    AnnotatedTextBuilder,
    ArabicMorphoAnalysisBuilder,
    HanMorphoAnalysisBuilder,
    ListAttributeBuilder,
    MorphoAnalysisBuilder,
    Token,
    TokenBuilder,
)
from src.text_model.codec import ModelMapper

# Test data contains Arabic and Han text
os.environ['PYTHONIOENCODING'] = 'utf-8'


@pytest.fixture
def mapper():
    """Mapper with a bound morpho-analysis codec."""
    return ModelMapper()


@pytest.fixture
def generic_analysis():
    return (
        MorphoAnalysisBuilder()
        .lemma("run")
        .part_of_speech("VERB")
        .raw("run+V")
        .extended_property("score", 0.5)
        .build()
    )


@pytest.fixture
def han_analysis():
    return (
        HanMorphoAnalysisBuilder()
        .lemma("书")
        .part_of_speech("NOUN")
        .add_reading("shu1")
        .build()
    )


@pytest.fixture
def arabic_analysis():
    return (
        ArabicMorphoAnalysisBuilder()
        .lemma("كتاب")
        .part_of_speech("NOUN")
        .lengths(2, 4)
        .root("ktb")
        .definite_article(True)
        .strippable_prefix(False)
        .add_prefix("ال", "DET")
        .add_stem("كتاب", "NOUN")
        .add_suffix("ة", "FEM")
        .build()
    )


@pytest.fixture
def annotated_text(generic_analysis):
    """Small document with a token layer and one metadata entry."""
    hello = TokenBuilder(0, 5, "Hello").add_normalized("hello").add_analysis(generic_analysis).build()
    world = TokenBuilder(6, 11, "world").build()
    tokens = ListAttributeBuilder(Token).add(hello).add(world).build()
    return (
        AnnotatedTextBuilder()
        .data("Hello world")
        .tokens(tokens)
        .document_metadata("source", "unit-test")
        .build()
    )
