"""
Annotated Text Data Model

Immutable records for annotated natural-language text (tokens, sentences,
entities, morphological analyses, language detection, translations) and the
AnnotatedText container that holds them.

Usage:
    from src.text_model import AnnotatedTextBuilder, ListAttributeBuilder, Token, TokenBuilder

    tokens = ListAttributeBuilder(Token).add(TokenBuilder(0, 5, "Hello").build()).build()
    text = AnnotatedTextBuilder().data("Hello world").tokens(tokens).build()
"""

from .attribute_key import AttributeKey
from .annotated_text import AnnotatedText, AnnotatedTextBuilder, LAYER_TYPES
from .builders import (
    ArabicMorphoAnalysisBuilder,
    AttributeBuilder,
    EntityBuilder,
    EntityMentionBuilder,
    HanMorphoAnalysisBuilder,
    LanguageDetectionBuilder,
    ListAttributeBuilder,
    MorphoAnalysisBuilder,
    ResolvedEntityBuilder,
    ScriptRegionBuilder,
    TokenBuilder,
    TranslatedDataBuilder,
    TranslatedTokensBuilder,
)
from .config import MapperConfig
from .errors import (
    DataModelError,
    JsonDecodeError,
    UnboundCodecError,
    UnknownAttributeError,
    WrongTokenError,
)
from .types import (
    ArabicMorphoAnalysis,
    Attribute,
    BaseAttribute,
    BaseNounPhrase,
    DetectionResult,
    Entity,
    EntityMention,
    HanMorphoAnalysis,
    LanguageDetection,
    ListAttribute,
    MorphoAnalysis,
    MorphoVariant,
    ResolvedEntity,
    ScriptRegion,
    Sentence,
    Token,
    TranslatedData,
    TranslatedTokens,
)

__all__ = [
    "AttributeKey",
    "AnnotatedText",
    "AnnotatedTextBuilder",
    "LAYER_TYPES",
    "MapperConfig",
    # Records
    "BaseAttribute",
    "Attribute",
    "Token",
    "Sentence",
    "BaseNounPhrase",
    "ScriptRegion",
    "EntityMention",
    "Entity",
    "ResolvedEntity",
    "DetectionResult",
    "LanguageDetection",
    "TranslatedTokens",
    "TranslatedData",
    "ListAttribute",
    "MorphoVariant",
    "MorphoAnalysis",
    "HanMorphoAnalysis",
    "ArabicMorphoAnalysis",
    # Builders
    "AttributeBuilder",
    "TokenBuilder",
    "EntityBuilder",
    "ResolvedEntityBuilder",
    "EntityMentionBuilder",
    "ScriptRegionBuilder",
    "LanguageDetectionBuilder",
    "TranslatedTokensBuilder",
    "TranslatedDataBuilder",
    "ListAttributeBuilder",
    "MorphoAnalysisBuilder",
    "HanMorphoAnalysisBuilder",
    "ArabicMorphoAnalysisBuilder",
    # Errors
    "DataModelError",
    "JsonDecodeError",
    "WrongTokenError",
    "UnboundCodecError",
    "UnknownAttributeError",
]
