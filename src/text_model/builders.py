"""
Builders for annotation records.

A builder is a mutable, single-owner draft. `build()` copies every collection
it holds into a new immutable record, so mutating the builder afterwards (or
building again from it) never changes a record that was already built.

Usage:
    builder = TokenBuilder(0, 5, "Hello")
    builder.add_normalized("hello")
    builder.add_analysis(MorphoAnalysisBuilder().lemma("hello").build())
    token = builder.build()
"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Type

from .types import (
    ArabicMorphoAnalysis,
    BaseAttribute,
    DetectionResult,
    Entity,
    EntityMention,
    HanMorphoAnalysis,
    LanguageDetection,
    ListAttribute,
    MorphoAnalysis,
    ResolvedEntity,
    ScriptRegion,
    T,
    Token,
    TranslatedData,
    TranslatedTokens,
)


class BaseAttributeBuilder:
    """Common extended-properties handling for all builders."""

    def __init__(self):
        self._extended_properties: Dict[str, Any] = {}

    def extended_property(self, key: str, value: Any) -> "BaseAttributeBuilder":
        """Set one extended property, replacing any previous value for the key."""
        self._extended_properties[key] = value
        return self

    def extended_properties(self, properties: Mapping[str, Any]) -> "BaseAttributeBuilder":
        self._extended_properties.update(properties)
        return self

    def _fields(self) -> Dict[str, Any]:
        return {"extended_properties": dict(self._extended_properties)}


class AttributeBuilder(BaseAttributeBuilder):
    """
    Builder for span-only records such as Sentence and BaseNounPhrase.

    Args:
        attribute_type: record class to build
        start_offset: first character of the span
        end_offset: one past the last character of the span
    """

    def __init__(self, attribute_type: Type[BaseAttribute], start_offset: int, end_offset: int):
        super().__init__()
        self.attribute_type = attribute_type
        self.start_offset = start_offset
        self.end_offset = end_offset

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(start_offset=self.start_offset, end_offset=self.end_offset)
        return fields

    def build(self):
        return self.attribute_type(**self._fields())


# === MORPHOLOGICAL ANALYSES ===

class MorphoAnalysisBuilder(BaseAttributeBuilder):
    """Builder for generic morphological analyses."""

    analysis_type = MorphoAnalysis

    def __init__(self):
        super().__init__()
        self._lemma: Optional[str] = None
        self._part_of_speech: Optional[str] = None
        self._raw: Optional[str] = None
        self._components: List[Token] = []

    def lemma(self, lemma: str) -> "MorphoAnalysisBuilder":
        self._lemma = lemma
        return self

    def part_of_speech(self, part_of_speech: str) -> "MorphoAnalysisBuilder":
        self._part_of_speech = part_of_speech
        return self

    def raw(self, raw: str) -> "MorphoAnalysisBuilder":
        self._raw = raw
        return self

    def add_component(self, component: Token) -> "MorphoAnalysisBuilder":
        self._components.append(component)
        return self

    def copy_common(self, analysis: MorphoAnalysis) -> "MorphoAnalysisBuilder":
        """
        Copy the fields shared by all variants from another analysis.

        Empty lemma, part of speech and raw strings are skipped.
        Extended properties are not copied.
        """
        if analysis.lemma:
            self.lemma(analysis.lemma)
        if analysis.part_of_speech:
            self.part_of_speech(analysis.part_of_speech)
        if analysis.raw:
            self.raw(analysis.raw)
        for component in analysis.components:
            self.add_component(component)
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(
            lemma=self._lemma,
            part_of_speech=self._part_of_speech,
            raw=self._raw,
            components=tuple(self._components),
        )
        return fields

    def build(self) -> MorphoAnalysis:
        return self.analysis_type(**self._fields())


class HanMorphoAnalysisBuilder(MorphoAnalysisBuilder):
    """Builder for Han (Chinese/Japanese) morphological analyses."""

    analysis_type = HanMorphoAnalysis

    def __init__(self):
        super().__init__()
        self._readings: List[str] = []

    def add_reading(self, reading: str) -> "HanMorphoAnalysisBuilder":
        self._readings.append(reading)
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields["readings"] = tuple(self._readings)
        return fields


class ArabicMorphoAnalysisBuilder(MorphoAnalysisBuilder):
    """Builder for Arabic morphological analyses."""

    analysis_type = ArabicMorphoAnalysis

    def __init__(self):
        super().__init__()
        self._prefix_length: Optional[int] = None
        self._stem_length: Optional[int] = None
        self._root: Optional[str] = None
        self._definite_article: Optional[bool] = None
        self._strippable_prefix: Optional[bool] = None
        self._prefixes: List[str] = []
        self._prefix_tags: List[str] = []
        self._stems: List[str] = []
        self._stem_tags: List[str] = []
        self._suffixes: List[str] = []
        self._suffix_tags: List[str] = []

    def lengths(self, prefix_length: int, stem_length: int) -> "ArabicMorphoAnalysisBuilder":
        """Set prefix and stem lengths; they only exist as a pair."""
        self._prefix_length = prefix_length
        self._stem_length = stem_length
        return self

    def root(self, root: str) -> "ArabicMorphoAnalysisBuilder":
        self._root = root
        return self

    def definite_article(self, definite_article: bool) -> "ArabicMorphoAnalysisBuilder":
        self._definite_article = definite_article
        return self

    def strippable_prefix(self, strippable_prefix: bool) -> "ArabicMorphoAnalysisBuilder":
        self._strippable_prefix = strippable_prefix
        return self

    def add_prefix(self, prefix: str, tag: str) -> "ArabicMorphoAnalysisBuilder":
        self._prefixes.append(prefix)
        self._prefix_tags.append(tag)
        return self

    def add_stem(self, stem: str, tag: str) -> "ArabicMorphoAnalysisBuilder":
        self._stems.append(stem)
        self._stem_tags.append(tag)
        return self

    def add_suffix(self, suffix: str, tag: str) -> "ArabicMorphoAnalysisBuilder":
        self._suffixes.append(suffix)
        self._suffix_tags.append(tag)
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(
            prefix_length=self._prefix_length,
            stem_length=self._stem_length,
            root=self._root,
            definite_article=self._definite_article,
            strippable_prefix=self._strippable_prefix,
            prefixes=tuple(self._prefixes),
            prefix_tags=tuple(self._prefix_tags),
            stems=tuple(self._stems),
            stem_tags=tuple(self._stem_tags),
            suffixes=tuple(self._suffixes),
            suffix_tags=tuple(self._suffix_tags),
        )
        return fields


# === TEXT STRUCTURE & ENTITIES ===

class TokenBuilder(AttributeBuilder):
    """Builder for tokens."""

    def __init__(self, start_offset: int, end_offset: int, text: str):
        super().__init__(Token, start_offset, end_offset)
        self.text = text
        self._normalized: List[str] = []
        self._analyses: List[MorphoAnalysis] = []
        self._source: Optional[str] = None

    def add_normalized(self, normalized: str) -> "TokenBuilder":
        self._normalized.append(normalized)
        return self

    def add_analysis(self, analysis: MorphoAnalysis) -> "TokenBuilder":
        self._analyses.append(analysis)
        return self

    def source(self, source: str) -> "TokenBuilder":
        self._source = source
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(
            text=self.text,
            normalized=tuple(self._normalized),
            analyses=tuple(self._analyses),
            source=self._source,
        )
        return fields


class EntityBuilder(AttributeBuilder):
    """Builder for entities. The coreference chain id defaults to -1."""

    def __init__(self, start_offset: int, end_offset: int, entity_id: str,
                 entity_type: Type[Entity] = Entity):
        super().__init__(entity_type, start_offset, end_offset)
        self.entity_id = entity_id
        self._confidence = 0.0
        self._coreference_chain_id = -1

    @classmethod
    def from_entity(cls, entity: Entity) -> "EntityBuilder":
        """Start a builder holding a copy of an existing entity's fields."""
        builder = cls(entity.start_offset, entity.end_offset, entity.entity_id, type(entity))
        builder.confidence(entity.confidence)
        builder.coreference_chain_id(entity.coreference_chain_id)
        builder.extended_properties(entity.extended_properties)
        return builder

    def confidence(self, confidence: float) -> "EntityBuilder":
        self._confidence = confidence
        return self

    def coreference_chain_id(self, coreference_chain_id: int) -> "EntityBuilder":
        self._coreference_chain_id = coreference_chain_id
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(
            entity_id=self.entity_id,
            confidence=self._confidence,
            coreference_chain_id=self._coreference_chain_id,
        )
        return fields


class ResolvedEntityBuilder(EntityBuilder):
    def __init__(self, start_offset: int, end_offset: int, entity_id: str):
        super().__init__(start_offset, end_offset, entity_id, ResolvedEntity)


class EntityMentionBuilder(AttributeBuilder):
    """Builder for entity mentions."""

    def __init__(self, start_offset: int, end_offset: int, entity_type: str):
        super().__init__(EntityMention, start_offset, end_offset)
        self._values: Dict[str, Any] = {"entity_type": entity_type}

    def confidence(self, confidence: float) -> "EntityMentionBuilder":
        self._values["confidence"] = confidence
        return self

    def coreference_chain_id(self, coreference_chain_id: int) -> "EntityMentionBuilder":
        self._values["coreference_chain_id"] = coreference_chain_id
        return self

    def flags(self, flags: int) -> "EntityMentionBuilder":
        self._values["flags"] = flags
        return self

    def source(self, source: str) -> "EntityMentionBuilder":
        self._values["source"] = source
        return self

    def subsource(self, subsource: str) -> "EntityMentionBuilder":
        self._values["subsource"] = subsource
        return self

    def normalized(self, normalized: str) -> "EntityMentionBuilder":
        self._values["normalized"] = normalized
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields.update(self._values)
        return fields


class ScriptRegionBuilder(AttributeBuilder):
    def __init__(self, start_offset: int, end_offset: int, script: str):
        super().__init__(ScriptRegion, start_offset, end_offset)
        self.script = script

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields["script"] = self.script
        return fields


# === LANGUAGE & TRANSLATION ===

class LanguageDetectionBuilder(AttributeBuilder):
    """Builder for language detections; results keep the order they were added in."""

    def __init__(self, start_offset: int, end_offset: int):
        super().__init__(LanguageDetection, start_offset, end_offset)
        self._detection_results: List[DetectionResult] = []

    def add_detection_result(self, language: str, confidence: float,
                             script: Optional[str] = None,
                             encoding: Optional[str] = None) -> "LanguageDetectionBuilder":
        self._detection_results.append(
            DetectionResult(language=language, confidence=confidence, script=script, encoding=encoding)
        )
        return self

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields["detection_results"] = tuple(self._detection_results)
        return fields


class TranslatedTokensBuilder(BaseAttributeBuilder):
    def __init__(self, target_language: str, target_script: Optional[str] = None):
        super().__init__()
        self.target_language = target_language
        self.target_script = target_script
        self._translations: List[str] = []

    def add_translation(self, translation: str) -> "TranslatedTokensBuilder":
        self._translations.append(translation)
        return self

    def build(self) -> TranslatedTokens:
        return TranslatedTokens(
            target_language=self.target_language,
            target_script=self.target_script,
            translations=tuple(self._translations),
            **self._fields(),
        )


class TranslatedDataBuilder(BaseAttributeBuilder):
    def __init__(self, target_language: str, translation: str, target_script: Optional[str] = None):
        super().__init__()
        self.target_language = target_language
        self.target_script = target_script
        self.translation = translation

    def build(self) -> TranslatedData:
        return TranslatedData(
            target_language=self.target_language,
            target_script=self.target_script,
            translation=self.translation,
            **self._fields(),
        )


# === LAYERS ===

class ListAttributeBuilder(BaseAttributeBuilder, Generic[T]):
    """
    Builder for a whole annotation layer.

    Args:
        item_type: record class of the layer's items (e.g. Token)
    """

    def __init__(self, item_type: Type[T]):
        super().__init__()
        self.item_type = item_type
        self._items: List[T] = []

    def add(self, item: T) -> "ListAttributeBuilder[T]":
        self._items.append(item)
        return self

    def add_all(self, items) -> "ListAttributeBuilder[T]":
        self._items.extend(items)
        return self

    def build(self) -> ListAttribute[T]:
        return ListAttribute[self.item_type](items=tuple(self._items), **self._fields())
