"""
AnnotatedText: a text and its annotation layers.

The root of the data model. An AnnotatedText is an immutable snapshot of
character data, a mapping from attribute key to annotation layer (at most one
layer per key) and document-level metadata. It behaves like a read-only
character sequence over its data.

Usage:
    builder = AnnotatedTextBuilder().data("Hello world")
    builder.tokens(token_layer)
    builder.document_metadata("source", "newswire")
    text = builder.build()

    if text.tokens is not None:
        for token in text.tokens.items:
            print(token.text, text[token.start_offset:token.end_offset])
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_validator, model_serializer
from pydantic.alias_generators import to_camel

from .attribute_key import AttributeKey
from .types import (
    BaseNounPhrase,
    EntityMention,
    LanguageDetection,
    ListAttribute,
    ResolvedEntity,
    ScriptRegion,
    Sentence,
    Token,
    TranslatedData,
    TranslatedTokens,
    freeze_tree,
    structural_key,
    thaw_tree,
)

# Record type stored under each attribute key
LAYER_TYPES: Mapping[AttributeKey, type] = MappingProxyType({
    AttributeKey.TOKEN: ListAttribute[Token],
    AttributeKey.SENTENCE: ListAttribute[Sentence],
    AttributeKey.ENTITY_MENTION: ListAttribute[EntityMention],
    AttributeKey.RESOLVED_ENTITY: ListAttribute[ResolvedEntity],
    AttributeKey.SCRIPT_REGION: ListAttribute[ScriptRegion],
    AttributeKey.BASE_NOUN_PHRASE: ListAttribute[BaseNounPhrase],
    AttributeKey.LANGUAGE_DETECTION: LanguageDetection,
    AttributeKey.LANGUAGE_DETECTION_REGIONS: ListAttribute[LanguageDetection],
    AttributeKey.TRANSLATED_TOKENS: ListAttribute[TranslatedTokens],
    AttributeKey.TRANSLATED_DATA: ListAttribute[TranslatedData],
})

KeyLike = Union[AttributeKey, str]


def _key_name(key: KeyLike) -> str:
    return key.key if isinstance(key, AttributeKey) else key


class AnnotatedText(BaseModel):
    """
    Immutable text plus annotation layers and document metadata.

    Layer accessors (tokens, sentences, ...) return None when no layer is
    attached under the corresponding key.
    """

    data: str = Field(default="", description="The character data being annotated")
    attributes: Mapping[str, Any] = Field(
        default_factory=dict,
        description="Annotation layers keyed by attribute key wire name",
    )
    document_metadata: Mapping[str, Tuple[str, ...]] = Field(
        default_factory=dict,
        description="Document-level metadata; values are lists of strings",
        examples=[{"source": ("newswire",)}],
    )

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("attributes", mode="after")
    @classmethod
    def _freeze_attributes(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        # Layers kept as plain JSON trees are deep-copied into read-only form
        return MappingProxyType({key: freeze_tree(layer) for key, layer in value.items()})

    @field_validator("document_metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_serializer
    def _serialize(self, info: SerializationInfo) -> Dict[str, Any]:
        attributes = {}
        for key, layer in self.attributes.items():
            if isinstance(layer, BaseModel):
                attributes[key] = layer.model_dump(mode=info.mode, by_alias=info.by_alias)
            else:
                attributes[key] = thaw_tree(layer)
        metadata_key = "documentMetadata" if info.by_alias else "document_metadata"
        return {
            "data": self.data,
            "attributes": attributes,
            metadata_key: {key: list(values) for key, values in self.document_metadata.items()},
        }

    # === CHARACTER SEQUENCE ===

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index):
        return self.data[index]

    def __str__(self) -> str:
        return self.data

    def __hash__(self) -> int:
        return hash((self.data, structural_key(self.attributes), structural_key(self.document_metadata)))

    # === LAYER ACCESS ===

    def attribute(self, key: KeyLike) -> Optional[Any]:
        """Return the layer stored under key, or None."""
        return self.attributes.get(_key_name(key))

    @property
    def tokens(self) -> Optional[ListAttribute[Token]]:
        return self.attribute(AttributeKey.TOKEN)

    @property
    def sentences(self) -> Optional[ListAttribute[Sentence]]:
        return self.attribute(AttributeKey.SENTENCE)

    @property
    def entity_mentions(self) -> Optional[ListAttribute[EntityMention]]:
        return self.attribute(AttributeKey.ENTITY_MENTION)

    @property
    def resolved_entities(self) -> Optional[ListAttribute[ResolvedEntity]]:
        return self.attribute(AttributeKey.RESOLVED_ENTITY)

    @property
    def script_regions(self) -> Optional[ListAttribute[ScriptRegion]]:
        return self.attribute(AttributeKey.SCRIPT_REGION)

    @property
    def base_noun_phrases(self) -> Optional[ListAttribute[BaseNounPhrase]]:
        return self.attribute(AttributeKey.BASE_NOUN_PHRASE)

    @property
    def whole_text_language_detection(self) -> Optional[LanguageDetection]:
        return self.attribute(AttributeKey.LANGUAGE_DETECTION)

    @property
    def language_detection_regions(self) -> Optional[ListAttribute[LanguageDetection]]:
        return self.attribute(AttributeKey.LANGUAGE_DETECTION_REGIONS)

    @property
    def translated_tokens(self) -> Optional[ListAttribute[TranslatedTokens]]:
        return self.attribute(AttributeKey.TRANSLATED_TOKENS)

    @property
    def translated_data(self) -> Optional[ListAttribute[TranslatedData]]:
        return self.attribute(AttributeKey.TRANSLATED_DATA)

    def to_builder(self) -> "AnnotatedTextBuilder":
        """Start a builder seeded with a copy of this text's contents."""
        return AnnotatedTextBuilder(self)


class AnnotatedTextBuilder:
    """
    Mutable builder for AnnotatedText.

    Seeding from an existing AnnotatedText copies its entries into the
    builder's own stores. Each layer setter replaces any previous layer under
    the same key. Not thread-safe.
    """

    def __init__(self, starting_point: Optional[AnnotatedText] = None):
        self._data = ""
        self._attributes: Dict[str, Any] = {}
        self._document_metadata: Dict[str, List[str]] = {}
        if starting_point is not None:
            self._data = starting_point.data
            self._attributes.update(starting_point.attributes)
            for key, values in starting_point.document_metadata.items():
                self._document_metadata[key] = list(values)

    def data(self, data: str) -> "AnnotatedTextBuilder":
        """Set the character data, replacing any previous setting."""
        self._data = data
        return self

    def get_data(self) -> str:
        return self._data

    def document_metadata(self, key: str, value: Union[str, Sequence[str]]) -> "AnnotatedTextBuilder":
        """
        Set one document metadata entry, replacing any previous value for key.

        A single string is stored as a one-element list.
        """
        if isinstance(value, str):
            self._document_metadata[key] = [value]
        else:
            self._document_metadata[key] = list(value)
        return self

    def get_document_metadata(self) -> Mapping[str, List[str]]:
        return MappingProxyType(self._document_metadata)

    def attribute(self, key: KeyLike, layer: Any) -> "AnnotatedTextBuilder":
        """Attach a layer under key. Replaces any previous layer for the key."""
        self._attributes[_key_name(key)] = layer
        return self

    def get_attributes(self) -> Mapping[str, Any]:
        return MappingProxyType(self._attributes)

    def tokens(self, tokens: ListAttribute[Token]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.TOKEN, tokens)

    def sentences(self, sentences: ListAttribute[Sentence]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.SENTENCE, sentences)

    def entity_mentions(self, entity_mentions: ListAttribute[EntityMention]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.ENTITY_MENTION, entity_mentions)

    def resolved_entities(self, resolved_entities: ListAttribute[ResolvedEntity]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.RESOLVED_ENTITY, resolved_entities)

    def script_regions(self, script_regions: ListAttribute[ScriptRegion]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.SCRIPT_REGION, script_regions)

    def base_noun_phrases(self, base_noun_phrases: ListAttribute[BaseNounPhrase]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.BASE_NOUN_PHRASE, base_noun_phrases)

    def whole_document_language_detection(self, language_detection: LanguageDetection) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.LANGUAGE_DETECTION, language_detection)

    def language_detection_regions(self, regions: ListAttribute[LanguageDetection]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.LANGUAGE_DETECTION_REGIONS, regions)

    def translated_tokens(self, translated_tokens: ListAttribute[TranslatedTokens]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.TRANSLATED_TOKENS, translated_tokens)

    def translated_data(self, translated_data: ListAttribute[TranslatedData]) -> "AnnotatedTextBuilder":
        return self.attribute(AttributeKey.TRANSLATED_DATA, translated_data)

    def build(self) -> AnnotatedText:
        return AnnotatedText(
            data=self._data,
            attributes=dict(self._attributes),
            document_metadata={key: tuple(values) for key, values in self._document_metadata.items()},
        )
