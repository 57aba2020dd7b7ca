"""
Annotated Text Data Types

Immutable pydantic models for the annotations attached to a text: tokens,
sentences, entities, script regions, language detection, translations and
morphological analyses.

Every record carries an open `extended_properties` bag. When a record is
validated from a wire object, keys that match neither a field name nor its
camelCase wire alias are moved into the bag; when it is serialized, the bag is
flattened back into the object. This keeps fields unknown to the schema intact
across a round trip.

Offsets are character offsets into the owning text, half-open: in
"Hello world" the token "Hello" spans [0, 5). Offsets and confidences are
stored as given, without range or order checks.
"""

import math
import struct
from enum import Enum
from logging import getLogger
from types import MappingProxyType
from typing import Any, ClassVar, Dict, FrozenSet, Generic, Mapping, Optional, Tuple, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = getLogger(__name__)

# Validation context key under which a bound morpho-analysis list codec is
# published (see codec.registry.DecoderRegistry).
MORPHO_CODEC_CONTEXT_KEY = "morpho_analysis_list_codec"

# Validation context flag set while decoding wire objects. The bag is
# flattened on the wire, so there its own name is an ordinary unknown key.
WIRE_CONTEXT_KEY = "wire_input"

EXTENDED_PROPERTIES_NAMES = frozenset({"extendedProperties", "extended_properties"})


def model_origin(model_type: type) -> type:
    """Return the unparametrized class of a (possibly generic) model type."""
    metadata = getattr(model_type, "__pydantic_generic_metadata__", None) or {}
    return metadata.get("origin") or model_type


def freeze_tree(value: Any) -> Any:
    """Deep-copy a JSON tree into read-only mappings and tuples."""
    if isinstance(value, BaseModel):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_tree(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_tree(item) for item in value)
    return value


def thaw_tree(value: Any) -> Any:
    """Inverse of freeze_tree: plain dicts and lists, ready for json or msgpack."""
    if isinstance(value, BaseModel):
        return value
    if isinstance(value, Mapping):
        return {key: thaw_tree(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_tree(item) for item in value]
    return value


def structural_key(value: Any) -> Any:
    """
    Convert a value into a hashable form used for equality and hashing.

    Sequences keep their order, mappings become order-insensitive frozensets.
    Floats compare by bit pattern (all NaNs are equal, +0.0 differs from -0.0).
    """
    if isinstance(value, BaseAttribute):
        return (model_origin(type(value)), value._comparison_key())
    if isinstance(value, float):
        if math.isnan(value):
            return (float, "nan")
        return (float, struct.unpack("<q", struct.pack("<d", value))[0])
    if isinstance(value, Mapping):
        return frozenset((key, structural_key(item)) for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(structural_key(item) for item in value)
    return value


_known_names_cache: Dict[type, FrozenSet[str]] = {}


def _known_names(model_type: type) -> FrozenSet[str]:
    names = _known_names_cache.get(model_type)
    if names is None:
        names = set()
        for name, info in model_type.model_fields.items():
            names.add(name)
            names.add(info.alias or to_camel(name))
        names = frozenset(names)
        _known_names_cache[model_type] = names
    return names


# === BASE TYPES ===

class BaseAttribute(BaseModel):
    """
    Root of all annotation records.

    Holds the open bag of extended properties and implements the open record
    shape, structural equality and hashing shared by every record type.
    """

    extended_properties: Mapping[str, Any] = Field(
        default_factory=dict,
        exclude=True,
        description="Fields not modeled by the record type, keyed by wire name",
        examples=[{}, {"confidenceSource": "model-v2"}],
    )

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    @model_validator(mode="before")
    @classmethod
    def _fold_unknown_fields(cls, data: Any, info: ValidationInfo) -> Any:
        """Move keys the schema does not know into extended_properties."""
        if not isinstance(data, Mapping):
            return data

        known = _known_names(cls)
        if (info.context or {}).get(WIRE_CONTEXT_KEY):
            known = known - EXTENDED_PROPERTIES_NAMES
        leftovers = {key: value for key, value in data.items() if key not in known}
        if not leftovers:
            return data

        folded = {key: value for key, value in data.items() if key in known}
        extended: Dict[str, Any] = {}
        for name in EXTENDED_PROPERTIES_NAMES:
            if folded.get(name) is not None:
                extended.update(folded.pop(name))
        extended.update(leftovers)
        folded["extended_properties"] = extended
        return folded

    @field_validator("extended_properties", mode="after")
    @classmethod
    def _freeze_extended_properties(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze_tree(value)

    @model_serializer(mode="wrap")
    def _flatten_extended_properties(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        # Unset optional fields are omitted, declared fields win over the bag
        data = {key: value for key, value in handler(self).items() if value is not None}
        for key, value in self.extended_properties.items():
            data.setdefault(key, thaw_tree(value))
        return data

    def _comparison_key(self) -> Tuple[Any, ...]:
        return tuple(structural_key(getattr(self, name)) for name in type(self).model_fields)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BaseAttribute):
            return NotImplemented
        if model_origin(type(self)) is not model_origin(type(other)):
            return False
        return self._comparison_key() == other._comparison_key()

    def __hash__(self) -> int:
        return hash((model_origin(type(self)).__name__, self._comparison_key()))


class Attribute(BaseAttribute):
    """An annotation over a half-open character range of the text."""

    start_offset: int = Field(
        ...,
        description="Offset of the first character of the annotated range",
        examples=[0, 6],
    )
    end_offset: int = Field(
        ...,
        description="Offset one past the last character of the annotated range",
        examples=[5, 11],
    )


# === MORPHOLOGICAL ANALYSES ===

class MorphoVariant(str, Enum):
    """Tag naming the variant of a morphological analysis."""

    GENERIC = "generic"
    HAN = "han"
    ARABIC = "arabic"


class MorphoAnalysis(BaseAttribute):
    """
    Generic morphological analysis of a token.

    Han and Arabic analyses extend this record with language-specific fields.
    On the wire there is no type tag; see codec.morpho_codec for how the
    variant is recovered.
    """

    variant: ClassVar[MorphoVariant] = MorphoVariant.GENERIC

    lemma: Optional[str] = Field(default=None, description="Dictionary form", examples=["be", "书"])
    part_of_speech: Optional[str] = Field(
        default=None,
        description="Part-of-speech tag in the analyzer's tag set",
        examples=["VERB", "NOUN"],
    )
    raw: Optional[str] = Field(
        default=None,
        description="Analyzer-specific raw analysis string",
    )
    components: Tuple["Token", ...] = Field(
        default=(),
        description="Component tokens of a compound (e.g. German or Korean compounds)",
    )


class HanMorphoAnalysis(MorphoAnalysis):
    """Morphological analysis for Chinese and Japanese text."""

    variant: ClassVar[MorphoVariant] = MorphoVariant.HAN

    readings: Tuple[str, ...] = Field(
        default=(),
        description="Readings of the token (pinyin, kana, ...)",
        examples=[("shu1",), ("ほん",)],
    )


class ArabicMorphoAnalysis(MorphoAnalysis):
    """
    Morphological analysis for Arabic text.

    Prefixes, stems and suffixes are kept as parallel value / tag sequences,
    which is also their wire shape. The *_pairs properties zip them together.
    """

    variant: ClassVar[MorphoVariant] = MorphoVariant.ARABIC

    prefix_length: Optional[int] = Field(default=None, description="Length of the prefix in characters")
    stem_length: Optional[int] = Field(default=None, description="Length of the stem in characters")
    root: Optional[str] = None
    definite_article: Optional[bool] = Field(default=None, description="Token carries the definite article")
    strippable_prefix: Optional[bool] = None
    prefixes: Tuple[str, ...] = ()
    prefix_tags: Tuple[str, ...] = ()
    stems: Tuple[str, ...] = ()
    stem_tags: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    suffix_tags: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _require_both_lengths(cls, data: Any) -> Any:
        """Prefix and stem lengths are only meaningful as a pair."""
        if not isinstance(data, Mapping):
            return data
        prefix_keys = [k for k in ("prefixLength", "prefix_length") if data.get(k) is not None]
        stem_keys = [k for k in ("stemLength", "stem_length") if data.get(k) is not None]
        if bool(prefix_keys) == bool(stem_keys):
            return data
        logger.debug(f"Dropping unpaired Arabic length field(s): {prefix_keys or stem_keys}")
        return {key: value for key, value in data.items() if key not in prefix_keys + stem_keys}

    @property
    def prefix_pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(zip(self.prefixes, self.prefix_tags))

    @property
    def stem_pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(zip(self.stems, self.stem_tags))

    @property
    def suffix_pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(zip(self.suffixes, self.suffix_tags))


VARIANT_TYPES: Mapping[MorphoVariant, type] = MappingProxyType({
    MorphoVariant.GENERIC: MorphoAnalysis,
    MorphoVariant.HAN: HanMorphoAnalysis,
    MorphoVariant.ARABIC: ArabicMorphoAnalysis,
})


# === TEXT STRUCTURE ===

class Token(Attribute):
    """
    A token: a word, punctuation mark or other unit of the text.

    When validated with a context that carries a bound morpho-analysis list
    codec, the `analyses` array is decoded polymorphically, so each analysis
    comes back as its own variant. Each analysis always serializes with its
    own variant's shape.
    """

    text: str = Field(default="", description="Token text as it appears in the source", examples=["Hello"])
    normalized: Tuple[str, ...] = Field(
        default=(),
        description="Normalized forms of the token text",
        examples=[("hello",)],
    )
    analyses: Tuple[SerializeAsAny[MorphoAnalysis], ...] = Field(
        default=(),
        description="Morphological analyses, possibly of mixed variants",
    )
    source: Optional[str] = Field(default=None, description="Component that produced the token")

    @field_validator("analyses", mode="before")
    @classmethod
    def _decode_analyses(cls, value: Any, info: ValidationInfo) -> Any:
        codec = (info.context or {}).get(MORPHO_CODEC_CONTEXT_KEY)
        if codec is None:
            return value
        if isinstance(value, (list, tuple)) and all(isinstance(item, MorphoAnalysis) for item in value):
            return value
        return codec.decode(value)


class Sentence(Attribute):
    """A sentence span."""


class BaseNounPhrase(Attribute):
    """A base (non-recursive) noun phrase span."""


class ScriptRegion(Attribute):
    """A region of the text written in a single script."""

    script: str = Field(..., description="ISO 15924 script code", examples=["Latn", "Arab", "Hani"])


# === ENTITIES ===

class EntityMention(Attribute):
    """A mention of a named entity in the text."""

    entity_type: Optional[str] = Field(default=None, examples=["PERSON", "LOCATION"])
    confidence: Optional[float] = None
    coreference_chain_id: Optional[int] = Field(
        default=None,
        description="Index of the mention heading the coreference chain",
    )
    flags: Optional[int] = None
    source: Optional[str] = None
    subsource: Optional[str] = None
    normalized: Optional[str] = None


class Entity(Attribute):
    """
    A resolved entity.

    coreference_chain_id is -1 when the entity is not part of a chain.
    Equality compares confidence bit for bit, so two NaN confidences are
    equal and +0.0 differs from -0.0.
    """

    entity_id: Optional[str] = Field(default=None, description="Knowledge-base identifier", examples=["Q42"])
    coreference_chain_id: int = Field(default=-1, examples=[-1, 0, 3])
    confidence: float = Field(default=0.0, description="Resolution confidence, nominally in [0, 1]")


class ResolvedEntity(Entity):
    """An entity resolved against a knowledge base."""


# === LANGUAGE & TRANSLATION ===

class DetectionResult(BaseAttribute):
    """One candidate of a language detection."""

    language: str = Field(..., description="ISO 639-3 language code", examples=["eng", "ara"])
    encoding: Optional[str] = None
    script: Optional[str] = Field(default=None, examples=["Latn"])
    confidence: float = 0.0


class LanguageDetection(Attribute):
    """Ranked language candidates for a range of the text."""

    detection_results: Tuple[DetectionResult, ...] = ()


class TranslatedTokens(BaseAttribute):
    """Token-by-token translation of the text into one target language."""

    target_language: str = Field(..., examples=["eng"])
    target_script: Optional[str] = None
    translations: Tuple[str, ...] = ()


class TranslatedData(BaseAttribute):
    """Translation of the whole text into one target language."""

    target_language: str = Field(..., examples=["eng"])
    target_script: Optional[str] = None
    translation: str = ""


# === LAYERS ===

T = TypeVar("T", bound=BaseAttribute)


class ListAttribute(BaseAttribute, Generic[T]):
    """
    One whole annotation layer: an ordered sequence of records plus the
    layer's own extended properties.
    """

    items: Tuple[T, ...] = ()


MorphoAnalysis.model_rebuild()
HanMorphoAnalysis.model_rebuild()
ArabicMorphoAnalysis.model_rebuild()
