"""
Reading and writing AnnotatedText documents.

Document wire shape:
    {
        "data": "...",
        "attributes": {
            "token": {"items": [...], <layer extended properties>},
            "languageDetection": {<single LanguageDetection>},
            ...
        },
        "documentMetadata": {"key": ["value", ...]}
    }

Supports JSON text, plain JSON trees (dicts / lists / scalars) and
MessagePack bytes.

Usage:
    mapper = ModelMapper()
    text = mapper.read_value(json_text)
    packed = mapper.to_msgpack(text)
"""

import json
from logging import getLogger
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import msgpack

from ..annotated_text import LAYER_TYPES, AnnotatedText, AnnotatedTextBuilder, KeyLike
from ..attribute_key import AttributeKey
from ..config import MapperConfig
from ..errors import UnknownAttributeError, WrongTokenError
from ..types import MORPHO_CODEC_CONTEXT_KEY, MorphoAnalysis
from .morpho_codec import MorphoAnalysisListCodec, json_token
from .registry import DecoderRegistry

logger = getLogger(__name__)


class ModelMapper:
    """
    Entry point for serializing the data model.

    Construction performs the one-time binding of the polymorphic
    morpho-analysis codec against a fresh DecoderRegistry. A constructed
    mapper holds no per-call state and may be shared between threads.
    """

    def __init__(self, config: Optional[MapperConfig] = None):
        self.config = config or MapperConfig()
        self.registry = DecoderRegistry()
        self.morpho_codec = self.registry.register_list_codec(
            MORPHO_CODEC_CONTEXT_KEY, MorphoAnalysisListCodec()
        )

    # === TREES ===

    def to_tree(self, text: AnnotatedText) -> dict:
        """Convert text into a JSON-compatible tree."""
        return text.model_dump(by_alias=True)

    def from_tree(self, tree: Any) -> AnnotatedText:
        """
        Build an AnnotatedText from a JSON tree.

        Raises:
            WrongTokenError: tree is not an object
            UnknownAttributeError: unknown layer key with strict_attributes set
        """
        if not isinstance(tree, Mapping):
            raise WrongTokenError("START_OBJECT", json_token(tree), "Expected annotated text object")

        builder = AnnotatedTextBuilder().data(tree.get("data") or "")
        for key, values in (tree.get("documentMetadata") or {}).items():
            builder.document_metadata(key, values)
        for key, layer in (tree.get("attributes") or {}).items():
            builder.attribute(key, self.decode_layer(key, layer))
        return builder.build()

    def decode_layer(self, key: KeyLike, value: Any) -> Any:
        """
        Decode one annotation layer stored under key.

        Layers under keys outside the catalog are returned unchanged, unless
        the mapper is strict.
        """
        attribute_key = key if isinstance(key, AttributeKey) else AttributeKey.from_key(key)
        if attribute_key is None:
            if self.config.strict_attributes:
                raise UnknownAttributeError(key)
            logger.debug(f"Keeping layer under unknown attribute key '{key}' as plain JSON")
            return value
        return self.registry.find_decoder(LAYER_TYPES[attribute_key])(value)

    # === JSON TEXT ===

    def write_value_as_string(self, text: AnnotatedText) -> str:
        return json.dumps(
            self.to_tree(text),
            indent=self.config.indent,
            sort_keys=self.config.sort_keys,
            ensure_ascii=self.config.ensure_ascii,
        )

    def read_value(self, json_text: str) -> AnnotatedText:
        return self.from_tree(json.loads(json_text))

    # === MESSAGEPACK ===

    def to_msgpack(self, text: AnnotatedText) -> bytes:
        return msgpack.packb(self.to_tree(text), use_bin_type=True)

    def from_msgpack(self, data: bytes) -> AnnotatedText:
        return self.from_tree(msgpack.unpackb(data, raw=False))

    # === MORPHOLOGICAL ANALYSES ===

    def read_morpho_analyses(self, value: Any) -> Tuple[MorphoAnalysis, ...]:
        """Decode a JSON array of analyses with the bound polymorphic codec."""
        return self.morpho_codec.decode(value)

    def write_morpho_analyses(self, analyses: Iterable[MorphoAnalysis]) -> List[dict]:
        return self.morpho_codec.encode(analyses)
