"""
Decoder registry.

Resolves the decoder for a model type and carries the validation context
that nested decoding sees; the context marks its input as wire objects.
Per-field list codecs (such as the polymorphic morpho-analysis codec) are
bound against the registry once and then published in the context, where
model field validators pick them up.
"""

from functools import partial
from logging import getLogger
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Type

from pydantic import BaseModel

from ..types import WIRE_CONTEXT_KEY

logger = getLogger(__name__)

Decoder = Callable[[Any], BaseModel]


class DecoderRegistry:
    """
    Registry of per-type decoders sharing one validation context.

    A decoder is a callable taking a JSON tree (dicts, lists, scalars) and
    returning a validated model. Decoders are created on first request and
    cached. Registering list codecs is a setup step; after setup the registry
    and its decoders are read-only and may be shared between threads.
    """

    def __init__(self):
        self._decoders: Dict[type, Decoder] = {}
        self._context: Dict[str, Any] = {WIRE_CONTEXT_KEY: True}

    @property
    def context(self) -> Mapping[str, Any]:
        return MappingProxyType(self._context)

    def find_decoder(self, model_type: Type[BaseModel]) -> Decoder:
        """Return the cached decoder for model_type, creating it if needed."""
        decoder = self._decoders.get(model_type)
        if decoder is None:
            decoder = partial(self._decode, model_type)
            self._decoders[model_type] = decoder
        return decoder

    def _decode(self, model_type: Type[BaseModel], value: Any) -> BaseModel:
        return model_type.model_validate(value, context=self._context)

    def register_list_codec(self, context_key: str, codec):
        """
        Bind codec against this registry and publish it under context_key.

        Args:
            context_key: validation context key the owning field looks up
            codec: codec exposing contextualize(registry)

        Returns:
            The bound codec
        """
        bound = codec.contextualize(self)
        self._context[context_key] = bound
        logger.debug(f"Registered list codec under '{context_key}': {type(bound).__name__}")
        return bound
