"""
JSON and MessagePack codec for the annotated text data model.

Usage:
    from src.text_model.codec import ModelMapper

    mapper = ModelMapper()
    text = mapper.read_value(json_text)
    print(mapper.write_value_as_string(text))
"""

from .mapper import ModelMapper
from .morpho_codec import ARABIC_FIELDS, MorphoAnalysisListCodec, json_token, upgrade
from .registry import DecoderRegistry

__all__ = [
    "ModelMapper",
    "MorphoAnalysisListCodec",
    "DecoderRegistry",
    "ARABIC_FIELDS",
    "json_token",
    "upgrade",
]
