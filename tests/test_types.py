#!/usr/bin/env python3
"""
Tests for the annotation record types

Open record shape, immutability, structural equality and hashing.
"""

import math

import pytest
from pydantic import ValidationError

from src.text_model import (
    ArabicMorphoAnalysis,
    AttributeKey,
    BaseNounPhrase,
    Entity,
    HanMorphoAnalysis,
    MapperConfig,
    MorphoAnalysis,
    ResolvedEntity,
    Sentence,
    Token,
)


class TestAttributeKey:
    """Test the attribute key catalog."""

    @pytest.mark.parametrize("key,wire_name", [
        (AttributeKey.TOKEN, "token"),
        (AttributeKey.SENTENCE, "sentence"),
        (AttributeKey.ENTITY_MENTION, "entityMention"),
        (AttributeKey.RESOLVED_ENTITY, "resolvedEntity"),
        (AttributeKey.SCRIPT_REGION, "scriptRegion"),
        (AttributeKey.BASE_NOUN_PHRASE, "baseNounPhrase"),
        (AttributeKey.LANGUAGE_DETECTION, "languageDetection"),
        (AttributeKey.LANGUAGE_DETECTION_REGIONS, "languageDetectionRegions"),
        (AttributeKey.TRANSLATED_TOKENS, "translatedTokens"),
        (AttributeKey.TRANSLATED_DATA, "translatedData"),
    ])
    def test_wire_names(self, key, wire_name):
        """Each key maps to its wire name and back."""
        assert key.key == wire_name
        assert str(key) == wire_name
        assert AttributeKey.from_key(wire_name) is key

    def test_catalog_is_closed(self):
        """Unknown or differently cased names are not keys."""
        assert len(AttributeKey) == 10
        assert AttributeKey.from_key("tokens") is None
        assert AttributeKey.from_key("Token") is None


class TestOpenRecord:
    """Test extended property folding and flattening."""

    def test_unknown_fields_are_folded(self):
        """Keys the schema does not know land in extended_properties."""
        token = Token.model_validate({
            "startOffset": 0,
            "endOffset": 5,
            "text": "Hello",
            "fooBar": {"x": 1},
            "weight": 2,
        })

        assert token.text == "Hello"
        assert dict(token.extended_properties) == {"fooBar": {"x": 1}, "weight": 2}

    def test_field_names_and_aliases_are_known(self):
        """Snake and camel names are both declared fields."""
        token = Token.model_validate({"start_offset": 1, "endOffset": 2})

        assert token.start_offset == 1
        assert token.end_offset == 2
        assert dict(token.extended_properties) == {}

    def test_explicit_bag_is_merged(self):
        """Built from Python, an extendedProperties object is the bag itself."""
        token = Token.model_validate({
            "startOffset": 0,
            "endOffset": 1,
            "extendedProperties": {"a": 1},
            "b": 2,
        })
        assert dict(token.extended_properties) == {"a": 1, "b": 2}

    def test_bag_is_flattened_on_dump(self):
        """Bag entries are written beside the declared fields."""
        token = Token.model_validate({"startOffset": 0, "endOffset": 1, "text": "a", "fooBar": {"x": 1}})

        assert token.model_dump(by_alias=True) == {
            "startOffset": 0,
            "endOffset": 1,
            "text": "a",
            "normalized": (),
            "analyses": (),
            "fooBar": {"x": 1},
        }

    def test_unset_optional_fields_are_omitted(self):
        """Unset optional fields and an empty bag are not dumped."""
        dumped = Token(start_offset=0, end_offset=1).model_dump(by_alias=True)
        assert "source" not in dumped
        assert "extendedProperties" not in dumped

    def test_declared_field_wins_over_bag(self):
        """A declared field hides a bag entry of the same name."""
        token = Token(start_offset=0, end_offset=1, text="real", extended_properties={"text": "bag"})
        assert token.model_dump(by_alias=True)["text"] == "real"

    def test_no_range_checks(self):
        """Offsets and confidences are stored as given."""
        sentence = Sentence(start_offset=5, end_offset=2)
        entity = Entity(start_offset=-1, end_offset=0, confidence=7.5)

        assert (sentence.start_offset, sentence.end_offset) == (5, 2)
        assert entity.confidence == 7.5

    def test_analyses_without_codec_stay_generic(self):
        """Without a bound codec, variant fields stay in the bag."""
        token = Token.model_validate({
            "startOffset": 0,
            "endOffset": 1,
            "analyses": [{"lemma": "书", "readings": ["shu1"]}],
        })

        assert type(token.analyses[0]) is MorphoAnalysis
        assert dict(token.analyses[0].extended_properties) == {"readings": ("shu1",)}

    def test_bag_name_on_the_wire_is_an_ordinary_key(self, mapper):
        """A wire key spelled like the bag is folded verbatim, whatever its value."""
        analysis = mapper.read_morpho_analyses([{"lemma": "a", "extendedProperties": "x", "foo": 1}])[0]

        assert type(analysis) is MorphoAnalysis
        assert dict(analysis.extended_properties) == {"extendedProperties": "x", "foo": 1}
        assert mapper.write_morpho_analyses([analysis])[0] == {
            "lemma": "a",
            "components": (),
            "extendedProperties": "x",
            "foo": 1,
        }

    def test_bag_shaped_wire_object_keeps_its_shape(self, mapper):
        """An object under the bag's name is not merged into the bag."""
        layer = mapper.decode_layer("sentence", {"items": [
            {"startOffset": 0, "endOffset": 1, "extendedProperties": {"k": "v"}},
        ]})
        sentence = layer.items[0]

        assert dict(sentence.extended_properties) == {"extendedProperties": {"k": "v"}}
        assert "k" not in sentence.extended_properties
        assert sentence.model_dump(by_alias=True)["extendedProperties"] == {"k": "v"}


class TestImmutability:
    """Test that records cannot be changed after construction."""

    def test_fields_are_frozen(self):
        """Assigning a field raises."""
        token = Token(start_offset=0, end_offset=1, text="a")
        with pytest.raises(ValidationError):
            token.text = "b"

    def test_extended_properties_are_read_only(self):
        """The bag rejects assignment."""
        token = Token(start_offset=0, end_offset=1, extended_properties={"a": 1})
        with pytest.raises(TypeError):
            token.extended_properties["b"] = 2

    def test_bag_is_copied_on_construction(self):
        """The caller's dict is not shared."""
        bag = {"a": 1}
        token = Token(start_offset=0, end_offset=1, extended_properties=bag)
        bag["b"] = 2
        assert dict(token.extended_properties) == {"a": 1}

    def test_nested_bag_values_are_frozen(self):
        """Lists and objects inside the bag are deep-copied into read-only form."""
        tags = ["a"]
        token = Token(start_offset=0, end_offset=1, extended_properties={"tags": tags, "meta": {"k": 1}})
        tags.append("b")

        assert token.extended_properties["tags"] == ("a",)
        with pytest.raises(TypeError):
            token.extended_properties["meta"]["k"] = 2
        assert token.model_dump(by_alias=True)["tags"] == ["a"]
        assert token.model_dump(by_alias=True)["meta"] == {"k": 1}


class TestEquality:
    """Test structural equality and hashing."""

    def test_equal_records_hash_equal(self):
        """Equal records hash equal and dedupe in sets."""
        a = Token(start_offset=0, end_offset=5, text="Hello", normalized=("hello",))
        b = Token(start_offset=0, end_offset=5, text="Hello", normalized=("hello",))

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_extended_properties_take_part(self):
        """The bag takes part in equality."""
        a = Token(start_offset=0, end_offset=1, extended_properties={"x": 1})
        b = Token(start_offset=0, end_offset=1, extended_properties={"x": 2})
        assert a != b

    def test_bag_order_does_not_matter(self):
        """Bag key order does not affect equality or hash."""
        a = Token(start_offset=0, end_offset=1, extended_properties={"a": 1, "b": [1, 2]})
        b = Token(start_offset=0, end_offset=1, extended_properties={"b": [1, 2], "a": 1})

        assert a == b
        assert hash(a) == hash(b)

    def test_different_types_with_same_fields(self):
        """Records of different types are never equal."""
        assert Sentence(start_offset=0, end_offset=3) != BaseNounPhrase(start_offset=0, end_offset=3)
        assert Entity(start_offset=0, end_offset=3) != ResolvedEntity(start_offset=0, end_offset=3)

    def test_variants_differ_from_generic(self):
        """A Han record differs from a generic one with the same fields."""
        generic = MorphoAnalysis(lemma="书")
        han = HanMorphoAnalysis(lemma="书")
        assert generic != han

    def test_nan_confidences_are_equal(self):
        """NaN confidences compare and hash equal."""
        a = Entity(start_offset=0, end_offset=4, entity_id="Q1", confidence=math.nan)
        b = Entity(start_offset=0, end_offset=4, entity_id="Q1", confidence=float("nan"))

        assert a == b
        assert hash(a) == hash(b)

    def test_signed_zero_confidences_differ(self):
        """0.0 and -0.0 are different confidences."""
        a = Entity(start_offset=0, end_offset=4, confidence=0.0)
        b = Entity(start_offset=0, end_offset=4, confidence=-0.0)
        assert a != b

    def test_coreference_chain_default(self):
        """The coreference chain defaults to -1."""
        entity = Entity(start_offset=0, end_offset=4, entity_id="Q1")

        assert entity.coreference_chain_id == -1
        assert entity != Entity(start_offset=0, end_offset=4, entity_id="Q1", coreference_chain_id=0)

    def test_not_equal_to_other_objects(self):
        """Records never equal plain tuples."""
        assert Sentence(start_offset=0, end_offset=1) != (0, 1)


class TestArabicAnalysis:
    """Test Arabic-specific record behavior."""

    def test_lone_length_is_dropped(self):
        """A length without its pair is dropped."""
        analysis = ArabicMorphoAnalysis.model_validate({"lemma": "x", "prefixLength": 1})

        assert analysis.prefix_length is None
        assert analysis.stem_length is None

    def test_paired_lengths_are_kept(self):
        """Paired lengths are kept."""
        analysis = ArabicMorphoAnalysis(prefix_length=2, stem_length=4)
        assert (analysis.prefix_length, analysis.stem_length) == (2, 4)

    def test_pairs(self, arabic_analysis):
        """Values and tags zip into pairs."""
        assert arabic_analysis.prefix_pairs == (("ال", "DET"),)
        assert arabic_analysis.stem_pairs == (("كتاب", "NOUN"),)
        assert arabic_analysis.suffix_pairs == (("ة", "FEM"),)


class TestMapperConfig:
    def test_defaults(self):
        """Default config is compact and lenient."""
        config = MapperConfig()
        assert config.indent is None
        assert config.strict_attributes is False

    def test_rejects_unknown_options(self):
        """Unknown options are rejected."""
        with pytest.raises(ValidationError):
            MapperConfig(pretty=True)

    def test_rejects_negative_indent(self):
        """A negative indent is rejected."""
        with pytest.raises(ValidationError):
            MapperConfig(indent=-1)
