"""
Polymorphic codec for arrays of morphological analyses.

The wire format carries no type tag for analyses. Decoding starts with the
generic MorphoAnalysis shape; anything the generic schema does not know ends
up in the record's extended properties. The leftovers then decide whether the
record is really a Han analysis (it has "readings") or an Arabic one (it has
any Arabic-specific field). Once a record is upgraded, every later element of
the same array is decoded with that variant's shape: the switch is sticky and
never reverts within the array, even for elements without variant fields.

The heuristic is order dependent by nature: one qualifying element determines
the decoder for all elements after it.
"""

from logging import getLogger
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..builders import ArabicMorphoAnalysisBuilder, HanMorphoAnalysisBuilder
from ..errors import UnboundCodecError, WrongTokenError
from ..types import MorphoAnalysis, MorphoVariant, VARIANT_TYPES

logger = getLogger(__name__)

# Wire names declared by ArabicMorphoAnalysis and absent from MorphoAnalysis
ARABIC_FIELDS = frozenset({
    "prefixLength",
    "stemLength",
    "root",
    "definiteArticle",
    "strippablePrefix",
    "prefixes",
    "prefixTags",
    "stems",
    "stemTags",
    "suffixes",
    "suffixTags",
})

READINGS_FIELD = "readings"

START_ARRAY = "START_ARRAY"


def json_token(value: Any) -> str:
    """Name the JSON token a decoded tree value starts with."""
    if value is None:
        return "VALUE_NULL"
    if isinstance(value, bool):
        return "VALUE_TRUE" if value else "VALUE_FALSE"
    if isinstance(value, int):
        return "VALUE_NUMBER_INT"
    if isinstance(value, float):
        return "VALUE_NUMBER_FLOAT"
    if isinstance(value, str):
        return "VALUE_STRING"
    if isinstance(value, Mapping):
        return "START_OBJECT"
    if isinstance(value, (list, tuple)):
        return START_ARRAY
    return "VALUE_EMBEDDED_OBJECT"


def _array(leftovers: Mapping[str, Any], key: str) -> Optional[Sequence[Any]]:
    """Return the array stored under key, or None when absent."""
    value = leftovers.get(key)
    if value is not None and not isinstance(value, (list, tuple)):
        raise WrongTokenError(START_ARRAY, json_token(value), f"Expected array for '{key}'")
    return value


def _to_han(analysis: MorphoAnalysis) -> MorphoAnalysis:
    leftovers = analysis.extended_properties
    builder = HanMorphoAnalysisBuilder()
    builder.copy_common(analysis)
    for reading in _array(leftovers, READINGS_FIELD) or ():
        builder.add_reading(reading)
    for key, value in leftovers.items():
        if key != READINGS_FIELD:
            builder.extended_property(key, value)
    return builder.build()


def _to_arabic(analysis: MorphoAnalysis) -> MorphoAnalysis:
    leftovers = analysis.extended_properties
    builder = ArabicMorphoAnalysisBuilder()
    builder.copy_common(analysis)

    prefix_length = leftovers.get("prefixLength")
    stem_length = leftovers.get("stemLength")
    if prefix_length is not None and stem_length is not None:
        builder.lengths(prefix_length, stem_length)
    if leftovers.get("root") is not None:
        builder.root(leftovers["root"])
    if leftovers.get("definiteArticle") is not None:
        builder.definite_article(leftovers["definiteArticle"])
    if leftovers.get("strippablePrefix") is not None:
        builder.strippable_prefix(leftovers["strippablePrefix"])

    # Tags are indexed in step with values; a shorter tags array raises IndexError
    prefixes = _array(leftovers, "prefixes")
    if prefixes is not None:
        prefix_tags = _array(leftovers, "prefixTags")
        for x in range(len(prefixes)):
            builder.add_prefix(prefixes[x], prefix_tags[x])

    stems = _array(leftovers, "stems")
    if stems is not None:
        stem_tags = _array(leftovers, "stemTags")
        for x in range(len(stems)):
            builder.add_stem(stems[x], stem_tags[x])

    suffixes = _array(leftovers, "suffixes")
    if suffixes is not None:
        suffix_tags = _array(leftovers, "suffixTags")
        for x in range(len(suffixes)):
            builder.add_suffix(suffixes[x], suffix_tags[x])

    for key, value in leftovers.items():
        if key not in ARABIC_FIELDS:
            builder.extended_property(key, value)
    return builder.build()


def upgrade(analysis: MorphoAnalysis, current: MorphoVariant) -> Tuple[MorphoAnalysis, MorphoVariant]:
    """
    One step of the decode fold.

    Inspects the leftover fields of a freshly decoded analysis and, when they
    identify a variant, rebuilds the record as that variant.

    Args:
        analysis: record produced by the decoder for `current`
        current: variant in effect for this element

    Returns:
        (record to keep, variant in effect for the next element)
    """
    leftovers = analysis.extended_properties
    if not leftovers:
        return analysis, current

    if READINGS_FIELD in leftovers:
        logger.debug(f"Upgrading analysis {analysis.lemma!r} to {MorphoVariant.HAN.value}")
        return _to_han(analysis), MorphoVariant.HAN

    if not ARABIC_FIELDS.isdisjoint(leftovers):
        logger.debug(f"Upgrading analysis {analysis.lemma!r} to {MorphoVariant.ARABIC.value}")
        return _to_arabic(analysis), MorphoVariant.ARABIC

    return analysis, current


class MorphoAnalysisListCodec:
    """
    Decoder / encoder for an array of morphological analyses.

    A fresh codec is unbound. contextualize(registry) resolves the generic,
    Han and Arabic decoders once and returns a bound codec; decoding with an
    unbound codec raises UnboundCodecError.

    The variant in effect while decoding is a local of each decode() call, so
    one bound codec may serve concurrent decodes.
    """

    def __init__(self, decoders: Optional[Mapping[MorphoVariant, Any]] = None):
        self._decoders = dict(decoders) if decoders is not None else None

    @property
    def is_bound(self) -> bool:
        return self._decoders is not None

    def contextualize(self, registry) -> "MorphoAnalysisListCodec":
        """Return a codec bound to the registry's decoders (self if already bound)."""
        if self.is_bound:
            return self
        return MorphoAnalysisListCodec({
            variant: registry.find_decoder(analysis_type)
            for variant, analysis_type in VARIANT_TYPES.items()
        })

    def decode(self, value: Any) -> Tuple[MorphoAnalysis, ...]:
        """
        Decode an array of analyses, upgrading records to Han or Arabic.

        Raises:
            UnboundCodecError: the codec has not been contextualized
            WrongTokenError: value is not an array
        """
        if not self.is_bound:
            raise UnboundCodecError(
                "attempt to decode with an un-contextualized MorphoAnalysisListCodec; "
                "call contextualize(registry) first"
            )
        if not isinstance(value, (list, tuple)):
            raise WrongTokenError(START_ARRAY, json_token(value), "Expected array of items")

        current = MorphoVariant.GENERIC
        result: List[MorphoAnalysis] = []
        for element in value:
            analysis = self._decoders[current](element)
            analysis, current = upgrade(analysis, current)
            result.append(analysis)
        return tuple(result)

    @staticmethod
    def encode(analyses: Iterable[MorphoAnalysis], by_alias: bool = True) -> List[dict]:
        """Encode each analysis with its own variant's shape."""
        return [analysis.model_dump(by_alias=by_alias) for analysis in analyses]
