"""
Attribute key catalog.

Each annotation layer attached to an AnnotatedText is stored under one of these
keys. The string values are the canonical wire names and are stable across
versions.
"""

from enum import Enum
from typing import Optional


class AttributeKey(str, Enum):
    """Closed catalog of annotation layer kinds."""

    TOKEN = "token"
    SENTENCE = "sentence"
    ENTITY_MENTION = "entityMention"
    RESOLVED_ENTITY = "resolvedEntity"
    SCRIPT_REGION = "scriptRegion"
    BASE_NOUN_PHRASE = "baseNounPhrase"
    # Whole-text detection is a single record, regions are a list layer
    LANGUAGE_DETECTION = "languageDetection"
    LANGUAGE_DETECTION_REGIONS = "languageDetectionRegions"
    TRANSLATED_TOKENS = "translatedTokens"
    TRANSLATED_DATA = "translatedData"

    @property
    def key(self) -> str:
        """Canonical wire name of this key."""
        return self.value

    @classmethod
    def from_key(cls, key: str) -> Optional["AttributeKey"]:
        """
        Look up a key by its wire name.

        Returns:
            The matching AttributeKey, or None for names outside the catalog
        """
        try:
            return cls(key)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
