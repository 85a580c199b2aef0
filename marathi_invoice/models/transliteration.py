"""Transliteration result types."""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict


class TransliterationConfidence(IntEnum):
    """
    Where a transliteration came from, best first.

    Ordered so that comparisons read naturally:
    DICTIONARY > EXTERNAL > PHONETIC > UNCHANGED.
    """
    UNCHANGED = 0
    PHONETIC = 1
    EXTERNAL = 2
    DICTIONARY = 3


class TransliterationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: TransliterationConfidence = TransliterationConfidence.UNCHANGED

    @property
    def changed(self) -> bool:
        return self.confidence > TransliterationConfidence.UNCHANGED
