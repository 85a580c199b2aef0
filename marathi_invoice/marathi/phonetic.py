"""
Local phonetic transliteration (Latin -> Devanagari).

A left-to-right longest-match transducer over a small hand-authored
pattern table. It is the offline fallback for names and places when no
external transliteration backend is available.

The table was tuned on a handful of names (Mumbai, Delhi, Bhaskar) and is
a starting point, not a phonology: extend CONSONANTS / VOWELS when a name
comes out wrong rather than special-casing it in code.

Digits, whitespace, punctuation and unknown characters are copied through
unchanged; digit conversion is the Digit Mapper's job.
"""

from marathi_invoice.marathi.digits import contains_devanagari


# Consonants and consonant clusters
CONSONANTS: dict[str, str] = {
    "shh": "ष",
    # clusters
    "mb": "म्ब",
    "nd": "न्द",
    "ll": "ल्ल",
    "sk": "स्क",
    # aspirates and digraphs
    "sh": "श",
    "ch": "च",
    "th": "थ",
    "kh": "ख",
    "gh": "घ",
    "bh": "भ",
    "ph": "फ",
    "dh": "ध",
    "jh": "झ",
    # single letters
    "k": "क",
    "g": "ग",
    "c": "च",
    "j": "ज",
    "t": "त",
    "d": "द",
    "n": "न",
    "p": "प",
    "f": "फ",
    "b": "ब",
    "m": "म",
    "y": "य",
    "r": "र",
    "l": "ल",
    "v": "व",
    "w": "व",
    "s": "स",
    "h": "ह",
    "x": "क्ष",
    "z": "झ",
    "q": "क",
}

# pattern -> (independent vowel, matra after a consonant)
VOWELS: dict[str, tuple[str, str]] = {
    "aa": ("आ", "ा"),
    "ai": ("ऐ", "ै"),
    "au": ("औ", "ौ"),
    "ou": ("औ", "ौ"),
    "ee": ("ई", "ी"),
    "ii": ("ई", "ी"),
    "oo": ("ऊ", "ू"),
    "uu": ("ऊ", "ू"),
    "a": ("अ", ""),
    "i": ("इ", "ि"),
    "u": ("उ", "ु"),
    "e": ("ए", "े"),
    "o": ("ओ", "ो"),
}

# Only at the end of a word (Mumbai -> ...बई)
WORD_FINAL: dict[str, str] = {
    "ai": "ई",
}

_MAX_PATTERN = max(len(p) for p in (*CONSONANTS, *VOWELS, *WORD_FINAL))


def _is_word_end(text: str, index: int) -> bool:
    return index >= len(text) or not text[index].isalpha()


def phonetic_transliterate(text: str) -> str:
    """
    Transliterate Latin text to Devanagari by sound.

    Text that already contains Devanagari is returned unchanged.

    Examples:
        "Mumbai" -> "मुम्बई"
        "Delhi" -> "देलहि"
    """
    if not text or contains_devanagari(text):
        return text

    out = []
    i = 0
    after_consonant = False

    while i < len(text):
        for size in range(_MAX_PATTERN, 0, -1):
            chunk = text[i:i + size]
            if len(chunk) < size:
                continue
            chunk = chunk.lower()

            if chunk in WORD_FINAL and _is_word_end(text, i + size):
                out.append(WORD_FINAL[chunk])
                after_consonant = False
            elif chunk in CONSONANTS:
                out.append(CONSONANTS[chunk])
                after_consonant = True
            elif chunk in VOWELS:
                independent, matra = VOWELS[chunk]
                out.append(matra if after_consonant else independent)
                after_consonant = False
            else:
                continue

            i += size
            break
        else:
            out.append(text[i])
            i += 1
            after_consonant = False

    return "".join(out)
