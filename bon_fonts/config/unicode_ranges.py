"""
Unicode range definitions for the Korean glyph subset.

Reference: https://www.unicode.org/charts/
"""

# (start, end) inclusive
HANGUL_SYLLABLES = (0xAC00, 0xD7AF)
HANGUL_JAMO = (0x1100, 0x11FF)
HANGUL_COMPATIBILITY_JAMO = (0x3130, 0x318F)

KOREAN_RANGES = [
    HANGUL_SYLLABLES,
    HANGUL_JAMO,
    HANGUL_COMPATIBILITY_JAMO,
]

# CJK punctuation used in Korean text
KOREAN_PUNCTUATION = frozenset(
    {
        0x3000,  # Ideographic space
        0x3001,  # Ideographic comma
        0x3002,  # Ideographic full stop
        0x300C,  # Left corner bracket
        0x300D,  # Right corner bracket
        0x300E,  # Left white corner bracket
        0x300F,  # Right white corner bracket
    }
)

BASIC_LATIN = (0x0020, 0x007E)

# Variable font tables dropped when a static font is read from a variable source
VF_TABLES_TO_DROP = ["fvar", "avar", "gvar", "HVAR", "VVAR", "MVAR", "cvar"]


def in_range(codepoint: int, code_range: tuple[int, int]) -> bool:
    """Check whether a code point lies in an inclusive range."""
    start, end = code_range
    return start <= codepoint <= end


def is_korean_codepoint(codepoint: int) -> bool:
    """Check whether a code point belongs to the Korean subset."""
    return codepoint in KOREAN_PUNCTUATION or any(
        in_range(codepoint, r) for r in KOREAN_RANGES
    )
