"""Expansion of prescriber shorthand ("1t bd", "2p prn", "7/7") into label text."""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Mapping, Optional, Tuple

NUMBER_WORDS: Tuple[str, ...] = (
    "ZERO",
    "ONE",
    "TWO",
    "THREE",
    "FOUR",
    "FIVE",
    "SIX",
    "SEVEN",
    "EIGHT",
    "NINE",
    "TEN",
    "ELEVEN",
    "TWELVE",
    "THIRTEEN",
    "FOURTEEN",
    "FIFTEEN",
    "SIXTEEN",
    "SEVENTEEN",
    "EIGHTEEN",
    "NINETEEN",
    "TWENTY",
)

# unit letter -> (verb, singular noun)
DOSAGE_UNITS: Dict[str, Tuple[str, str]] = {
    "t": ("Take", "tablet"),
    "c": ("Take", "capsule"),
    "p": ("Inhale", "puff"),
    "d": ("Apply", "drop"),
}

# duration denominator -> singular noun
DURATION_UNITS: Dict[str, str] = {
    "7": "day",
    "52": "week",
    "12": "month",
}

SHORTHAND_CODES: Dict[str, str] = {
    # Frequencies
    "od": "ONCE a day",
    "om": "on a morning",
    "on": "at night",
    "bd": "TWICE a day",
    "tds": "THREE times a day",
    "qds": "FOUR times a day",
    "prn": "when required",
    "stat": "IMMEDIATELY",
    "mane": "in the MORNING",
    "nocte": "at NIGHT",
    "altd": "on ALTERNATE days",
    "altm": "on ALTERNATE mornings",
    "alte": "on ALTERNATE evenings",
    "altn": "on ALTERNATE nights",
    "1w": "WEEKLY",
    "2w": "every TWO weeks",
    "4w": "every FOUR weeks",
    "1m": "MONTHLY",
    "2m": "every TWO months",
    "3m": "every THREE months",
    "6m": "every SIX months",
    "1y": "YEARLY",
    # Timings
    "am": "in the MORNING",
    "pm": "in the EVENING",
    "od07": "ONCE a day at 7am",
    "od08": "ONCE a day at 8am",
    "od12": "ONCE a day at 12pm",
    "od16": "ONCE a day at 4pm",
    "od20": "ONCE a day at 8pm",
    "od22": "ONCE a day at 10pm",
    "dinnertime": "at DINNER time",
    "lunchtime": "at LUNCH time",
    "breakfast": "with BREAKFAST",
    "dinner": "with DINNER",
    "bm": "BEFORE meals",
    "ac": "BEFORE meals",
    "pc": "AFTER meals",
    "wm": "WITH meals",
    # Routes
    "po": "by mouth",
    "sl": "under the tongue",
    "buc": "placed between the gum and cheek",
    "pr": "rectally",
    "pv": "vaginally",
    "sc": "subcutaneously",
    "im": "intramuscularly",
    "iv": "intravenously",
    "inh": "by inhalation",
    "neb": "via nebuliser",
    "top": "applied topically",
    "td": "applied to the skin",
    "oc": "into the eye(s)",
    "au": "into the ear(s)",
    "nas": "into the nose",
    # Sites
    "le": "into the LEFT eye",
    "re": "into the RIGHT eye",
    "be": "into BOTH eyes",
    "la": "into the LEFT ear",
    "ra": "into the RIGHT ear",
    "ba": "into BOTH ears",
    # Common phrases
    "wf": "with food",
    "bf": "before food",
    "af": "after food",
    "disp": "disperse in water",
    "dnc": "not to be crushed",
    # Special instructions start a new sentence.
    "shake": ". Shake well before use",
    "rinse": ". Rinse mouth after use",
    "nswallow": ". Do not swallow",
    "c+d": ". Tablet may be crushed and dispersed in water",
    "crush": ". Tablet may be crushed",
    "open": ". Capsule may be opened and the contents dispersed in water",
    "whole": ". Swallow whole, do not chew or crush",
    "protect": ". Protect from light",
    "fridge": ". Store in a refrigerator",
    "discard": ". Discard 28 days after opening",
}

# Numeric tokens shielded from hyphen splitting.
PROTECTED_PATTERN = re.compile(
    r"\b\d+/(?:7|52|12)\b|\b\d+-\d+(?:ml|[tcpd])\b",
    re.IGNORECASE,
)
PLACEHOLDER = "\x00{}\x00"
PLACEHOLDER_PATTERN = re.compile(r"\x00(\d+)\x00")
CODE_HYPHEN = re.compile(r"(?<=[A-Za-z0-9\x00])-(?=[A-Za-z0-9\x00])")
SEGMENT_DELIMITER = re.compile(r"([,;])")
SENTENCE_JOIN = re.compile(r"\s+\.")


def number_word(value: int) -> str:
    """Upper-case English word for 0-20, the numeral itself above that."""

    if 0 <= value < len(NUMBER_WORDS):
        return NUMBER_WORDS[value]
    return str(value)


def _unit_noun(noun: str, plural: bool) -> str:
    return noun + "s" if plural else noun


def _dose(match: re.Match[str]) -> str:
    verb, noun = DOSAGE_UNITS[match.group("unit")]
    quantity = int(match.group("whole"))
    return f"{verb} {number_word(quantity)} {_unit_noun(noun, quantity != 1)}"


def _half_dose(match: re.Match[str]) -> str:
    verb, noun = DOSAGE_UNITS[match.group("unit")]
    whole = int(match.group("whole"))
    if whole == 0:
        return f"{verb} HALF a {noun}"
    return f"{verb} {number_word(whole)} AND A HALF {_unit_noun(noun, True)}"


def _decimal_dose(match: re.Match[str]) -> str:
    verb, noun = DOSAGE_UNITS[match.group("unit")]
    return f"{verb} {match.group('amount')} {_unit_noun(noun, True)}"


def _dose_range(match: re.Match[str]) -> str:
    verb, noun = DOSAGE_UNITS[match.group("unit")]
    low = number_word(int(match.group("low")))
    high = number_word(int(match.group("high")))
    return f"{verb} {low} to {high} {_unit_noun(noun, True)}"


def _volume(match: re.Match[str]) -> str:
    return f"Take {match.group('amount')}ml"


def _volume_range(match: re.Match[str]) -> str:
    return f"Take {match.group('low')} to {match.group('high')}ml"


def _duration(match: re.Match[str]) -> str:
    count = int(match.group("count"))
    noun = DURATION_UNITS[match.group("period")]
    return f"for {number_word(count)} {_unit_noun(noun, count != 1)}"


DosageHandler = Callable[[re.Match[str]], str]

# Tried in order; the first pattern matching the whole token wins.
DOSAGE_RULES: Tuple[Tuple[re.Pattern[str], DosageHandler], ...] = (
    (re.compile(r"^(?P<low>\d+)-(?P<high>\d+)(?P<unit>[tcpd])$"), _dose_range),
    (re.compile(r"^(?P<low>\d+(?:\.\d+)?)-(?P<high>\d+(?:\.\d+)?)ml$"), _volume_range),
    (re.compile(r"^(?P<whole>\d+)\.5(?P<unit>[tcpd])$"), _half_dose),
    (re.compile(r"^(?P<amount>\d+\.\d+)(?P<unit>[tcpd])$"), _decimal_dose),
    (re.compile(r"^(?P<whole>\d+)(?P<unit>[tcpd])$"), _dose),
    (re.compile(r"^(?P<amount>\d+(?:\.\d+)?)ml$"), _volume),
    (re.compile(r"^(?P<count>\d+)/(?P<period>7|52|12)$"), _duration),
)


def generate_dosage_text(token: str) -> Optional[str]:
    """Expand a quantity, range or duration token by pattern, if one applies."""

    for pattern, handler in DOSAGE_RULES:
        match = pattern.match(token)
        if match:
            return handler(match)
    return None


class ShorthandExpander:
    """Translate shorthand instructions into full dosage sentences.

    Untranslatable input comes back unchanged, so the expander is safe to run
    over free text that contains no shorthand at all.
    """

    def __init__(self, codes: Optional[Mapping[str, str]] = None) -> None:
        source = SHORTHAND_CODES if codes is None else codes
        self.codes: Dict[str, str] = {key.strip().lower(): value for key, value in source.items()}

    def translate_code(self, token: str) -> Optional[str]:
        """Full text for a single code: static table first, then dosage patterns."""

        if not token or not isinstance(token, str):
            return None
        code = token.strip().lower()
        if not code:
            return None
        if code in self.codes:
            return self.codes[code]
        return generate_dosage_text(code)

    def _prepare(self, text: str) -> str:
        protected: List[str] = []

        def protect(match: re.Match[str]) -> str:
            protected.append(match.group(0))
            return PLACEHOLDER.format(len(protected) - 1)

        working = PROTECTED_PATTERN.sub(protect, text)
        working = CODE_HYPHEN.sub(" ", working)
        return PLACEHOLDER_PATTERN.sub(lambda match: protected[int(match.group(1))], working)

    def _translate_segment(self, segment: str) -> Optional[str]:
        direct = self.translate_code(segment)
        if direct is not None:
            return direct
        parts = segment.split()
        if not parts:
            return None
        pieces: List[str] = []
        translated = False
        for part in parts:
            text = self.translate_code(part)
            if text is None:
                pieces.append(part)
            else:
                pieces.append(text)
                translated = True
        if not translated:
            return None
        return SENTENCE_JOIN.sub(".", " ".join(pieces))

    def expand(self, shorthand: str) -> str:
        if not shorthand or not isinstance(shorthand, str) or not shorthand.strip():
            return ""
        working = self._prepare(shorthand.strip())

        if not SEGMENT_DELIMITER.search(working):
            result = self._translate_segment(working)
            return shorthand if result is None else result

        tokens = SEGMENT_DELIMITER.split(working)
        output = ""
        delimiter = ""
        translated = False
        for position, token in enumerate(tokens):
            if position % 2:
                delimiter = token
                continue
            segment = token.strip()
            if not segment:
                continue
            result = self._translate_segment(segment)
            if result is None:
                result = segment
            else:
                translated = True
            output = f"{output}{delimiter} {result}" if output else result
        return output if translated else shorthand


__all__ = [
    "NUMBER_WORDS",
    "SHORTHAND_CODES",
    "DOSAGE_RULES",
    "number_word",
    "generate_dosage_text",
    "ShorthandExpander",
]
