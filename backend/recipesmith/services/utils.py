# recipesmith/services/utils.py
# Text helpers shared by the generation pipeline and the nutrition estimator
# - code-fence stripping for model output
# - "45g" / "450 mg" style measure parsing with mass-unit conversion
# - image filename derivation from a recipe title

from __future__ import annotations
import re
import unicodedata
import uuid
from typing import Optional, Tuple

# ```json ... ``` or ``` ... ``` around the payload
_FENCE_OPEN_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*")

_MEASURE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-zA-Zµμ]+)?\s*$")

# mass unit aliases -> factor to grams
_MASS_UNITS = {
    "g": 1.0,
    "gr": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "mg": 0.001,
    "milligram": 0.001,
    "milligrams": 0.001,
    "mcg": 0.000001,
    "µg": 0.000001,
    "μg": 0.000001,
    "ug": 0.000001,
    "microgram": 0.000001,
    "micrograms": 0.000001,
}

_DURATION_RE = re.compile(r"\b\d*\s*(minutes?|mins?|hours?|hrs?)\b", re.I)

_FILENAME_PUNCT = r"[^A-Za-z0-9_-]+"


def _nfkc(s: str) -> str:
    return unicodedata.normalize("NFKC", s or "")


def strip_code_fences(text: str) -> str:
    # Model output may arrive wrapped in markdown fences, optionally tagged json
    s = (text or "").strip()
    start = s.find("```")
    if start == -1:
        return s
    s = _FENCE_OPEN_RE.sub("", s[start:], count=1)
    end = s.rfind("```")
    if end != -1:
        s = s[:end]
    return s.strip()


def parse_measure(value: Optional[str]) -> Optional[Tuple[float, Optional[str]]]:
    """
    "45g" -> (45.0, "g"), " 450 mg " -> (450.0, "mg"), "12" -> (12.0, None).
    Anything else (negative, empty, free text) -> None.
    """
    if value is None:
        return None
    m = _MEASURE_RE.match(_nfkc(str(value)))
    if not m:
        return None
    unit = m.group(2)
    return float(m.group(1)), (unit.lower() if unit else None)


def is_mass_unit(unit: Optional[str]) -> bool:
    return bool(unit) and unit.lower() in _MASS_UNITS


def parse_mass(value: Optional[str], target: str = "g", require_unit: bool = False) -> Optional[float]:
    # Parse a mass string and convert it to the target unit (g or mg).
    # A bare number is taken as already being in the target unit.
    parsed = parse_measure(value)
    if parsed is None:
        return None
    amount, unit = parsed
    if unit is None:
        return None if require_unit else amount
    if unit not in _MASS_UNITS:
        return None
    return amount * _MASS_UNITS[unit] / _MASS_UNITS[target]


def parse_number(value: Optional[str]) -> Optional[float]:
    # Strict non-negative number ("450", "450.5"); units are not allowed
    parsed = parse_measure(value)
    if parsed is None or parsed[1] is not None:
        return None
    return parsed[0]


def has_duration_unit(value: Optional[str]) -> bool:
    return bool(value) and _DURATION_RE.search(value) is not None


def make_image_filename(title: str, suffix: Optional[str] = None) -> str:
    # "Spicy Pad Thai!" -> "Spicy_Pad_Thai_1a2b3c4d.png"
    base = _nfkc(title).strip().replace(" ", "_")
    base = re.sub(_FILENAME_PUNCT, "", base)
    base = re.sub(r"_+", "_", base).strip("_") or "recipe"
    suffix = suffix or uuid.uuid4().hex[:8]
    return f"{base}_{suffix}.png"
