from __future__ import annotations

import re
from typing import Optional


_SHORTHAND_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)([KMB]?)$")
_FACTORS = {"": 1, "K": 1000, "M": 1000000, "B": 1000000000}


def parse_count(value) -> Optional[int]:
    """Parse counters as shown in search snippets: '1.2K', '3M', '4,500', '500+'.

    Returns None for unparsable inputs.
    """
    if value is None:
        return None
    s = "".join(str(value).split()).upper().replace(",", "")
    if s.endswith("+"):
        s = s[:-1]
    if not s:
        return None
    m = _SHORTHAND_RE.match(s)
    if m:
        return int(round(float(m.group(1)) * _FACTORS[m.group(2)]))
    digits = "".join(ch for ch in s if ch.isdigit())
    return int(digits) if digits else None


def first_count(pattern: re.Pattern, text: Optional[str]) -> Optional[int]:
    """Apply ``pattern`` to ``text`` and parse its first group as a count."""
    if not text:
        return None
    m = pattern.search(text)
    if not m:
        return None
    return parse_count(m.group(1))
