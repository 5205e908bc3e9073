"""Collision-free names for copied shapes."""

import re
from typing import Iterable

_NUMERIC_SUFFIX = re.compile(r"[0-9]+")


def numeric_suffix(name: str, base: str) -> int | None:
    """Numeric suffix of ``name`` after the literal prefix ``base``.

    The bare base counts as suffix 1 (``"Logo"`` is the first ``"Logo"``);
    a remainder that is not a plain number (``"Logotype"``) yields ``None``.
    """
    if not name.startswith(base):
        return None
    remainder = name[len(base):].strip()
    if not remainder:
        return 1
    if _NUMERIC_SUFFIX.fullmatch(remainder):
        return int(remainder)
    return None


def next_copy_name(name: str, existing: Iterable[str]) -> str:
    """Name for a copy of ``name`` that is unique among ``existing``.

    A name that is not taken is kept. Otherwise the copy gets the highest
    numeric suffix in use plus one, so ``{"Logo", "Logo 2", "Logo 5"}``
    gives ``"Logo 6"`` and freed suffixes are never reused.
    """
    existing = list(existing)
    if name not in existing:
        return name
    suffixes = [s for s in (numeric_suffix(other, name) for other in existing) if s is not None]
    return f"{name} {max(suffixes) + 1}"
