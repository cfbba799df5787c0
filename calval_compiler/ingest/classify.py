from __future__ import annotations

import re
from datetime import date, datetime
from functools import lru_cache
from typing import Optional, Sequence


@lru_cache(maxsize=16)
def _folder_pattern(suffix: str) -> "re.Pattern[str]":
    # 8 leading digits, then the literal suffix; trailing text is tolerated
    return re.compile(r"^(?P<date>\d{8})" + re.escape(suffix))


def parse_folder_date(name: str, suffix: str = "_calval") -> Optional[date]:
    """
    Return the run date encoded in a run-folder base name, or None.

    ``20230101_calval`` -> date(2023, 1, 1).  Names without the
    ``YYYYMMDD<suffix>`` prefix, and 8-digit prefixes that are not a calendar
    date (``20231332_calval``), give None.
    """
    m = _folder_pattern(suffix).match(name or "")
    if not m:
        return None
    try:
        return datetime.strptime(m.group("date"), "%Y%m%d").date()
    except ValueError:
        return None


def is_calval_folder(name: str, suffix: str = "_calval") -> bool:
    return parse_folder_date(name, suffix) is not None


def is_calibration_file(name: str, marker: str = "cal", extension: str = ".xlsm") -> bool:
    """Case-insensitive: name contains *marker* and ends with *extension*."""
    low = (name or "").lower()
    return marker.lower() in low and low.endswith(extension.lower())


def calibration_type(name: str, markers: Sequence[str] = ("HRH", "HRL")) -> Optional[str]:
    """
    Calibration type named by a file, or None.

    Markers are tested in the given order as case-insensitive substrings; the
    first hit wins, so ``x_HRL_HRH_cal.xlsm`` is "HRH" with the default order.
    """
    low = (name or "").lower()
    for marker in markers:
        if marker.lower() in low:
            return marker
    return None
