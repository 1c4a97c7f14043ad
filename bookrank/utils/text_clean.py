# bookrank/utils/text_clean.py
from __future__ import annotations
import re
import unicodedata

def clean_text(s: str | None, max_len: int = 2000) -> str:
    """
    Minimal, safe normaliser for text pulled out of listing rows:
    - NFKC (non-breaking spaces, full-width digits)
    - collapse whitespace/newlines
    - trim
    - hard cap (defensive)
    """
    s = "" if s is None else str(s)
    s = unicodedata.normalize("NFKC", s)
    s = re.sub(r"\s+", " ", s).strip()
    if len(s) > max_len:
        s = s[:max_len]
    return s
