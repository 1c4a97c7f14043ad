# bookrank/utils/urls.py
from __future__ import annotations
from urllib.parse import urljoin, urlparse
from typing import Optional

__all__ = ["resolve_url", "is_http_url"]


def is_http_url(u: str | None) -> bool:
    if not u:
        return False
    p = urlparse(str(u).strip())
    return p.scheme in {"http", "https"} and bool(p.netloc)


def resolve_url(href: str | None, page_url: str | None, base_href: str | None = None) -> Optional[str]:
    """
    Resolve a (possibly relative) href the way a browser does for ``a.href``:

    - a <base href> in the document wins over the page URL
    - a relative <base href> is itself resolved against the page URL
    - fragment-only / javascript: links are not navigable -> None
    """
    if not href:
        return None
    href = str(href).strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None

    base = page_url or ""
    if base_href:
        base = urljoin(base, base_href.strip())

    out = urljoin(base, href)
    return out if is_http_url(out) else None
