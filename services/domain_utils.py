from __future__ import annotations

import unicodedata
from typing import Optional
from urllib.parse import unquote, urlparse

import tldextract


# Bundled public suffix snapshot only; no fetch at runtime
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith("http://") and not text.startswith("https://"):
        text = f"http://{text}"
    ext = _EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def apex_label(url_or_domain: Optional[str]) -> Optional[str]:
    """Registrable label of a host: ``https://team.acme.co.uk/x`` -> ``acme``."""
    apex = extract_apex_domain(url_or_domain)
    if not apex:
        return None
    return apex.split(".", 1)[0] or None


def origin_and_path(url: str) -> str:
    """Drop query string and fragment; keep the original text if it is not a URL."""
    u = urlparse(url)
    if not u.scheme or not u.netloc:
        return url
    return f"{u.scheme}://{u.netloc}{u.path}"


def canonical_page_url(url: Optional[str]) -> Optional[str]:
    """Canonical identity for page-shaped profiles: lower-cased host plus path.

    Returns None when the URL has no path beyond the root.
    """
    if not url:
        return None
    u = urlparse(url.strip())
    host = (u.netloc or "").lower()
    path = (u.path or "").rstrip("/")
    if not host or not path:
        return None
    scheme = (u.scheme or "https").lower()
    return f"{scheme}://{host}{path}"


def normalize_slug(slug: Optional[str]) -> Optional[str]:
    """Canonical form of a profile slug: decoded, NFKC, lower-cased, invisible chars removed."""
    if not slug:
        return None
    text = unquote(str(slug))
    text = unicodedata.normalize("NFKC", text).strip().lower()
    # Remove invisible characters occasionally present
    text = text.replace("\u200b", "").replace("\u200c", "").replace("\u200d", "")
    return text.strip("/") or None
