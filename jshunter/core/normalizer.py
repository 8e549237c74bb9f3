"""
URL resolution for script references found in HTML pages.
"""

from typing import Optional
from urllib.parse import urlsplit


def _split_base(base_url: str):
    try:
        parsed = urlsplit(base_url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    try:
        parsed.port
    except ValueError:
        return None
    return parsed


def _origin(base) -> str:
    host = base.hostname
    if ":" in host:
        host = f"[{host}]"
    if base.port is not None:
        host = f"{host}:{base.port}"
    return f"{base.scheme}://{host}"


def resolve_url(reference: str, base_url: str) -> Optional[str]:
    """Resolve a script ``src`` value against the page that referenced it.

    Absolute references are returned untouched, protocol-relative ones take the
    page scheme, root-relative ones take the page origin and anything else is
    joined to the directory of the page path. Returns ``None`` when the page
    URL itself is not an absolute URL.
    """
    if reference.startswith(('http://', 'https://')):
        return reference

    base = _split_base(base_url)
    if base is None:
        return None

    if reference.startswith('//'):
        return f"{base.scheme}:{reference}"

    origin = _origin(base)
    if reference.startswith('/'):
        return f"{origin}{reference}"

    path = base.path or '/'
    directory = path[:path.rfind('/') + 1]
    return f"{origin}{directory}{reference}"
