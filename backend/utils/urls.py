"""URL normalization helpers for crawling, grouping and site matching"""

from urllib.parse import urljoin, urlparse, urlunparse, urldefrag

from utils.errors import MalformedUrl

DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> str:
    """
    Return the origin (scheme://host[:port]) of a URL.

    Raises:
        MalformedUrl: If the URL has no scheme or host, or an invalid port
    """
    try:
        parsed = urlparse(url)
        port = parsed.port
    except (ValueError, TypeError, AttributeError) as e:
        raise MalformedUrl(f"Cannot parse URL {url!r}: {e}")

    scheme = (parsed.scheme or "").lower()
    host = parsed.hostname
    if not scheme or not host:
        raise MalformedUrl(f"URL has no scheme or host: {url!r}")

    if ":" in host:
        host = f"[{host}]"
    origin = f"{scheme}://{host}"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        origin += f":{port}"
    return origin


def same_origin(a: str, b: str) -> bool:
    try:
        return origin_of(a) == origin_of(b)
    except MalformedUrl:
        return False


def domain_key(url: str) -> str:
    """Domain key for grouping: hostname lowercased, optional "www." stripped."""
    candidate = url if "://" in url else "http://" + url
    try:
        hostname = urlparse(candidate).hostname
    except ValueError:
        return url
    if not hostname:
        return url
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def normalize_for_match(url: str) -> str:
    """Lower-cased origin plus path without trailing slash, query or fragment."""
    try:
        origin = origin_of(url)
    except MalformedUrl:
        return url.lower()
    path = urlparse(url).path.rstrip("/")
    return f"{origin}{path}"


def url_matches(source_url: str, normalized_site: str) -> bool:
    """Check a cited URL against an already normalized site, at a path boundary."""
    normalized = normalize_for_match(source_url)
    return normalized == normalized_site or normalized.startswith(normalized_site + "/")


def normalize_seed(url: str) -> str:
    """
    Normalize a crawl seed: http(s) only, no query or fragment, no trailing slash.

    Returns an empty string when the URL cannot be crawled.
    """
    try:
        parsed = urlparse(url.strip())
        origin_of(url.strip())
    except MalformedUrl:
        return ""
    if parsed.scheme.lower() not in ("http", "https"):
        return ""
    normalized = urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), parsed.path, "", "", ""))
    return normalized.rstrip("/") or normalized


def canonical_link(url: str) -> str:
    """Visited-set key for discovered links: fragment dropped, trailing slash stripped."""
    url, _ = urldefrag(url)
    parsed = urlparse(url)
    return urlunparse(parsed._replace(path=parsed.path.rstrip("/")))


def resolve_link(base: str, href: str) -> str:
    try:
        return urljoin(base, href)
    except ValueError:
        return ""
