"""
Origin utilities for hostname-based tenant resolution.
"""

from urllib.parse import urlsplit


def normalize_origin(origin: str | None) -> str | None:
    """
    Reduce an origin, URL or Host header to a bare lowercase hostname.

    Examples:
        "https://Acme.Example.com:8443/path" -> "acme.example.com"
        "acme.example.com."                  -> "acme.example.com"
        ""                                   -> None
    """
    if not origin:
        return None

    value = origin.strip()
    if not value:
        return None

    # urlsplit only fills netloc when a scheme separator is present
    if "//" not in value:
        value = f"//{value}"

    try:
        hostname = urlsplit(value).hostname
    except ValueError:
        return None

    if not hostname:
        return None

    return hostname.rstrip(".").lower() or None


def candidate_domains(hostname: str) -> list[str]:
    """
    Lookup keys for a hostname, most specific first.

    The full hostname is tried before its first label, so
    "acme.portal.example.com" matches a row keyed "acme.portal.example.com"
    before one keyed "acme".
    """
    candidates = [hostname]
    subdomain = hostname.split(".", 1)[0]
    if subdomain and subdomain != hostname:
        candidates.append(subdomain)
    return candidates


def url_variants(hostname: str) -> list[str]:
    """Forms a stored ``full_url`` may take for the given hostname."""
    return [hostname, f"https://{hostname}", f"http://{hostname}"]


def build_preview_url(domain_name: str, base_domain: str) -> str:
    """
    URL under which a tenant domain can be previewed.

    A fully qualified domain is used as is; a short label becomes a
    subdomain of the base domain's parent.
    """
    if "." in domain_name:
        return f"https://{domain_name}"

    _, _, root_domain = base_domain.partition(".")
    if root_domain:
        return f"https://{domain_name}.{root_domain}"
    # Local development hosts have no parent domain
    return f"http://{domain_name}.{base_domain}"
