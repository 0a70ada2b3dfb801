"""Client and request metadata lifted from inbound headers."""

from __future__ import annotations

from collections.abc import Mapping

_CLIENT_IP_HEADERS = ("x-real-ip", "cf-connecting-ip", "x-client-ip")


def extract_request_metadata(
    headers: Mapping[str, str],
    client: tuple[str, int] | None = None,
    scheme: str | None = None,
) -> dict[str, str]:
    """Build ``http.*`` span attributes describing who sent the request.

    ``headers`` must use lowercase names, as ASGI and Starlette provide them.
    Missing values are recorded as empty strings, except the client IP and
    user agent which fall back to ``"unknown"``.
    """
    forwarded_for = headers.get("x-forwarded-for", "")
    attributes = {
        "http.client_ip": _client_ip(headers, forwarded_for, client),
        "http.user_agent": headers.get("user-agent") or "unknown",
        "http.referer": headers.get("referer") or headers.get("referrer") or "",
        "http.host": headers.get("host", ""),
        "http.scheme": scheme or "http",
        "http.forwarded_for": forwarded_for,
        "http.real_ip": headers.get("x-real-ip", ""),
        "http.request_id": headers.get("x-request-id") or headers.get("x-trace-id") or "",
    }

    if headers.get("x-vercel-ip-country"):
        attributes["http.geo.country"] = headers["x-vercel-ip-country"]
        attributes["http.geo.region"] = headers.get("x-vercel-ip-country-region", "")
        attributes["http.geo.city"] = headers.get("x-vercel-ip-city", "")
    if headers.get("cf-ipcountry"):
        attributes["http.geo.country"] = headers["cf-ipcountry"]
    return attributes


def _client_ip(
    headers: Mapping[str, str],
    forwarded_for: str,
    client: tuple[str, int] | None,
) -> str:
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop
    for name in _CLIENT_IP_HEADERS:
        value = headers.get(name)
        if value:
            return value
    if client is not None and client[0]:
        return client[0]
    return "unknown"
