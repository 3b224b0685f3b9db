"""
URL and host parsing for tracker, seed and DHT node entries.

Both parsers are thin wrappers around ``httpx.URL``: they only add the checks
httpx leaves out (absolute urls, forbidden host characters) and normalise
every failure to ``AddressParseError``.
"""

import ipaddress
import re
import httpx
import idna

Host = ipaddress.IPv4Address | ipaddress.IPv6Address | str

# characters that can never appear in a host, even percent encoded ones
FORBIDDEN_HOST_CHARS = frozenset("\x00\t\n\r #%/:<>?@[\\]^|")
DOTTED_QUAD = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")


class AddressParseError(ValueError):
    pass


def parse_url(text: str) -> httpx.URL:
    try:
        url = httpx.URL(text)
    except httpx.InvalidURL as e:
        raise AddressParseError(f"invalid url {text!r}: {e}") from e
    if not url.scheme:
        raise AddressParseError(f"relative url without a scheme: {text!r}")
    return url


def parse_host(text: str) -> Host:
    if not text:
        raise AddressParseError("empty host")

    if text.startswith("["):
        if not text.endswith("]"):
            raise AddressParseError(f"unterminated ipv6 address: {text!r}")
        try:
            return ipaddress.IPv6Address(text[1:-1])
        except ValueError as e:
            raise AddressParseError(f"invalid ipv6 address {text!r}") from e

    if ":" in text:
        # bare ipv6, as some clients write it
        try:
            return ipaddress.IPv6Address(text)
        except ValueError as e:
            raise AddressParseError(f"invalid host {text!r}") from e

    if bad := FORBIDDEN_HOST_CHARS.intersection(text):
        raise AddressParseError(
            f"invalid character(s) {''.join(sorted(bad))!r} in host {text!r}"
        )

    if DOTTED_QUAD.match(text):
        try:
            return ipaddress.IPv4Address(text)
        except ValueError as e:
            raise AddressParseError(f"invalid ipv4 address {text!r}") from e

    # httpx lowercases the name and validates IDNA labels while encoding it,
    # decoding an "xn--" label back raises straight from idna
    try:
        return httpx.URL(scheme="http", host=text).host
    except (httpx.InvalidURL, idna.IDNAError) as e:
        raise AddressParseError(f"invalid host {text!r}: {e}") from e
