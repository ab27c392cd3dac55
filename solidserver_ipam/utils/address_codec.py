"""
Address Codec

Conversions between human IP notation and the SOLIDserver wire notation
(fixed width hexadecimal), 32-bit integers, CIDR prefix math and DNS PTR
record names.

Every function fails closed: malformed input returns an empty sentinel
("" for strings, 0 or -1 for numbers) instead of raising.
"""

import ipaddress
import re

_HEX_IP_RE = re.compile(r"[0-9a-fA-F]{8}")
_HEX_IP6_RE = re.compile(r"[0-9a-fA-F]{32}")
_OCTET_RE = re.compile(r"[0-9]{1,3}")


def _parse_octets(ip: str):
    """Split a dotted-decimal string into four integers, or None if invalid"""
    if not isinstance(ip, str):
        return None

    parts = ip.split(".")
    if len(parts) != 4:
        return None

    octets = []
    for part in parts:
        if not _OCTET_RE.fullmatch(part):
            return None
        value = int(part)
        if value > 255:
            return None
        octets.append(value)

    return octets


# IPv4


def ip_to_hex_ip(ip: str) -> str:
    """Convert a dotted IPv4 address into its 8 hex digit wire form"""
    octets = _parse_octets(ip)
    if octets is None:
        return ""

    return "{:02x}{:02x}{:02x}{:02x}".format(*octets)


def hex_ip_to_ip(hex_ip: str) -> str:
    """Convert an 8 hex digit wire address into dotted IPv4 notation"""
    if not isinstance(hex_ip, str) or not _HEX_IP_RE.fullmatch(hex_ip):
        return ""

    return ".".join(str(int(hex_ip[i:i + 2], 16)) for i in range(0, 8, 2))


def ip_to_long(ip: str) -> int:
    """Convert a dotted IPv4 address into an unsigned 32-bit integer (0 on failure)"""
    octets = _parse_octets(ip)
    if octets is None:
        return 0

    a, b, c, d = octets
    return (a << 24) | (b << 16) | (c << 8) | d


def long_to_ip(ip_long: int) -> str:
    """Convert an unsigned 32-bit integer into dotted IPv4 notation"""
    if not isinstance(ip_long, int) or ip_long < 0 or ip_long > 0xFFFFFFFF:
        return ""

    return "{}.{}.{}.{}".format(
        (ip_long >> 24) & 0xFF,
        (ip_long >> 16) & 0xFF,
        (ip_long >> 8) & 0xFF,
        ip_long & 0xFF,
    )


def ip_to_ptr(ip: str) -> str:
    """Build the in-addr.arpa PTR record name of an IPv4 address"""
    octets = _parse_octets(ip)
    if octets is None:
        return ""

    a, b, c, d = octets
    return f"{d}.{c}.{b}.{a}.in-addr.arpa"


# IPv6


def _parse_ip6(ip: str):
    if not isinstance(ip, str):
        return None
    try:
        return ipaddress.IPv6Address(ip)
    except ValueError:
        return None


def ip6_to_hex_ip6(ip: str) -> str:
    """Convert an IPv6 address (compressed or expanded) into its 32 hex digit wire form"""
    address = _parse_ip6(ip)
    if address is None:
        return ""

    return address.exploded.replace(":", "")


def hex_ip6_to_ip6(hex_ip: str) -> str:
    """Convert a 32 hex digit wire address into fully expanded IPv6 notation"""
    if not isinstance(hex_ip, str) or not _HEX_IP6_RE.fullmatch(hex_ip):
        return ""

    return ":".join(hex_ip[i:i + 4] for i in range(0, 32, 4))


def long_ip6_to_short_ip6(ip: str) -> str:
    """Return the compressed textual form of an IPv6 address"""
    address = _parse_ip6(ip)
    if address is None:
        return ""

    return address.compressed


def short_ip6_to_long_ip6(ip: str) -> str:
    """Return the fully expanded textual form of an IPv6 address"""
    address = _parse_ip6(ip)
    if address is None:
        return ""

    return address.exploded


def ip6_to_ptr(ip: str) -> str:
    """Build the ip6.arpa PTR record name of an IPv6 address

    The name is the nibbles of the expanded address, reversed one hex digit
    at a time and dot separated.
    """
    expanded = short_ip6_to_long_ip6(ip)
    if not expanded:
        return ""

    nibbles = expanded.replace(":", "")[::-1]
    return "".join(f"{nibble}." for nibble in nibbles) + "ip6.arpa"


# CIDR


def prefix_length_to_size(length: int) -> int:
    """Number of addresses in an IPv4 prefix of the given length (-1 on failure)"""
    if not isinstance(length, int) or length < 0 or length > 32:
        return -1

    return 1 << (32 - length)


def size_to_prefix_length(size: int) -> int:
    """Largest prefix length whose block holds at most `size` addresses

    Sizes that are not a power of two round down to the next smaller block,
    e.g. 300 gives /24 (256 addresses).
    """
    prefix_length = 32

    while prefix_length > 0 and size > 1:
        size = size // 2
        prefix_length -= 1

    return prefix_length


def prefix_length_to_hex_ip(length: int) -> str:
    """Netmask of an IPv4 prefix length in wire hex form"""
    if prefix_length_to_size(length) < 0:
        return ""

    netmask = ~((1 << (32 - length)) - 1) & 0xFFFFFFFF
    return f"{netmask:08x}"


def prefix_length_to_netmask(length: int) -> str:
    """Netmask of an IPv4 prefix length in dotted notation"""
    return hex_ip_to_ip(prefix_length_to_hex_ip(length))


def prefix6_length_to_size(length: int) -> int:
    """Number of addresses in an IPv6 prefix, computed on nibble boundaries

    Uses Python's arbitrary precision integers, a /0 holds 16 ** 32 addresses.
    Returns -1 for a length outside 0..128.
    """
    if not isinstance(length, int) or length < 0 or length > 128:
        return -1

    return 16 ** (32 - length // 4)
