"""
Target Address Formatting
Bracket-aware host:port rendering for proxy node addresses.
"""

import ipaddress


def is_ipv6(host: str) -> bool:
    """Check if host is an IPv6 literal."""
    try:
        return ipaddress.ip_address(host).version == 6
    except ValueError:
        return False


def format_host_port(host: str, port: int) -> str:
    """
    Render host and port as a dialable address.

    IPv6 literals are wrapped in brackets; IPv4 addresses and hostnames
    are used as-is.

    Example:
        >>> format_host_port("::1", 443)
        '[::1]:443'
        >>> format_host_port("example.com", 80)
        'example.com:80'
    """
    if is_ipv6(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"
