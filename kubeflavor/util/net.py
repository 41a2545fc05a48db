"""Contains utility functions for network addresses"""

from netaddr import valid_ipv4, valid_ipv6


def is_ip(ip):
    """Checks if ip is a string holding a valid IPv4 or IPv6 address"""

    if not isinstance(ip, str) or not ip:
        return False

    return bool(valid_ipv4(ip) or valid_ipv6(ip))
