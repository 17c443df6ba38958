#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Name resolution
"""

import socket
from typing import List

from .exceptions import ResolutionError


def resolve(hostname: str) -> List[str]:
    """Resolve a hostname to IP addresses using socket.getaddrinfo.

    IPv4 addresses come first, then IPv6, without duplicates.  Raises
    ResolutionError when neither family yields an address.
    """
    name = hostname.rstrip('.')
    if not name:
        raise ResolutionError("Empty host name")

    addresses: List[str] = []
    errors: List[str] = []
    for family in (socket.AF_INET, socket.AF_INET6):
        try:
            results = socket.getaddrinfo(name, None, family, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            errors.append(str(exc))
            continue
        for result in results:
            addr = result[4][0]
            if addr not in addresses:
                addresses.append(addr)

    if not addresses:
        raise ResolutionError(f"{name} did not resolve: {errors[0] if errors else 'no addresses'}")
    return addresses
