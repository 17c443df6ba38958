#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Classifiers

Pure functions: collected values in, status and note out.  No I/O.
"""

import re
from typing import Optional, Tuple

from .models import (
    Absent, NsObservation, NsResult, NsStatus, Present, QueryError,
    TlsObservation, TlsResult, TlsStatus,
)

# TLS at or above this version must be enabled; everything older must be off.
MODERN_TLS_VERSION = (1, 2)

_PROTOCOL_RE = re.compile(r'^\s*(?P<family>[A-Za-z]+)\s*(?P<major>\d+)\.(?P<minor>\d+)\s*$')

# (Enabled, DisabledByDefault) expected for a Secure verdict
EXPECTED_VALUES = {
    True: (1, 0),
    False: (0, 1),
}

NOTES = {
    (True, TlsStatus.SECURE): 'Protocol is enabled and not disabled by default',
    (True, TlsStatus.NOT_SECURE): 'Modern protocol should be enabled (Enabled=1, DisabledByDefault=0)',
    (False, TlsStatus.SECURE): 'Legacy protocol is disabled',
    (False, TlsStatus.NOT_SECURE): 'Legacy protocol should be disabled (Enabled=0, DisabledByDefault=1)',
}


def parse_protocol(name: str) -> Optional[Tuple[str, Tuple[int, int]]]:
    """Split 'TLS 1.2' into ('TLS', (1, 2)); None when unrecognised."""
    match = _PROTOCOL_RE.match(name or '')
    if not match:
        return None
    return (
        match.group('family').upper(),
        (int(match.group('major')), int(match.group('minor'))),
    )


def is_modern_protocol(name: str) -> bool:
    """TLS 1.2 and later are modern; SSL, PCT and TLS below 1.2 are legacy."""
    parsed = parse_protocol(name)
    if parsed is None:
        return False
    family, version = parsed
    return family == 'TLS' and version >= MODERN_TLS_VERSION


def _as_int(raw: Present) -> Optional[int]:
    value = raw.value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    for base in (10, 0):
        try:
            return int(text, base)
        except ValueError:
            continue
    return None


def classify_tls(observation: TlsObservation) -> TlsResult:
    """Classify one SCHANNEL protocol/role pair."""
    enabled = observation.enabled
    disabled = observation.disabled_by_default

    errors = [v for v in (enabled, disabled) if isinstance(v, QueryError)]
    if errors:
        detail = errors[0].message or 'query failed'
        return TlsResult(observation, TlsStatus.UNKNOWN,
                         f"Error reading registry values: {detail}")

    if isinstance(enabled, Absent) and isinstance(disabled, Absent):
        return TlsResult(observation, TlsStatus.UNKNOWN,
                         'Key missing; the operating system default applies')

    for label, raw in (('Enabled', enabled), ('DisabledByDefault', disabled)):
        if isinstance(raw, Absent):
            return TlsResult(observation, TlsStatus.UNKNOWN,
                             f"Value missing: {label}; the operating system default applies")

    values = (_as_int(enabled), _as_int(disabled))
    if None in values:
        return TlsResult(observation, TlsStatus.UNKNOWN,
                         f"Unreadable value (Enabled={enabled.render()}, "
                         f"DisabledByDefault={disabled.render()})")

    modern = is_modern_protocol(observation.protocol)
    status = TlsStatus.SECURE if values == EXPECTED_VALUES[modern] else TlsStatus.NOT_SECURE
    return TlsResult(observation, status, NOTES[(modern, status)])


def classify_ns(observation: NsObservation) -> NsResult:
    """Resolvable when the name server has at least one address."""
    addresses = observation.addresses
    if not observation.name_server:
        status = NsStatus.ERROR
        note = "Record has no name server data"
    elif isinstance(addresses, Present) and addresses.value:
        status = NsStatus.RESOLVABLE
        note = f"Resolves to {addresses.render()}"
    else:
        status = NsStatus.UNRESOLVABLE
        detail = addresses.message if isinstance(addresses, QueryError) else ''
        note = f"Name server does not resolve: {detail}" if detail else 'Name server does not resolve'
    return NsResult(
        server=observation.server,
        zone=observation.zone,
        status=status,
        note=note,
        observation=observation,
    )
