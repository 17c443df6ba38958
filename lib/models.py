#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Data model

Observations are what the collectors bring back from a target; results are
observations with a status and a note attached by the classifiers.
Raw values are tagged so classifiers never compare sentinel strings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


# ---------------------------------------------------------------------------
# Raw values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Present:
    """A value that was read from the target."""
    value: Any

    def render(self) -> str:
        if isinstance(self.value, (list, tuple)):
            return ', '.join(str(v) for v in self.value)
        return str(self.value)


@dataclass(frozen=True)
class Absent:
    """The key or value does not exist on the target."""

    def render(self) -> str:
        return 'N/A'


@dataclass(frozen=True)
class QueryError:
    """The remote query failed."""
    message: str = ''

    def render(self) -> str:
        return 'Error'


RawValue = Union[Present, Absent, QueryError]


# ---------------------------------------------------------------------------
# Status labels
# ---------------------------------------------------------------------------

class TlsStatus(str, Enum):
    SECURE = 'Secure'
    NOT_SECURE = 'Not Secure'
    UNKNOWN = 'Unknown'


class NsStatus(str, Enum):
    RESOLVABLE = 'Resolvable'
    UNRESOLVABLE = 'Unresolvable'
    # Zone query failed, or a record carried no name server data
    ERROR = 'Error'
    # Zone answered but holds no NS records; one row per server
    NO_RECORDS = 'No Records'


class CleanupAction(str, Enum):
    NONE = 'None'
    REMOVED = 'Removed'
    REMOVAL_FAILED = 'Removal Failed'
    WOULD_REMOVE = 'Would Remove'


# ---------------------------------------------------------------------------
# Observations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TlsObservation:
    """Enabled / DisabledByDefault for one protocol and role on one server."""
    server: str
    protocol: str
    role: str
    enabled: RawValue
    disabled_by_default: RawValue


@dataclass(frozen=True)
class NsObservation:
    """One NS record found in a zone on one server.

    ``addresses`` is Present(list of IPs) or QueryError.
    """
    server: str
    zone: str
    record_name: str
    name_server: str
    addresses: RawValue


# ---------------------------------------------------------------------------
# Classified results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TlsResult:
    observation: TlsObservation
    status: TlsStatus
    note: str

    @property
    def server(self) -> str:
        return self.observation.server

    def to_row(self) -> Dict[str, str]:
        obs = self.observation
        return {
            'Server': obs.server,
            'Protocol': obs.protocol,
            'Role': obs.role,
            'Enabled': obs.enabled.render(),
            'DisabledByDefault': obs.disabled_by_default.render(),
            'Status': self.status.value,
            'Note': self.note,
        }


TLS_FIELDS: Tuple[str, ...] = (
    'Server', 'Protocol', 'Role', 'Enabled', 'DisabledByDefault', 'Status', 'Note'
)


@dataclass(frozen=True)
class NsResult:
    """Classified NS record, or a server-level row (Error or No Records) when
    observation is None."""
    server: str
    zone: str
    status: NsStatus
    note: str
    observation: Union[NsObservation, None] = None
    action: CleanupAction = CleanupAction.NONE

    @classmethod
    def zone_error(cls, server: str, zone: str, message: str) -> 'NsResult':
        return cls(server=server, zone=zone, status=NsStatus.ERROR,
                   note=f"Error querying zone: {message}")

    @classmethod
    def no_records(cls, server: str, zone: str) -> 'NsResult':
        return cls(server=server, zone=zone, status=NsStatus.NO_RECORDS,
                   note=f"No NS records in zone {zone}")

    def with_action(self, action: CleanupAction, note: str = None) -> 'NsResult':
        return NsResult(
            server=self.server,
            zone=self.zone,
            status=self.status,
            note=note if note is not None else self.note,
            observation=self.observation,
            action=action,
        )

    def to_row(self, include_action: bool = False) -> Dict[str, str]:
        obs = self.observation
        blank = 'Error' if self.status is NsStatus.ERROR else 'N/A'
        row = {
            'Server': self.server,
            'Zone': self.zone,
            'RecordName': obs.record_name if obs else blank,
            'NameServer': obs.name_server if obs else blank,
            'IPAddress': obs.addresses.render() if obs else blank,
            'Status': self.status.value,
            'Note': self.note,
        }
        if include_action:
            row['Action'] = self.action.value
        return row


NS_FIELDS: Tuple[str, ...] = (
    'Server', 'Zone', 'RecordName', 'NameServer', 'IPAddress', 'Status', 'Note'
)
NS_CLEANUP_FIELDS: Tuple[str, ...] = NS_FIELDS + ('Action',)


@dataclass(frozen=True)
class RemovalEntry:
    """One line of the removal (or what-if) log."""
    timestamp: str
    server: str
    zone: str
    record_name: str
    name_server: str
    action: CleanupAction

    def to_row(self) -> Dict[str, str]:
        return {
            'Timestamp': self.timestamp,
            'Server': self.server,
            'Zone': self.zone,
            'RecordName': self.record_name,
            'NameServer': self.name_server,
            'Action': self.action.value,
        }


REMOVAL_LOG_FIELDS: Tuple[str, ...] = (
    'Timestamp', 'Server', 'Zone', 'RecordName', 'NameServer', 'Action'
)


@dataclass
class CleanupOutcome:
    """Everything the cleanup run produced."""
    results: List[NsResult] = field(default_factory=list)
    log_entries: List[RemovalEntry] = field(default_factory=list)
