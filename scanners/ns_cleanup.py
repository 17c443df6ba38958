#!/usr/bin/env python3
"""
DC Hygiene Toolkit - NS Record Cleanup

Removes NS records whose name server no longer resolves, on every server
listed in the targets file.  Each Unresolvable record is deleted once, without
confirmation, and the deletion is written to the removal log.  When nothing
was removed the removal log is not written.

--what-if runs the same checks but never deletes; the records that would be
removed go to the what-if log instead.
"""

from datetime import datetime
from typing import Callable, List, Optional, Set, Tuple

from lib.discovery import SOURCE_FILE
from lib.exceptions import DiscoveryError, PowerShellError
from lib.models import (
    CleanupAction, CleanupOutcome, NsResult, NsStatus, RemovalEntry,
)
from lib.powershell import PowerShell, ps_quote
from utilities.exporter import CsvExporter

from .base import (
    build_parser, configure_console, fatal, output_dir, print_summary, select_targets,
)
from .ns_inventory import NsRecordScanner

REMOVE_SCRIPT = (
    "Remove-DnsServerResourceRecord -ComputerName {server} -ZoneName {zone} "
    "-RRType NS -Name {name} -RecordData {data} -Force -ErrorAction Stop"
)


class NsRecordCleanup(NsRecordScanner):
    """Remove unresolvable NS records (or report them with what_if)."""

    SCANNER_NAME = "ns_cleanup"
    SCANNER_DESCRIPTION = "NS record cleanup"

    def __init__(self, zone: Optional[str] = None, what_if: bool = False,
                 shell: Optional[PowerShell] = None,
                 resolve: Optional[Callable[[str], List[str]]] = None,
                 show_progress: bool = True):
        super().__init__(zone=zone, shell=shell, resolve=resolve,
                         show_progress=show_progress)
        self.what_if = what_if
        if what_if:
            self.SCANNER_DESCRIPTION = "NS record cleanup (what-if)"
        self.log_entries: List[RemovalEntry] = []
        self._handled: Set[Tuple[str, str, str]] = set()

    def remove_record(self, result: NsResult):
        """Delete one NS record.  Raises PowerShellError on failure."""
        obs = result.observation
        self.shell.run(REMOVE_SCRIPT.format(
            server=ps_quote(obs.server),
            zone=ps_quote(obs.zone),
            name=ps_quote(obs.record_name),
            data=ps_quote(obs.name_server),
        ))

    def _log(self, result: NsResult, action: CleanupAction):
        obs = result.observation
        self.log_entries.append(RemovalEntry(
            timestamp=datetime.now().isoformat(timespec='seconds'),
            server=obs.server,
            zone=obs.zone,
            record_name=obs.record_name,
            name_server=obs.name_server,
            action=action,
        ))

    def act_on(self, result: NsResult) -> NsResult:
        """Apply the cleanup decision to one classified record."""
        if result.status is not NsStatus.UNRESOLVABLE:
            return result

        obs = result.observation
        key = (obs.server.lower(), obs.record_name.lower(), obs.name_server.lower())
        if key in self._handled:
            return result.with_action(CleanupAction.NONE,
                                      note=f"{result.note}; duplicate record already handled")
        self._handled.add(key)

        if self.what_if:
            self.logger.info(f"What if: would remove NS {obs.name_server} "
                             f"({obs.record_name}) from {obs.zone} on {obs.server}")
            self._log(result, CleanupAction.WOULD_REMOVE)
            return result.with_action(CleanupAction.WOULD_REMOVE)

        try:
            self.remove_record(result)
        except PowerShellError as exc:
            self.logger.error(f"{obs.server}: failed to remove NS {obs.name_server}: {exc}")
            return result.with_action(CleanupAction.REMOVAL_FAILED,
                                      note=f"{result.note}; removal failed: {exc}")

        self.logger.info(f"Removed NS {obs.name_server} ({obs.record_name}) "
                         f"from {obs.zone} on {obs.server}")
        self._log(result, CleanupAction.REMOVED)
        return result.with_action(CleanupAction.REMOVED)

    def scan_target(self, target: str) -> List[NsResult]:
        return [self.act_on(result) for result in super().scan_target(target)]

    def outcome(self) -> CleanupOutcome:
        return CleanupOutcome(results=list(self.results), log_entries=list(self.log_entries))


def export_outcome(outcome: CleanupOutcome, exporter: CsvExporter, what_if: bool):
    """Write the results CSV and, when non-empty, the removal / what-if log."""
    csv_path = exporter.export_ns_cleanup(outcome.results, what_if=what_if)
    log_path = exporter.export_removal_log(outcome.log_entries, what_if=what_if)
    return csv_path, log_path


def main(argv=None, what_if: bool = False) -> int:
    parser = build_parser(NsRecordCleanup.__doc__)
    parser.add_argument('--zone', help='DNS zone to clean (default: dns.zone)')
    if not what_if:
        parser.add_argument('--what-if', action='store_true',
                            help='Only report the records that would be removed')
    args = parser.parse_args(argv)
    configure_console(args)
    what_if = what_if or args.what_if

    shell = PowerShell()
    cleanup = NsRecordCleanup(zone=args.zone, what_if=what_if, shell=shell,
                              show_progress=not args.no_progress)

    try:
        targets = select_targets(args, shell, SOURCE_FILE)
    except DiscoveryError as exc:
        return fatal(cleanup.logger, str(exc))

    cleanup.scan(targets)
    print_summary(cleanup)
    csv_path, log_path = export_outcome(cleanup.outcome(), CsvExporter(output_dir(args)), what_if)

    print(f"CSV report: {csv_path}")
    if log_path:
        label = "What-if log" if what_if else "Removal log"
        print(f"{label}: {log_path} ({len(cleanup.log_entries)} record(s))")
    else:
        print("No records would be removed." if what_if else "No records removed.")
    return 0


def main_what_if(argv=None) -> int:
    return main(argv, what_if=True)


if __name__ == '__main__':
    raise SystemExit(main())
