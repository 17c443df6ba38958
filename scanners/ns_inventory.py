#!/usr/bin/env python3
"""
DC Hygiene Toolkit - NS Record Inventory

Lists the NS records of a zone on every domain controller and checks whether
each name server still resolves to an address.  Read-only.

A server whose zone cannot be queried gets a single Error row, and one whose
zone holds no NS records gets a single No Records row.  A name server that
does not resolve is Unresolvable.
"""

from typing import Callable, Dict, List, Optional

from lib import resolver
from lib.classify import classify_ns
from lib.discovery import SOURCE_DIRECTORY
from lib.exceptions import DiscoveryError, PowerShellError
from lib.models import Absent, NsObservation, NsResult, Present, QueryError, RawValue
from lib.powershell import PowerShell, ps_quote
from utilities.exporter import CsvExporter

from .base import (
    BaseScanner, build_parser, configure_console, fatal, output_dir, print_summary,
    select_targets,
)

NS_QUERY = (
    "Get-DnsServerResourceRecord -ComputerName {server} -ZoneName {zone} "
    "-RRType NS -ErrorAction Stop "
    "| Select-Object HostName,@{{Name='NameServer';Expression={{$_.RecordData.NameServer}}}}"
)


class NsRecordScanner(BaseScanner):
    """NS record inventory across domain controllers."""

    SCANNER_NAME = "ns_inventory"
    SCANNER_DESCRIPTION = "NS record inventory"

    def __init__(self, zone: Optional[str] = None, shell: Optional[PowerShell] = None,
                 resolve: Optional[Callable[[str], List[str]]] = None,
                 show_progress: bool = True):
        super().__init__(shell=shell, show_progress=show_progress)
        self.zone = zone or self.config.get_zone()
        self.resolve = resolve or resolver.resolve

    def fetch_ns_records(self, server: str) -> List[Dict[str, str]]:
        """NS records of the zone as served by one DNS server, in zone order.

        Raises PowerShellError when the server or zone cannot be queried.
        """
        rows = self.shell.run_json(
            NS_QUERY.format(server=ps_quote(server), zone=ps_quote(self.zone)),
            timeout=120,
        )
        records = []
        for row in rows:
            name_server = (row.get('NameServer') or '').strip()
            records.append({
                'record_name': row.get('HostName') or '@',
                'name_server': name_server,
            })
        return records

    def resolve_name_server(self, name_server: str) -> RawValue:
        """Addresses for a name server; any failure is recorded, never raised."""
        try:
            return Present(self.resolve(name_server))
        except Exception as exc:
            return QueryError(str(exc))

    def scan_target(self, target: str) -> List[NsResult]:
        try:
            records = self.fetch_ns_records(target)
        except PowerShellError as exc:
            self.logger.warning(f"{target}: cannot query zone {self.zone}: {exc}")
            return [NsResult.zone_error(target, self.zone, str(exc))]

        if not records:
            self.logger.info(f"{target}: no NS records in zone {self.zone}")
            return [NsResult.no_records(target, self.zone)]

        results = []
        for record in records:
            name_server = record['name_server']
            if name_server:
                addresses = self.resolve_name_server(name_server)
            else:
                self.logger.warning(
                    f"{target}: NS record {record['record_name']} has no name server data"
                )
                addresses = Absent()
            observation = NsObservation(
                server=target,
                zone=self.zone,
                record_name=record['record_name'],
                name_server=name_server,
                addresses=addresses,
            )
            result = classify_ns(observation)
            self.logger.debug(
                f"{target} {observation.name_server}: {result.status.value} ({result.note})"
            )
            results.append(result)
        return results


def main(argv=None) -> int:
    parser = build_parser(NsRecordScanner.__doc__)
    parser.add_argument('--zone', help='DNS zone to inspect (default: dns.zone)')
    args = parser.parse_args(argv)
    configure_console(args)

    shell = PowerShell()
    scanner = NsRecordScanner(zone=args.zone, shell=shell,
                              show_progress=not args.no_progress)

    try:
        targets = select_targets(args, shell, SOURCE_DIRECTORY)
    except DiscoveryError as exc:
        return fatal(scanner.logger, str(exc))

    results = scanner.scan(targets)
    print_summary(scanner)
    csv_path = CsvExporter(output_dir(args)).export_ns_inventory(results)

    print(f"CSV report: {csv_path}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
