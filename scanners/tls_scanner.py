#!/usr/bin/env python3
"""
DC Hygiene Toolkit - SCHANNEL Protocol Auditor

Reads the SCHANNEL protocol registry settings on every domain controller and
reports whether each protocol/role pair is configured securely.

For each server, for each protocol (outer) and role (inner):
  HKLM\\SYSTEM\\CurrentControlSet\\Control\\SecurityProviders\\SCHANNEL\\
      Protocols\\<protocol>\\<role>  ->  Enabled, DisabledByDefault

Output: timestamped CSV and HTML reports; the HTML report is opened in the
default browser unless disabled.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from lib.classify import classify_tls
from lib.discovery import SOURCE_DIRECTORY
from lib.exceptions import DiscoveryError, PowerShellError
from lib.models import Absent, Present, QueryError, RawValue, TlsObservation, TlsResult
from lib.powershell import PowerShell, ps_quote
from utilities.exporter import CsvExporter, run_timestamp
from utilities.reporter import ReportGenerator, open_in_viewer

from .base import (
    BaseScanner, build_parser, configure_console, fatal, output_dir, print_summary,
    select_targets,
)

REGISTRY_BASE = 'SYSTEM\\CurrentControlSet\\Control\\SecurityProviders\\SCHANNEL\\Protocols'

READ_KEY_SCRIPT = """\
$ErrorActionPreference = 'Stop'
$base = [Microsoft.Win32.RegistryKey]::OpenRemoteBaseKey('LocalMachine', {host})
try {{
    $key = $base.OpenSubKey({path})
    if ($null -eq $key) {{
        [pscustomobject]@{{ KeyExists = $false; Enabled = $null; DisabledByDefault = $null }}
    }} else {{
        [pscustomobject]@{{
            KeyExists = $true
            Enabled = $key.GetValue('Enabled')
            DisabledByDefault = $key.GetValue('DisabledByDefault')
        }}
        $key.Close()
    }}
}} finally {{
    $base.Close()
}}"""


def schannel_key_path(protocol: str, role: str) -> str:
    return f"{REGISTRY_BASE}\\{protocol}\\{role}"


def _tag(value) -> RawValue:
    return Absent() if value is None else Present(value)


class SchannelScanner(BaseScanner):
    """SCHANNEL protocol registry audit across domain controllers."""

    SCANNER_NAME = "schannel"
    SCANNER_DESCRIPTION = "SCHANNEL protocol audit"

    def __init__(self, protocols: Optional[List[str]] = None,
                 roles: Optional[List[str]] = None,
                 shell: Optional[PowerShell] = None, show_progress: bool = True):
        super().__init__(shell=shell, show_progress=show_progress)
        self.protocols = list(protocols) if protocols is not None else self.config.get_tls_protocols()
        self.roles = list(roles) if roles is not None else self.config.get_tls_roles()

    def read_schannel_key(self, host: str, protocol: str,
                          role: str) -> Tuple[RawValue, RawValue]:
        """Return (Enabled, DisabledByDefault) for one protocol/role key."""
        script = READ_KEY_SCRIPT.format(
            host=ps_quote(host), path=ps_quote(schannel_key_path(protocol, role))
        )
        try:
            rows = self.shell.run_json(script)
        except PowerShellError as exc:
            self.logger.warning(f"{host}: cannot read {protocol}\\{role}: {exc}")
            return QueryError(str(exc)), QueryError(str(exc))

        if not rows:
            # The script emits one object whenever the read succeeds
            self.logger.warning(f"{host}: empty reply reading {protocol}\\{role}")
            error = QueryError('empty reply from registry read')
            return error, error
        row = rows[0]
        if not row.get('KeyExists'):
            return Absent(), Absent()
        return _tag(row.get('Enabled')), _tag(row.get('DisabledByDefault'))

    def scan_target(self, target: str) -> List[TlsResult]:
        results = []
        for protocol in self.protocols:
            for role in self.roles:
                enabled, disabled = self.read_schannel_key(target, protocol, role)
                result = classify_tls(TlsObservation(
                    server=target,
                    protocol=protocol,
                    role=role,
                    enabled=enabled,
                    disabled_by_default=disabled,
                ))
                self.logger.debug(
                    f"{target} {protocol} {role}: {result.status.value} ({result.note})"
                )
                results.append(result)
        return results


def main(argv=None) -> int:
    parser = build_parser(SchannelScanner.__doc__)
    parser.add_argument('--no-open', action='store_true',
                        help='Do not open the HTML report after writing it')
    args = parser.parse_args(argv)
    configure_console(args)

    shell = PowerShell()
    scanner = SchannelScanner(shell=shell, show_progress=not args.no_progress)

    try:
        targets = select_targets(args, shell, SOURCE_DIRECTORY)
    except DiscoveryError as exc:
        return fatal(scanner.logger, str(exc))

    results = scanner.scan(targets)
    print_summary(scanner)

    started = scanner.start_time or datetime.now()
    timestamp = run_timestamp(started)
    report_dir = output_dir(args)
    csv_path = CsvExporter(report_dir).export_tls(results, timestamp=timestamp)
    html_path = ReportGenerator().generate_tls_report(
        results, report_dir / f"schannel_audit_{timestamp}.html", generated_at=started
    )

    print(f"CSV report:  {csv_path}")
    print(f"HTML report: {html_path}")

    if not args.no_open and scanner.config.get('reporting.open_html', True):
        open_in_viewer(html_path)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
