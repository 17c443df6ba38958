#!/usr/bin/env python3
"""
DC Hygiene Toolkit - HTML Report Generator
Builds the self-contained SCHANNEL audit report (inline stylesheet, no
external assets) and optionally opens it in the default viewer.
"""

import html
import webbrowser
from collections import OrderedDict
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from lib.logger import get_logger
from lib.models import TlsResult, TlsStatus

BADGE_CLASSES = {
    TlsStatus.SECURE: 'secure',
    TlsStatus.NOT_SECURE: 'not-secure',
    TlsStatus.UNKNOWN: 'unknown',
}

LEGEND = (
    (TlsStatus.SECURE,
     'Modern protocols (TLS 1.2+) are enabled and legacy protocols are disabled.'),
    (TlsStatus.NOT_SECURE,
     'A modern protocol is not fully enabled, or a legacy protocol is still enabled.'),
    (TlsStatus.UNKNOWN,
     'The registry key or value is missing, or the registry could not be read.'),
)


def group_by_server(results: List[TlsResult]) -> "OrderedDict[str, List[TlsResult]]":
    """Group results by server, keeping discovery order."""
    groups: "OrderedDict[str, List[TlsResult]]" = OrderedDict()
    for result in results:
        groups.setdefault(result.server, []).append(result)
    return groups


def count_by_status(results: List[TlsResult]) -> Dict[TlsStatus, int]:
    counts = {status: 0 for status in TlsStatus}
    for result in results:
        counts[result.status] += 1
    return counts


def open_in_viewer(path: Path) -> bool:
    """Open a written report in the default browser."""
    return webbrowser.open(Path(path).resolve().as_uri())


class ReportGenerator:
    """Generates the SCHANNEL HTML report."""

    def __init__(self):
        self.logger = get_logger('reporter')

    def generate_tls_report(self, results: List[TlsResult], output_path: Path,
                            generated_at: datetime = None) -> Path:
        """Write the HTML report and return its path."""
        html_content = self._build_tls_html(results, generated_at or datetime.now())

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(html_content)

        self.logger.info(f"HTML report saved to {output_path}")
        return output_path

    def _build_tls_html(self, results: List[TlsResult], generated_at: datetime) -> str:
        """Build SCHANNEL report HTML."""
        counts = count_by_status(results)
        groups = group_by_server(results)

        rows = ""
        for server, server_results in groups.items():
            rows += f"""
            <tr class="server-row"><th colspan="6">{html.escape(server)}</th></tr>"""
            for result in server_results:
                row = result.to_row()
                badge = BADGE_CLASSES[result.status]
                rows += f"""
            <tr>
                <td>{html.escape(row['Protocol'])}</td>
                <td>{html.escape(row['Role'])}</td>
                <td>{html.escape(row['Enabled'])}</td>
                <td>{html.escape(row['DisabledByDefault'])}</td>
                <td><span class="badge {badge}">{html.escape(row['Status'])}</span></td>
                <td>{html.escape(row['Note'])}</td>
            </tr>"""

        if not rows:
            rows = '<tr><td colspan="6">No results</td></tr>'

        legend_items = ""
        for status, description in LEGEND:
            legend_items += f"""
            <li><span class="badge {BADGE_CLASSES[status]}">{status.value}</span> {description}</li>"""

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>SCHANNEL Protocol Audit</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; background: #f5f5f5; }}
        .container {{ max-width: 1200px; margin: 0 auto; background: white; padding: 40px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }}
        h1 {{ color: #333; border-bottom: 3px solid #4a90d9; padding-bottom: 10px; }}
        h2 {{ color: #4a90d9; margin-top: 30px; }}
        .summary-grid {{ display: grid; grid-template-columns: repeat(4, 1fr); gap: 20px; margin: 20px 0; }}
        .summary-card {{ background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center; }}
        .summary-value {{ font-size: 32px; font-weight: bold; }}
        .summary-label {{ color: #666; }}
        table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
        th, td {{ padding: 10px; text-align: left; border-bottom: 1px solid #ddd; }}
        th {{ background: #4a90d9; color: white; }}
        .server-row th {{ background: #e9ecef; color: #333; font-size: 15px; }}
        .badge {{ display: inline-block; padding: 3px 10px; border-radius: 12px; font-size: 12px; font-weight: bold; color: white; }}
        .secure {{ background: #28a745; }}
        .not-secure {{ background: #dc3545; }}
        .unknown {{ background: #6c757d; }}
        .legend li {{ margin: 8px 0; list-style: none; }}
        .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #ddd; color: #666; font-size: 12px; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>SCHANNEL Protocol Audit</h1>

        <div class="summary-grid">
            <div class="summary-card">
                <div class="summary-value">{len(groups)}</div>
                <div class="summary-label">Servers</div>
            </div>
            <div class="summary-card">
                <div class="summary-value" style="color: #28a745;">{counts[TlsStatus.SECURE]}</div>
                <div class="summary-label">Secure</div>
            </div>
            <div class="summary-card">
                <div class="summary-value" style="color: #dc3545;">{counts[TlsStatus.NOT_SECURE]}</div>
                <div class="summary-label">Not Secure</div>
            </div>
            <div class="summary-card">
                <div class="summary-value" style="color: #6c757d;">{counts[TlsStatus.UNKNOWN]}</div>
                <div class="summary-label">Unknown</div>
            </div>
        </div>

        <h2>Legend</h2>
        <ul class="legend">{legend_items}
        </ul>

        <h2>Protocol Settings</h2>
        <table>
            <thead>
                <tr>
                    <th>Protocol</th>
                    <th>Role</th>
                    <th>Enabled</th>
                    <th>DisabledByDefault</th>
                    <th>Status</th>
                    <th>Note</th>
                </tr>
            </thead>
            <tbody>{rows}
            </tbody>
        </table>

        <div class="footer">
            <p>Generated by DC Hygiene Toolkit on {generated_at.strftime('%Y-%m-%d %H:%M:%S')}</p>
        </div>
    </div>
</body>
</html>"""
