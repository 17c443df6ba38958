#!/usr/bin/env python3
"""
DC Hygiene Toolkit - CSV Exporter
Writes flat CSV reports: one row per classified result, header = field names.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from lib.config import config
from lib.logger import get_logger
from lib.models import (
    NS_CLEANUP_FIELDS, NS_FIELDS, REMOVAL_LOG_FIELDS, TLS_FIELDS,
    NsResult, RemovalEntry, TlsResult,
)

# Static names: re-runs of the NS scripts overwrite their previous output
NS_INVENTORY_CSV = 'ns_record_inventory.csv'
NS_CLEANUP_CSV = 'ns_cleanup_results.csv'
NS_WHATIF_CSV = 'ns_cleanup_whatif.csv'
NS_REMOVAL_LOG = 'ns_removal_log.csv'
NS_WHATIF_LOG = 'ns_whatif_log.csv'


def run_timestamp(moment: Optional[datetime] = None) -> str:
    """Timestamp embedded in per-run file names."""
    return (moment or datetime.now()).strftime('%Y%m%d_%H%M%S')


class CsvExporter:
    """Writes result collections to CSV in a fixed encoding."""

    def __init__(self, output_dir: Path, encoding: Optional[str] = None):
        self.output_dir = Path(output_dir)
        self.encoding = encoding or config.get_csv_encoding()
        self.logger = get_logger('exporter')

    def write_rows(self, filename: str, fields: Sequence[str],
                   rows: Iterable[Dict[str, str]]) -> Path:
        """Write rows to output_dir/filename, always including the header."""
        output_path = self.output_dir / filename
        output_path.parent.mkdir(parents=True, exist_ok=True)

        count = 0
        with open(output_path, 'w', newline='', encoding=self.encoding) as f:
            writer = csv.DictWriter(f, fieldnames=list(fields))
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
                count += 1

        self.logger.info(f"CSV export ({count} rows) saved to {output_path}")
        return output_path

    def export_tls(self, results: List[TlsResult], timestamp: str = None) -> Path:
        filename = f"schannel_audit_{timestamp or run_timestamp()}.csv"
        return self.write_rows(filename, TLS_FIELDS, (r.to_row() for r in results))

    def export_ns_inventory(self, results: List[NsResult]) -> Path:
        return self.write_rows(NS_INVENTORY_CSV, NS_FIELDS, (r.to_row() for r in results))

    def export_ns_cleanup(self, results: List[NsResult], what_if: bool = False) -> Path:
        filename = NS_WHATIF_CSV if what_if else NS_CLEANUP_CSV
        return self.write_rows(filename, NS_CLEANUP_FIELDS,
                               (r.to_row(include_action=True) for r in results))

    def export_removal_log(self, entries: List[RemovalEntry],
                           what_if: bool = False) -> Optional[Path]:
        """Write the removal (or what-if) log.

        Nothing is written when there are no entries; an existing log from an
        earlier run is left untouched.
        """
        if not entries:
            self.logger.info("No records removed; removal log not written")
            return None
        filename = NS_WHATIF_LOG if what_if else NS_REMOVAL_LOG
        return self.write_rows(filename, REMOVAL_LOG_FIELDS, (e.to_row() for e in entries))
