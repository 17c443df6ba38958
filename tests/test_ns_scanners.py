#!/usr/bin/env python3
"""
NS record inventory, cleanup and what-if runs.
"""

import csv
import re
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fakes import FakeResolver, FakeShell

from lib.exceptions import PowerShellError
from lib.models import CleanupAction, NsStatus
from scanners import ns_cleanup
from scanners.ns_cleanup import NsRecordCleanup, export_outcome
from scanners.ns_inventory import NsRecordScanner
from utilities.exporter import (
    NS_CLEANUP_CSV, NS_REMOVAL_LOG, NS_WHATIF_CSV, NS_WHATIF_LOG, CsvExporter,
)

ZONE = 'corp.example.com'
SERVER_RE = re.compile(r"-ComputerName '([^']*)'")

ZONES = {
    'dc1': [
        {'HostName': '@', 'NameServer': 'dc1.corp.example.com.'},
        {'HostName': '@', 'NameServer': 'old-dc.corp.example.com.'},
        {'HostName': 'branch', 'NameServer': 'dc2.corp.example.com.'},
    ],
    'dc2': [
        {'HostName': '@', 'NameServer': 'dc2.corp.example.com.'},
        {'HostName': '@', 'NameServer': 'retired.corp.example.com.'},
    ],
}

ADDRESSES = {
    'dc1.corp.example.com': ['10.0.0.10'],
    'dc2.corp.example.com': ['10.0.0.11', 'fd00::11'],
}


def dns_server(zones, broken=()):
    """Fake Get-DnsServerResourceRecord keyed by -ComputerName."""
    def handler(script):
        server = SERVER_RE.search(script).group(1)
        if server in broken or server not in zones:
            raise PowerShellError(f"Failed to enumerate zone on {server}", returncode=1)
        return [dict(row) for row in zones[server]]
    return handler


def removals(fail_for=()):
    """Fake Remove-DnsServerResourceRecord; fails when RecordData matches."""
    def handler(script):
        for name in fail_for:
            if f"-RecordData '{name}'" in script:
                raise PowerShellError('Access denied', returncode=1)
        return ''
    return handler


class TestNsInventory(unittest.TestCase):

    def scan(self, targets, broken=()):
        scanner = NsRecordScanner(zone=ZONE, shell=FakeShell(dns_server(ZONES, broken)),
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        return scanner.scan(targets)

    def test_records_classified_in_zone_order(self):
        results = self.scan(['dc1'])
        self.assertEqual(
            [(r.observation.name_server, r.status) for r in results],
            [('dc1.corp.example.com.', NsStatus.RESOLVABLE),
             ('old-dc.corp.example.com.', NsStatus.UNRESOLVABLE),
             ('dc2.corp.example.com.', NsStatus.RESOLVABLE)],
        )
        self.assertEqual(results[2].observation.record_name, 'branch')

    def test_zone_failure_gives_single_error_row(self):
        results = self.scan(['dc1', 'dc-down', 'dc2'])
        down = [r for r in results if r.server == 'dc-down']
        self.assertEqual(len(down), 1)
        self.assertEqual(down[0].status, NsStatus.ERROR)
        self.assertEqual(down[0].to_row()['RecordName'], 'Error')
        self.assertEqual([r.server for r in results if r.server != 'dc-down'],
                         ['dc1', 'dc1', 'dc1', 'dc2', 'dc2'])

    def test_resolver_exception_is_isolated(self):
        def resolve(name):
            if name.startswith('dc2'):
                raise OSError('socket failure')
            return ['10.0.0.10']

        scanner = NsRecordScanner(zone=ZONE, shell=FakeShell(dns_server(ZONES)),
                                  resolve=resolve, show_progress=False)
        results = scanner.scan(['dc1'])
        self.assertEqual([r.status for r in results],
                         [NsStatus.RESOLVABLE, NsStatus.RESOLVABLE, NsStatus.UNRESOLVABLE])

    def test_empty_zone_still_reports_target(self):
        zones = dict(ZONES, dc2=[])
        scanner = NsRecordScanner(zone=ZONE, shell=FakeShell(dns_server(zones)),
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        results = scanner.scan(['dc1', 'dc2'])

        dc2 = [r for r in results if r.server == 'dc2']
        self.assertEqual(len(dc2), 1)
        self.assertEqual(dc2[0].status, NsStatus.NO_RECORDS)
        row = dc2[0].to_row()
        self.assertEqual((row['RecordName'], row['NameServer']), ('N/A', 'N/A'))
        self.assertEqual(row['Note'], f'No NS records in zone {ZONE}')

        tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, tmp, True)
        with open(CsvExporter(tmp).export_ns_inventory(results), newline='',
                  encoding='utf-8') as f:
            servers = [line['Server'] for line in csv.DictReader(f)]
        self.assertIn('dc2', servers)

    def test_record_without_name_server_is_reported(self):
        zones = {'dc1': ZONES['dc1'] + [{'HostName': 'branch', 'NameServer': None}]}
        scanner = NsRecordScanner(zone=ZONE, shell=FakeShell(dns_server(zones)),
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        results = scanner.scan(['dc1'])
        self.assertEqual(len(results), 4)
        self.assertEqual(results[-1].status, NsStatus.ERROR)
        self.assertEqual(results[-1].observation.record_name, 'branch')

    def test_query_uses_zone_and_ns_type(self):
        shell = FakeShell(dns_server(ZONES))
        NsRecordScanner(zone=ZONE, shell=shell, resolve=FakeResolver(ADDRESSES),
                        show_progress=False).scan(['dc1'])
        self.assertIn("-ZoneName 'corp.example.com'", shell.json_calls[0])
        self.assertIn('-RRType NS', shell.json_calls[0])


class TestNsCleanup(unittest.TestCase):

    def make(self, what_if=False, fail_for=(), broken=()):
        shell = FakeShell(dns_server(ZONES, broken), removals(fail_for))
        cleanup = NsRecordCleanup(zone=ZONE, what_if=what_if, shell=shell,
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        return cleanup, shell

    def test_unresolvable_records_removed_once(self):
        cleanup, shell = self.make()
        cleanup.scan(['dc1', 'dc2'])

        self.assertEqual(len(shell.run_calls), 2)
        self.assertIn("-RecordData 'old-dc.corp.example.com.'", shell.run_calls[0])
        self.assertIn("-ComputerName 'dc1'", shell.run_calls[0])
        self.assertIn("-RecordData 'retired.corp.example.com.'", shell.run_calls[1])
        self.assertTrue(all('-Force' in call for call in shell.run_calls))

        removed = [r for r in cleanup.results if r.action is CleanupAction.REMOVED]
        self.assertEqual(len(removed), 2)
        self.assertTrue(all(r.status is NsStatus.UNRESOLVABLE for r in removed))

        self.assertEqual(len(cleanup.log_entries), 2)
        self.assertTrue(all(e.timestamp for e in cleanup.log_entries))

    def test_resolvable_records_never_removed(self):
        cleanup, shell = self.make()
        cleanup.scan(['dc1'])
        for call in shell.run_calls:
            self.assertNotIn('dc1.corp.example.com', call)
            self.assertNotIn('dc2.corp.example.com', call)
        resolvable = [r for r in cleanup.results if r.status is NsStatus.RESOLVABLE]
        self.assertTrue(all(r.action is CleanupAction.NONE for r in resolvable))

    def test_duplicate_record_deleted_once(self):
        zones = {'dc1': ZONES['dc1'] + [{'HostName': '@', 'NameServer': 'OLD-DC.corp.example.com.'}]}
        shell = FakeShell(dns_server(zones), removals())
        cleanup = NsRecordCleanup(zone=ZONE, shell=shell, resolve=FakeResolver(ADDRESSES),
                                  show_progress=False)
        cleanup.scan(['dc1'])
        self.assertEqual(len(shell.run_calls), 1)
        self.assertEqual(len(cleanup.log_entries), 1)

    def test_failed_removal_is_not_logged(self):
        cleanup, shell = self.make(fail_for=('old-dc.corp.example.com.',))
        cleanup.scan(['dc1', 'dc2'])
        failed = [r for r in cleanup.results if r.action is CleanupAction.REMOVAL_FAILED]
        self.assertEqual(len(failed), 1)
        self.assertIn('removal failed', failed[0].note)
        self.assertEqual([e.name_server for e in cleanup.log_entries],
                         ['retired.corp.example.com.'])

    def test_zone_failure_removes_nothing(self):
        cleanup, shell = self.make(broken=('dc1',))
        cleanup.scan(['dc1'])
        self.assertEqual(shell.run_calls, [])
        self.assertEqual(cleanup.results[0].status, NsStatus.ERROR)

    def test_no_records_row_is_left_alone(self):
        shell = FakeShell(dns_server({'dc1': []}), removals())
        cleanup = NsRecordCleanup(zone=ZONE, shell=shell, resolve=FakeResolver(ADDRESSES),
                                  show_progress=False)
        cleanup.scan(['dc1'])
        self.assertEqual(shell.run_calls, [])
        self.assertEqual(len(cleanup.results), 1)
        self.assertEqual(cleanup.results[0].status, NsStatus.NO_RECORDS)
        self.assertIs(cleanup.results[0].action, CleanupAction.NONE)
        self.assertEqual(cleanup.log_entries, [])

    def test_what_if_never_deletes(self):
        cleanup, shell = self.make(what_if=True)
        cleanup.scan(['dc1', 'dc2'])
        self.assertEqual(shell.run_calls, [])
        actions = [e.action for e in cleanup.log_entries]
        self.assertEqual(actions, [CleanupAction.WOULD_REMOVE, CleanupAction.WOULD_REMOVE])

    def test_what_if_is_repeatable(self):
        def would_remove():
            cleanup, _ = self.make(what_if=True)
            cleanup.scan(['dc1', 'dc2'])
            return {(e.server, e.record_name, e.name_server) for e in cleanup.log_entries}

        self.assertEqual(would_remove(), would_remove())


class TestCleanupExport(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_no_removals_means_no_removal_log(self):
        zones = {'dc1': [{'HostName': '@', 'NameServer': 'dc1.corp.example.com.'}]}
        cleanup = NsRecordCleanup(zone=ZONE, shell=FakeShell(dns_server(zones), removals()),
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        cleanup.scan(['dc1'])

        csv_path, log_path = export_outcome(cleanup.outcome(), CsvExporter(self.tmp), False)
        self.assertTrue(csv_path.exists())
        self.assertIsNone(log_path)
        self.assertFalse((self.tmp / NS_REMOVAL_LOG).exists())

    def test_removal_log_has_one_row_per_removed_record(self):
        cleanup = NsRecordCleanup(zone=ZONE, shell=FakeShell(dns_server(ZONES), removals()),
                                  resolve=FakeResolver(ADDRESSES), show_progress=False)
        cleanup.scan(['dc1', 'dc2'])
        csv_path, log_path = export_outcome(cleanup.outcome(), CsvExporter(self.tmp), False)

        self.assertEqual(csv_path.name, NS_CLEANUP_CSV)
        with open(log_path, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 2)
        self.assertTrue(all(row['Timestamp'] for row in rows))
        self.assertEqual({row['Action'] for row in rows}, {'Removed'})

        with open(csv_path, newline='', encoding='utf-8') as f:
            results = list(csv.DictReader(f))
        self.assertEqual(len(results), 5)
        self.assertIn('Action', results[0])

    def test_main_what_if_from_targets_file(self):
        targets = self.tmp / 'servers.txt'
        targets.write_text("dc1\ndc2\n", encoding='utf-8')
        shell = FakeShell(dns_server(ZONES), removals())

        with mock.patch.object(ns_cleanup, 'PowerShell', return_value=shell), \
                mock.patch('lib.resolver.resolve', FakeResolver(ADDRESSES)):
            code = ns_cleanup.main_what_if([
                '--targets-file', str(targets), '--output-dir', str(self.tmp),
                '--zone', ZONE, '--no-progress',
            ])

        self.assertEqual(code, 0)
        self.assertEqual(shell.run_calls, [])
        self.assertTrue((self.tmp / NS_WHATIF_CSV).exists())
        with open(self.tmp / NS_WHATIF_LOG, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        self.assertEqual({row['Action'] for row in rows}, {'Would Remove'})
        self.assertFalse((self.tmp / NS_REMOVAL_LOG).exists())

    def test_main_missing_targets_file_is_fatal(self):
        code = ns_cleanup.main([
            '--targets-file', str(self.tmp / 'missing.txt'),
            '--output-dir', str(self.tmp / 'out'), '--no-progress',
        ])
        self.assertEqual(code, 1)
        self.assertFalse((self.tmp / 'out').exists())


if __name__ == '__main__':
    unittest.main()
