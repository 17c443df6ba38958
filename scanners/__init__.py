"""
DC Hygiene Toolkit - Scanner Modules
"""

from .base import BaseScanner
from .tls_scanner import SchannelScanner
from .ns_inventory import NsRecordScanner
from .ns_cleanup import NsRecordCleanup

__all__ = [
    'BaseScanner',
    'SchannelScanner',
    'NsRecordScanner',
    'NsRecordCleanup',
]
