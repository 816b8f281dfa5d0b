"""
Video Compare workers.

QThread workers for probing and for following running exports.
"""

from .export_progress_worker import ExportProgressWorker
from .probe_worker import ProbeWorker

__all__ = [
    'ExportProgressWorker',
    'ProbeWorker',
]
