"""
Video Compare controllers.

Orchestrate probing and export sessions between the UI, workers and services.
"""

from .export_session_controller import ExportSessionController, ProgressSubscription
from .probe_controller import ProbeController, SLOT_A, SLOT_B

__all__ = [
    'ExportSessionController',
    'ProgressSubscription',
    'ProbeController',
    'SLOT_A',
    'SLOT_B',
]
