"""
Probe worker.

Runs one probe off the UI thread.
"""

from PySide6.QtCore import QThread, Signal

from ..services.interfaces import IProbeService


class ProbeWorker(QThread):
    """
    Background worker for a single probe.

    Signals:
        result_ready: (slot: str, result: Result[MediaDescriptor])
    """

    result_ready = Signal(str, object)  # slot ('a' or 'b'), Result

    def __init__(self, slot: str, path: str, service: IProbeService, parent=None):
        super().__init__(parent)
        self.slot = slot
        self.path = path
        self.service = service

    def run(self):
        self.result_ready.emit(self.slot, self.service.probe(self.path))
