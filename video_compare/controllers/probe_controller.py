"""
Probe controller.

Holds the current MediaDescriptor for Input A and Input B and runs probes on
a worker thread. A failed probe leaves the previous descriptor in place.
"""

import logging
from typing import Dict, Optional
from PySide6.QtCore import QObject, Signal

from ..models.comparison import ComparisonResult
from ..models.media_descriptor import MediaDescriptor
from ..services.comparison_service import compare_descriptors
from ..services.interfaces import IProbeService
from ..workers.probe_worker import ProbeWorker


SLOT_A = "a"
SLOT_B = "b"


class ProbeController(QObject):
    """
    Controller for probing the two inputs.

    Signals:
        descriptor_changed: (slot: str, descriptor: MediaDescriptor)
        probe_failed: (slot: str, message: str)
        probe_started: (slot: str, path: str)
    """

    descriptor_changed = Signal(str, object)  # slot, MediaDescriptor
    probe_failed = Signal(str, str)  # slot, error message
    probe_started = Signal(str, str)  # slot, path

    def __init__(self, probe_service: IProbeService, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger(f"VideoCompareTool.{self.__class__.__name__}")
        self._service = probe_service
        self._descriptors: Dict[str, Optional[MediaDescriptor]] = {SLOT_A: None, SLOT_B: None}
        self._workers: Dict[str, ProbeWorker] = {}

    @property
    def descriptor_a(self) -> Optional[MediaDescriptor]:
        return self._descriptors[SLOT_A]

    @property
    def descriptor_b(self) -> Optional[MediaDescriptor]:
        return self._descriptors[SLOT_B]

    def descriptor(self, slot: str) -> Optional[MediaDescriptor]:
        return self._descriptors[slot]

    def comparison(self) -> ComparisonResult:
        return compare_descriptors(self.descriptor_a, self.descriptor_b)

    def is_probing(self, slot: str) -> bool:
        worker = self._workers.get(slot)
        return worker is not None and worker.isRunning()

    def start_probe(self, slot: str, path: str):
        """
        Probe ``path`` for ``slot`` in the background.

        Raises:
            RuntimeError: If a probe for this slot is already running
        """
        if slot not in self._descriptors:
            raise ValueError(f"Unknown input slot: {slot}")
        if self.is_probing(slot):
            raise RuntimeError(f"Probe for input {slot.upper()} already in progress")

        worker = ProbeWorker(slot, path, self._service, parent=self)
        worker.result_ready.connect(self.apply_probe_result)
        worker.finished.connect(self._on_worker_finished)
        self._workers[slot] = worker

        self.probe_started.emit(slot, path)
        worker.start()

    def apply_probe_result(self, slot: str, result):
        """Store a successful descriptor or report the failure."""
        if result.success:
            descriptor = result.value
            self._descriptors[slot] = descriptor
            self.logger.info(f"Input {slot.upper()} probed: {descriptor.file}")
            self.descriptor_changed.emit(slot, descriptor)
        else:
            message = result.error_message or "Probe failed."
            self.logger.warning(f"Probe of input {slot.upper()} failed: {message}")
            self.probe_failed.emit(slot, message)

    def _on_worker_finished(self):
        for slot, worker in list(self._workers.items()):
            if not worker.isRunning():
                worker.deleteLater()
                del self._workers[slot]
