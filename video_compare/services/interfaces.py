"""
Service interfaces for the probe and encode collaborators.

The controller and UI depend on these, so tests can substitute fakes.
"""

from abc import ABC, abstractmethod
from PySide6.QtCore import QObject, Signal

from core.result_types import Result

from ..models.media_descriptor import MediaDescriptor
from ..models.export_parameters import ExportParameters
from ..models.export_session import ExportStarted


class IProbeService(ABC):
    """Produces a MediaDescriptor for one file."""

    @abstractmethod
    def probe(self, path: str) -> Result[MediaDescriptor]:
        """
        Probe a media file.

        Returns:
            Result containing the descriptor, or the probe error
        """
        pass


class EncodeServiceBase(QObject):
    """
    Encode service contract.

    ``submit_export`` must not block on the encode itself; progress is
    reported later through ``progress_event``, which may deliver events in
    any order relative to the submit acknowledgment.

    Signals:
        progress_event: (event: ProgressEvent)
    """

    progress_event = Signal(object)  # ProgressEvent

    def submit_export(self, params: ExportParameters) -> Result[ExportStarted]:
        """
        Start an export.

        Returns:
            Result containing the assigned session id and output path
        """
        raise NotImplementedError("Subclasses must implement submit_export()")

    def cancel_export(self, session_id: str) -> Result[None]:
        """Best-effort cancellation of a running export."""
        raise NotImplementedError("Subclasses must implement cancel_export()")
