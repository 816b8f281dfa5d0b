"""
Export session controller.

Owns the single tracked export: validates a request, submits it to the
encode service, correlates progress events against the acknowledged session
id and applies cancellation. The session is an immutable ExportSession value
replaced on every transition and announced through ``session_changed``.
"""

import logging
from typing import Callable, Optional
from PySide6.QtCore import QObject, Signal

from core.exceptions import ExportError, ValidationError
from core.result_types import Result

from ..models.export_parameters import ExportParameters
from ..models.export_session import (
    ApproximateProgressPolicy, ExportPhase, ExportSession, ProgressEvent, ProgressPhase
)
from ..services.export_validator import validate_request
from ..services.interfaces import EncodeServiceBase
from ..services.parameter_derivation import odd_dimension_advisories


MSG_BUSY = "An export is already running. Cancel it before starting a new one."
MSG_STARTING = "Starting export..."
MSG_CANCELLED = "Export cancelled."
MSG_FAILED = "Export failed."


class ProgressSubscription(QObject):
    """
    Cancellable handle delivering one session's progress events.

    Events carrying any other session id are dropped here. After ``cancel()``
    nothing more is delivered, even if the service keeps emitting.
    """

    def __init__(
        self,
        service: EncodeServiceBase,
        session_id: str,
        handler: Callable[[ProgressEvent], None],
        parent=None
    ):
        super().__init__(parent)
        self.session_id = session_id
        self._service = service
        self._handler = handler
        self._active = True
        service.progress_event.connect(self._on_event)

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self):
        if not self._active:
            return
        self._active = False
        self._service.progress_event.disconnect(self._on_event)

    def _on_event(self, event: ProgressEvent):
        if self._active and event.session_id == self.session_id:
            self._handler(event)


class ExportSessionController(QObject):
    """
    Controller for export sessions.

    Lifecycle: Idle -> Submitting -> Active -> Completed | Failed | Cancelled.
    At most one session is tracked; a submission while one is Submitting or
    Active is rejected.

    Signals:
        session_changed: (session: ExportSession)
    """

    session_changed = Signal(object)  # ExportSession

    def __init__(
        self,
        encode_service: EncodeServiceBase,
        progress_policy: Optional[ApproximateProgressPolicy] = None,
        parent=None
    ):
        """
        Initialize export session controller.

        Args:
            encode_service: Service that starts, reports on and cancels exports
            progress_policy: Estimate used when events carry no percentage
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self.logger = logging.getLogger(f"VideoCompareTool.{self.__class__.__name__}")
        self._service = encode_service
        self._policy = progress_policy or ApproximateProgressPolicy()
        self._session = ExportSession()
        self._subscription: Optional[ProgressSubscription] = None

    # === Public API ===

    @property
    def session(self) -> ExportSession:
        return self._session

    @property
    def progress_policy(self) -> ApproximateProgressPolicy:
        return self._policy

    def is_busy(self) -> bool:
        return self._session.phase.is_busy

    def submit(self, params: ExportParameters) -> Result[ExportSession]:
        """
        Validate and start an export.

        Returns:
            Result containing the Active session, or the rejection. A rejected
            request never records a session id.
        """
        if self.is_busy():
            self.logger.warning("Submit rejected: an export is already running")
            return Result.error(ValidationError(MSG_BUSY, field='session'))

        validation = validate_request(params)
        if not validation.success:
            message = validation.error_message
            self.logger.info(f"Export request invalid: {message}")
            self._set_status(message, is_error=True)
            return Result.error(validation.error)

        advisories = odd_dimension_advisories(params)
        self._replace_session(ExportSession(
            phase=ExportPhase.SUBMITTING,
            parameters=params,
            output_path=params.output_path,
            status_message=MSG_STARTING,
            advisories=advisories,
        ))

        try:
            result = self._service.submit_export(params)
        except Exception as e:
            self.logger.exception("Encode service raised during submit")
            result = Result.error(ExportError(str(e), output_path=params.output_path))

        if not result.success:
            message = result.error_message or MSG_FAILED
            self._replace_session(self._session.evolve(
                phase=ExportPhase.FAILED,
                error_message=message,
                status_message=message,
                status_is_error=True,
            ))
            return Result.error(result.error)

        started = result.value
        self._replace_session(self._session.evolve(
            phase=ExportPhase.ACTIVE,
            session_id=started.session_id,
            output_path=started.output_path,
            command=started.command,
            progress_percent=0.0,
            processed_seconds=None,
            status_message=f"Exporting to {started.output_path}",
            status_is_error=False,
        ))
        self._subscription = ProgressSubscription(
            self._service, started.session_id, self.handle_progress_event, parent=self
        )
        self.logger.info(f"Export {started.session_id} started: {started.output_path}")
        return Result.success(self._session)

    def handle_progress_event(self, event: ProgressEvent):
        """
        Apply one progress event.

        Events for another session id, or arriving when no session is
        Active, leave the session untouched.
        """
        session = self._session
        if session.phase is not ExportPhase.ACTIVE or event.session_id != session.session_id:
            self.logger.debug(f"Ignoring progress event for {event.session_id} ({event.phase.value})")
            return

        if event.phase is ProgressPhase.PROGRESSING:
            if event.percent is not None:
                percent = self._policy.apply(session.progress_percent, event.percent)
            else:
                percent = self._policy.advance(session.progress_percent)
            processed = event.processed_seconds
            self._replace_session(session.evolve(
                progress_percent=percent,
                processed_seconds=processed if processed is not None else session.processed_seconds,
            ))
            return

        self._teardown_subscription()

        if event.phase is ProgressPhase.END:
            processed = event.processed_seconds
            self.logger.info(f"Export {session.session_id} complete: {session.output_path}")
            self._replace_session(session.evolve(
                phase=ExportPhase.COMPLETED,
                progress_percent=100.0,
                processed_seconds=processed if processed is not None else session.processed_seconds,
                status_message=f"Export complete: {session.output_path}",
                status_is_error=False,
            ))
        else:
            message = event.message or MSG_FAILED
            self.logger.error(f"Export {session.session_id} failed: {message}")
            self._replace_session(session.evolve(
                phase=ExportPhase.FAILED,
                error_message=message,
                status_message=message,
                status_is_error=True,
            ))

    def cancel(self) -> bool:
        """
        Cancel the Active session.

        The Cancelled state is applied before the encode service is asked to
        stop and is final either way; a failed cancel request only changes
        the status line.

        Returns:
            True if a session was cancelled
        """
        session = self._session
        if session.phase is not ExportPhase.ACTIVE:
            return False

        self._teardown_subscription()
        self._replace_session(session.evolve(
            phase=ExportPhase.CANCELLED,
            status_message=MSG_CANCELLED,
            status_is_error=False,
        ))

        try:
            result = self._service.cancel_export(session.session_id)
        except Exception as e:
            self.logger.exception("Encode service raised during cancel")
            result = Result.error(ExportError(str(e), session_id=session.session_id))

        if not result.success:
            message = result.error_message
            self.logger.warning(f"Cancel request for {session.session_id} failed: {message}")
            self._set_status(f"Cancel request failed: {message}", is_error=True)
        else:
            self.logger.info(f"Export {session.session_id} cancelled")
        return True

    def reset(self) -> bool:
        """Discard a finished session. Returns False while one is running."""
        if self.is_busy():
            return False
        self._teardown_subscription()
        self._replace_session(ExportSession())
        return True

    # === Internals ===

    def _teardown_subscription(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription.deleteLater()
            self._subscription = None

    def _set_status(self, message: str, is_error: bool):
        self._replace_session(self._session.evolve(
            status_message=message,
            status_is_error=is_error,
        ))

    def _replace_session(self, session: ExportSession):
        self._session = session
        self.session_changed.emit(session)
