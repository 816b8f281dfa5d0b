"""
FFmpeg encode service.

Starts one ffmpeg process per export, assigns the session id and forwards
the progress reader's events on ``progress_event``. Cancelling kills the
process.
"""

import subprocess
import threading
import uuid
from typing import Dict, Optional

from core.exceptions import ExportError, FFmpegNotFoundError
from core.result_types import Result

from .base_service import BaseService
from .interfaces import EncodeServiceBase
from .ffmpeg_command_builder import (
    FFmpegCommandBuilder, expected_duration_seconds, unique_output_path
)
from ..models.export_parameters import ExportParameters
from ..models.export_session import ExportStarted
from ..workers.export_progress_worker import ExportProgressWorker


class FFmpegEncodeService(EncodeServiceBase, BaseService):
    """
    Encode service backed by the ffmpeg binary.

    Each export gets a uuid4 session id. Running processes and their reader
    threads are tracked by that id until the process exits.
    """

    def __init__(self, command_builder: Optional[FFmpegCommandBuilder] = None, parent=None):
        EncodeServiceBase.__init__(self, parent)
        BaseService.__init__(self)
        self._command_builder = command_builder
        self._processes: Dict[str, subprocess.Popen] = {}
        self._workers: Dict[str, ExportProgressWorker] = {}
        self._lock = threading.Lock()

    @property
    def command_builder(self) -> FFmpegCommandBuilder:
        if self._command_builder is None:
            self._command_builder = FFmpegCommandBuilder()
        return self._command_builder

    def submit_export(self, params: ExportParameters) -> Result[ExportStarted]:
        try:
            builder = self.command_builder
        except FFmpegNotFoundError as e:
            self._handle_error(e, {'method': 'submit_export'})
            return Result.error(e)

        output_path = unique_output_path(params.output_path)
        cmd, command_string = builder.build_export_command(params, output_path)
        self._log_operation("submit_export", command_string)

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding='utf-8',
                errors='replace',
            )
        except OSError as e:
            error = ExportError(f"Failed to start ffmpeg: {e}", output_path=output_path)
            self._handle_error(error, {'method': 'submit_export'})
            return Result.error(error)

        session_id = str(uuid.uuid4())
        worker = ExportProgressWorker(
            session_id,
            process,
            expected_duration=expected_duration_seconds(params),
            on_exit=self._forget_process,
        )
        worker.progress_event.connect(self.progress_event)
        worker.process_finished.connect(self._on_process_finished)

        with self._lock:
            self._processes[session_id] = process
            self._workers[session_id] = worker

        worker.start()

        return Result.success(ExportStarted(
            session_id=session_id,
            output_path=output_path,
            command=command_string,
        ))

    def cancel_export(self, session_id: str) -> Result[None]:
        with self._lock:
            process = self._processes.get(session_id)

        if process is None:
            # Already exited
            return Result.success(None)

        self._log_operation("cancel_export", session_id)
        try:
            process.kill()
        except OSError as e:
            error = ExportError(f"Failed to cancel export: {e}", session_id=session_id)
            self._handle_error(error, {'method': 'cancel_export'})
            return Result.error(error)
        return Result.success(None)

    def is_running(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._processes

    def shutdown(self):
        """Kill every running export and wait for the readers to finish."""
        with self._lock:
            processes = list(self._processes.values())
            workers = list(self._workers.values())

        for process in processes:
            try:
                process.kill()
            except OSError as e:
                self.logger.warning(f"Failed to kill ffmpeg during shutdown: {e}")

        for worker in workers:
            worker.wait(3000)

    def _forget_process(self, session_id: str):
        with self._lock:
            self._processes.pop(session_id, None)

    def _on_process_finished(self, session_id: str, return_code: int):
        self._log_operation("export finished", f"{session_id} exit code {return_code}", level="debug")
        with self._lock:
            worker = self._workers.pop(session_id, None)
        if worker is not None:
            worker.wait()
            worker.deleteLater()
