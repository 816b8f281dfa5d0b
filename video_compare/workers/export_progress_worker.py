"""
Export progress worker.

Background thread that follows one running ffmpeg process: parses its
``-progress pipe:1`` output into ProgressEvents and reports a failed exit
with the tail of stderr.
"""

import threading
from collections import deque
from typing import Callable, Optional
from PySide6.QtCore import QThread, Signal

from ..models.export_session import ProgressEvent, ProgressPhase


STDERR_TAIL_LINES = 8


class ExportProgressWorker(QThread):
    """
    Background reader for one ffmpeg export.

    stdout is read on this thread; stderr is drained on a daemon thread so
    ffmpeg never blocks on a full pipe.

    Signals:
        progress_event: (event: ProgressEvent)
        process_finished: (session_id: str, return_code: int)
    """

    progress_event = Signal(object)  # ProgressEvent
    process_finished = Signal(str, int)  # session_id, return code

    def __init__(
        self,
        session_id: str,
        process,
        expected_duration: Optional[float] = None,
        on_exit: Optional[Callable[[str], None]] = None,
        parent=None
    ):
        """
        Initialize progress worker.

        Args:
            session_id: Export session this process belongs to
            process: Running ``subprocess.Popen`` with text-mode stdout/stderr pipes
            expected_duration: Output duration in seconds, enables explicit percentages
            on_exit: Called with the session id once the process has exited
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self.session_id = session_id
        self.process = process
        self.expected_duration = expected_duration
        self._on_exit = on_exit
        self._stderr_tail = deque(maxlen=STDERR_TAIL_LINES)

    def run(self):
        """Read progress blocks until ffmpeg closes stdout, then wait for exit."""
        drain = threading.Thread(target=self._drain_stderr, daemon=True)
        drain.start()

        out_time_us = None
        for raw_line in self.process.stdout:
            line = raw_line.strip()
            if "=" not in line:
                continue
            key, value = line.split("=", 1)

            if key == "out_time_ms":
                # ffmpeg reports microseconds under this key
                out_time_us = int(value) if value.isdigit() else None
            elif key == "progress":
                self.progress_event.emit(ProgressEvent(
                    session_id=self.session_id,
                    phase=ProgressPhase.from_ffmpeg(value),
                    processed_time_us=out_time_us,
                    percent=self._percent(out_time_us),
                ))

        return_code = self.process.wait()
        drain.join(timeout=1.0)

        if return_code != 0:
            tail = "\n".join(self._stderr_tail)
            message = f"ffmpeg exited with code {return_code}"
            if tail:
                message += f":\n{tail}"
            self.progress_event.emit(ProgressEvent(
                session_id=self.session_id,
                phase=ProgressPhase.ERROR,
                processed_time_us=out_time_us,
                message=message,
            ))

        if self._on_exit is not None:
            self._on_exit(self.session_id)
        self.process_finished.emit(self.session_id, return_code)

    def _drain_stderr(self):
        stderr = self.process.stderr
        if stderr is None:
            return
        for raw_line in stderr:
            line = raw_line.rstrip()
            if line:
                self._stderr_tail.append(line)

    def _percent(self, out_time_us: Optional[int]) -> Optional[float]:
        if not self.expected_duration or out_time_us is None:
            return None
        seconds = out_time_us / 1_000_000
        return max(0.0, min(100.0, seconds / self.expected_duration * 100))

    @property
    def stderr_tail(self):
        return list(self._stderr_tail)
