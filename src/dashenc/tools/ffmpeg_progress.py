"""FFmpeg progress tracking.

FFmpeg reports progress on stderr in lines such as::

    frame= 1234 fps= 30 q=28.0 size= 2048kB time=00:01:23.45 bitrate=...

The tracker turns the ``time=`` field of those lines into a completion
fraction relative to the source duration.
"""

import logging
import re
from datetime import timedelta

from dashenc.core.sinks import LineSink, ProgressSink, null_sink

logger = logging.getLogger(__name__)

ELAPSED_TIME_PATTERN = re.compile(r"time=\s*(-?)(\d+):(\d{1,2}):(\d{1,2}(?:\.\d+)?)")


def parse_elapsed_time(line: str) -> timedelta | None:
    """Parse the elapsed ``time=`` field from an FFmpeg stderr line.

    Args:
        line: A line from FFmpeg stderr.

    Returns:
        Elapsed output time, or None if the line carries no usable time.
    """
    match = ELAPSED_TIME_PATTERN.search(line)
    if not match:
        return None
    sign, hours, minutes, seconds = match.groups()
    try:
        elapsed = timedelta(
            hours=int(hours), minutes=int(minutes), seconds=float(seconds)
        )
    except (ValueError, OverflowError):
        return None
    return -elapsed if sign else elapsed


class ProgressTracker:
    """Line sink that derives progress from FFmpeg diagnostics.

    Every line is forwarded to the diagnostic sink unchanged. Lines carrying
    an elapsed time also produce a progress fraction, clamped to [0, 1].
    Lines that cannot be parsed are never an error.
    """

    def __init__(
        self,
        duration_seconds: float,
        progress: ProgressSink | None = None,
        diagnostics: LineSink | None = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            duration_seconds: Source duration; progress is relative to it.
            progress: Receives completion fractions.
            diagnostics: Receives every line.
        """
        self._duration = duration_seconds
        self._progress = progress or null_sink
        self._diagnostics = diagnostics or null_sink

    def __call__(self, line: str) -> None:
        self._diagnostics(line)
        fraction = self.fraction_for(line)
        if fraction is not None:
            self._progress(fraction)

    def fraction_for(self, line: str) -> float | None:
        """Completion fraction reported by ``line``, or None."""
        if self._duration <= 0:
            return None
        elapsed = parse_elapsed_time(line)
        if elapsed is None:
            return None
        fraction = (elapsed / timedelta(milliseconds=1)) / 1000 / self._duration
        return min(1.0, max(0.0, fraction))
