"""Introspector module for DASH Encoder.

- Prober: Protocol defining the probe interface
- FFprobeProber: Production implementation using ffprobe
- interpret_probe_output: Turn a probe document into SourceMetadata
- format_human / format_json: Formatters for the ``probe`` command
"""

from dashenc.introspector.ffprobe import FFprobeProber
from dashenc.introspector.formatters import format_human, format_json
from dashenc.introspector.interface import Prober
from dashenc.introspector.parsers import interpret_probe_output, parse_framerate

__all__ = [
    "FFprobeProber",
    "Prober",
    "format_human",
    "format_json",
    "interpret_probe_output",
    "parse_framerate",
]
