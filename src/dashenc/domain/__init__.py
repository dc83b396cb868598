"""Domain models and enums for DASH Encoder.

Usage:
    from dashenc.domain import Quality, SourceMetadata, StreamType
"""

from .enums import PipelineStage, StreamType
from .models import (
    CommandPlan,
    EncodeOptions,
    ExecutionResult,
    MediaStream,
    Quality,
    SourceMetadata,
    StreamFile,
)

__all__ = [
    # Models
    "CommandPlan",
    "EncodeOptions",
    "ExecutionResult",
    "MediaStream",
    "Quality",
    "SourceMetadata",
    "StreamFile",
    # Enums
    "PipelineStage",
    "StreamType",
]
