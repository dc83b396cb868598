"""Exception taxonomy for DASH Encoder.

Structurally invalid requests raise immediately. Failures of the external
tools are raised inside a pipeline stage and converted to an absent result
by :meth:`dashenc.pipeline.encoder.DashEncoder.generate_dash`.
"""


class DashEncError(Exception):
    """Base class for all DASH Encoder errors."""

    pass


class ValidationError(DashEncError, ValueError):
    """Raised when caller input is invalid (missing file, bad ladder, ...)."""

    pass


class ProbeError(DashEncError):
    """Raised when source metadata cannot be read or interpreted."""

    pass


class ExternalToolError(DashEncError):
    """Raised when an external tool exits with a non-zero code."""

    def __init__(self, tool: str, exit_code: int, message: str | None = None) -> None:
        self.tool = tool
        self.exit_code = exit_code
        super().__init__(message or f"{tool} returned code {exit_code}")


class ManifestError(DashEncError):
    """Raised when a manifest is missing or cannot be parsed."""

    def __init__(self, message: str, path: object = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class ToolNotFoundError(DashEncError):
    """Raised when an external tool cannot be located."""

    pass


class ConfigError(DashEncError):
    """Raised when configuration cannot be loaded in strict mode."""

    pass


class LadderFileError(DashEncError):
    """Error loading or validating a quality ladder file."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)
