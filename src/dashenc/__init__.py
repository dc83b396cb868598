"""DASH Encoder: multi-bitrate MPEG-DASH packaging driven by ffmpeg and MP4Box."""

__version__ = "0.1.0"
