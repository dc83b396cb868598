"""Core utilities shared across DASH Encoder modules."""
