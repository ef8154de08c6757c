"""examiner - policy-gated, read-only file access for AI tool calls."""

__version__ = "0.1.0"
