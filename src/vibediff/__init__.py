"""vibediff — structured, line-annotated diffs of a git working tree."""

__version__ = "0.1.0"
