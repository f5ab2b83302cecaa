"""Starter .vibediff.toml template."""

DEFAULT_TOML = """\
# vibediff configuration
version = "1.0"

[diff]
scope = "against-target"  # unstaged | staged | against-target
# target = "main"         # ref for against-target; default HEAD
context_lines = 3         # unchanged lines around each hunk
timeout = 30              # seconds per git invocation

[output]
format = "terminal"       # terminal | json
show_summary = true

[logging]
debug = false
"""
