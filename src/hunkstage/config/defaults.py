"""Default configuration values and starter .hunkstage.toml template."""

CONFIG_FILENAME = ".hunkstage.toml"

DEFAULT_TOML = """\
# hunkstage configuration
version = "1.0"

[git]
executable = "git"
timeout = 30              # seconds allowed per git invocation

[diff]
context_lines = 3         # unchanged lines around each hunk
detect_renames = true

[output]
format = "terminal"       # terminal | json
show_summary = true

[logging]
level = "WARNING"         # DEBUG | INFO | WARNING | ERROR
"""
