"""hunkstage — structured diffs and hunk-level staging for git working trees."""

__version__ = "0.1.0"
