"""Exceptions raised by mergesweep."""


class MergeSweepError(Exception):
    """Base class for mergesweep errors."""


class ConfigError(MergeSweepError):
    """Invalid configuration. Raised before any branch is enumerated."""


class NoCandidatesError(MergeSweepError):
    """No branch is left to delete after filtering."""


class GitError(MergeSweepError):
    """Git operation error."""
