"""Exception hierarchy surfaced to the command-line entry point."""

from __future__ import annotations


class RepoTrafficError(Exception):
    """Base class for every failure the CLI reports."""


class MalformedInputError(RepoTrafficError, ValueError):
    """Unparseable repository identifier, timestamp or command."""


class TransportError(RepoTrafficError):
    """The GitHub API call could not be completed."""


class DecodeError(RepoTrafficError):
    """The API answered, but the payload does not have the expected shape."""


class PersistenceError(RepoTrafficError):
    """Writing an output file failed."""
