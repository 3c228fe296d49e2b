import sys


class RiftError(Exception):
    """Base class for errors that should stop the bot with a clean message."""
    pass


class ProtocolError(RiftError):
    """Malformed or truncated input from the game referee."""
    pass


class GraphSetupError(RiftError):
    """Invalid map topology, or setup attempted after the graph was sealed."""
    pass


class EngineInvariantError(RiftError):
    """An internal invariant was violated. Always a programming error."""
    pass


class ConfigError(RiftError):
    """Bad engine parameters."""
    pass


def report_and_exit(exc: RiftError) -> None:
    """
    Print a one-line error for a RiftError and terminate with status 1.

    Stdout carries the game protocol, so the message always goes to stderr.
    """
    print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
    sys.exit(1)
