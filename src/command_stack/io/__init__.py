"""Command event ingestion over a Unix socket."""

from .listener import CommandListener, drain_events, parse_command_line

__all__ = ["CommandListener", "drain_events", "parse_command_line"]
