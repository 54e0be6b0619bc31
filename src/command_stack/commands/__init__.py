"""Turning command text into piece payloads."""

from .tokenize import command_identity, tokenize_command
from .chunk import chunk_to_payload, chunk_token, command_to_chunks, command_to_pieces

__all__ = [
    "tokenize_command",
    "command_identity",
    "chunk_token",
    "command_to_chunks",
    "chunk_to_payload",
    "command_to_pieces",
]
