from __future__ import annotations

import random
from typing import List, Optional, Tuple

from command_stack.config import CHUNK_SIZE, FILLER
from command_stack.game.pieces import Piece, random_shape
from .tokenize import tokenize_command


def chunk_token(token: str) -> List[str]:
    """Slice ``token`` into CHUNK_SIZE runs, padding the last one with FILLER."""
    chunks = [
        token[i : i + CHUNK_SIZE].ljust(CHUNK_SIZE, FILLER)
        for i in range(0, len(token), CHUNK_SIZE)
    ]
    return chunks or [FILLER * CHUNK_SIZE]


def command_to_chunks(text: str) -> List[str]:
    chunks: List[str] = []
    for token in tokenize_command(text):
        chunks.extend(chunk_token(token))
    # Every command yields at least one piece.
    return chunks or [FILLER * CHUNK_SIZE]


def chunk_to_payload(chunk: str) -> Tuple[str, ...]:
    return tuple(chunk[:CHUNK_SIZE].ljust(CHUNK_SIZE, FILLER))


def command_to_pieces(text: str, rng: Optional[random.Random] = None) -> List[Piece]:
    return [
        Piece(shape=random_shape(rng), payload=chunk_to_payload(chunk))
        for chunk in command_to_chunks(text)
    ]
