import math
import random

import pytest

from command_stack.commands import (
    chunk_to_payload,
    chunk_token,
    command_identity,
    command_to_chunks,
    command_to_pieces,
    tokenize_command,
)
from command_stack.config import CHUNK_SIZE, FILLER


def test_tokenize_strips_quotes_and_splits_on_whitespace():
    assert tokenize_command('git commit -m "fix the\tbuild"') == ["git", "commit", "-m", "fix", "the", "build"]
    assert tokenize_command("echo 'it''s'") == ["echo", "its"]
    assert tokenize_command("") == []
    assert tokenize_command("  \n ") == []


@pytest.mark.parametrize("length", [1, 5, 7, 8, 9, 15, 16, 17, 30])
def test_chunk_token_sizes_and_padding(length):
    token = "abcdefghijklmnopqrstuvwxyz0123456789"[:length]
    chunks = chunk_token(token)
    assert len(chunks) == math.ceil(length / CHUNK_SIZE)
    assert all(len(c) == CHUNK_SIZE for c in chunks)
    assert "".join(chunks).rstrip(FILLER) == token
    pad = CHUNK_SIZE - length % CHUNK_SIZE
    if length % CHUNK_SIZE:
        assert chunks[-1].endswith(FILLER * pad)
        assert chunks[-1][-pad - 1] != FILLER


def test_chunk_token_empty_gives_one_filler_chunk():
    assert chunk_token("") == [FILLER * CHUNK_SIZE]


@pytest.mark.parametrize("text", ["", "   ", "\"\"", "' '"])
def test_blank_command_yields_single_filler_chunk(text):
    assert command_to_chunks(text) == [FILLER * CHUNK_SIZE]


def test_command_to_chunks_per_token():
    chunks = command_to_chunks("echo hi")
    assert chunks == ["echo" + FILLER * 4, "hi" + FILLER * 6]
    assert len(command_to_chunks("cat very_long_filename.txt")) == 1 + 3


def test_chunk_to_payload_pads_and_truncates():
    assert chunk_to_payload("abc") == ("a", "b", "c") + (FILLER,) * 5
    assert chunk_to_payload("abcdefghijk") == tuple("abcdefgh")
    assert len(chunk_to_payload("")) == CHUNK_SIZE


def test_command_identity_is_first_token():
    assert command_identity("  ls -la") == "ls"
    assert command_identity('"git" status') == "git"
    assert command_identity("") == ""


def test_command_to_pieces_one_per_chunk():
    pieces = command_to_pieces("echo hi", random.Random(3))
    assert len(pieces) == 2
    assert pieces[0].payload == tuple("echo") + (FILLER,) * 4
