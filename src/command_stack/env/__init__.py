"""Gymnasium environments for command-stack."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="CommandStack-10x20-v0",
    entry_point="command_stack.env.stack_env:CommandStackEnv",
)

__all__ = ["CommandStack-10x20-v0"]
