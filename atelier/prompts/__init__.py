"""Instruction text for group generation requests."""

from .group_prompt import GroupPromptGenerator

__all__ = ["GroupPromptGenerator"]
