"""Evaluator helper modules for the Corvid runtime."""

__all__ = [
    "common",
    "literals",
    "expr",
    "containers",
    "blocks",
    "loops",
    "fn",
    "output",
]
