"""Exceptions raised while building, encoding and decoding ABI data."""

from __future__ import annotations


class AbiError(Exception):
    """Base class for every error raised by this package."""


class InvalidName(AbiError):
    """An entity such as a function or event could not be found by name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid name: {name}")
        self.name = name


class InvalidData(AbiError):
    """Data does not match what the ABI specification expects."""

    def __init__(self, message: str = "Invalid data") -> None:
        super().__init__(message)