"""Contract ABI tokens and encoding, parameter types, constructors and events."""

__version__ = "0.1.0"