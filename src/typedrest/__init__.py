"""Typed request/response contracts for REST APIs."""

__version__ = "0.1.0"
