"""Authenticated GitHub workflow trigger with optional LLM log analysis."""

__version__ = "0.1.0"
