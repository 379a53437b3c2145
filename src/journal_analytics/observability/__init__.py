"""Structured logging for the analytics engine."""
