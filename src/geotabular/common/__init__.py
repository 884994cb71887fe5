"""Shared exceptions, configuration and utilities."""
