"""Shared utilities: logging setup and cross-cutting helpers."""
