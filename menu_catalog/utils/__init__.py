"""Shared helpers: logging, error handling and id generation."""
