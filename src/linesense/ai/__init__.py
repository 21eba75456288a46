"""Prompt construction, model transport and response parsing."""
