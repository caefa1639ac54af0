"""Shared helpers: LLM client, response sanitizing, markdown post-processing."""
