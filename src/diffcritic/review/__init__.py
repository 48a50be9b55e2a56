"""Diff discovery, prompt building and review orchestration."""
