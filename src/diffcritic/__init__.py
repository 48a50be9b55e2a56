"""diffcritic: LLM code review of the working-tree diff of one file."""

__version__ = "0.1.0"
