"""Service Bot: a question/answer help assistant backed by a small knowledge base."""

__version__ = "0.1.0"
