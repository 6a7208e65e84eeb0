"""chatforge — turn prompts into HTML artifacts by driving a browser chat session."""

__version__ = "0.1.0"
