"""StyleSwap: prompt-driven photo edits backed by Gemini."""

__version__ = "1.0.0"
