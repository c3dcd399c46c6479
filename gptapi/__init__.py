"""Client library for a GPT-style REST API: assistants resources, models, moderation, speech and event streams."""

__version__ = "0.1.0"