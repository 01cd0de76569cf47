"""Session identifier configuration."""

import os


SESSION_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
SESSION_ID_LENGTH = int(os.getenv("SESSION_ID_LENGTH", "6"))


__all__ = [
    "SESSION_ID_ALPHABET",
    "SESSION_ID_LENGTH",
]
