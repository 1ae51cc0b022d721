"""
Text formatting utilities for repodata-retention console output.
"""

import sys


class EmojiFormatter:
    """
    Formatter for adding emojis to console output.
    """

    EMOJI_MAP = {
        "success": "✅",
        "error": "❌",
        "info": "ℹ️",
        "search": "🔍",
        "delete": "🗑️",
        "copy": "📋",
    }

    @classmethod
    def format(cls, message_type: str, message: str) -> str:
        """
        Format a message with appropriate emoji.

        Args:
            message_type: Type of message (success, error, delete, etc.)
            message: The message to format

        Returns:
            Formatted message string
        """
        emoji = cls.EMOJI_MAP.get(message_type, "")
        if emoji:
            return f"{emoji} {message}"
        return message

    @classmethod
    def safe_print(cls, message_type: str, message: str) -> None:
        """
        Print a formatted message, dropping the emoji if the console
        encoding cannot represent it.
        """
        text = cls.format(message_type, message)
        try:
            print(text)
        except UnicodeEncodeError:
            print(message)
        sys.stdout.flush()
