"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import time
from datetime import datetime


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512 B, 1.50 KB, 3.20 MB).
        Bytes are shown as an integer, larger units with two decimals.
        """
        if size_bytes < 0:
            return "0 B"
        if size_bytes < 1024:
            return f"{size_bytes} B"

        value = float(size_bytes)
        for unit in ["KB", "MB", "GB"]:
            value /= 1024
            if value < 1024 or unit == "GB":
                return f"{value:.2f} {unit}"

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Convert a Unix timestamp to a human-readable string.
        Uses local time by default.
        """
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"

    @staticmethod
    def timestamp_to_iso(timestamp: float) -> str:
        """ISO-8601 with the local UTC offset, e.g. 2025-01-31T14:05:00.123456+01:00."""
        return datetime.fromtimestamp(timestamp).astimezone().isoformat()
