"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Formatting helpers for the ranking report.
"""
import time


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Format a byte count with binary units: 512B, 1.50KB, 3.20MB.
        Negative counts are shown as 0B.
        """
        if size_bytes < 1024:
            return f"{max(size_bytes, 0)}B"

        size = float(size_bytes)
        for unit in ("KB", "MB", "GB", "TB", "PB"):
            size /= 1024
            if size < 1024:
                return f"{size:.2f}{unit}"
        return f"{size / 1024:.2f}EB"

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """Local-time rendering of a Unix timestamp."""
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"
