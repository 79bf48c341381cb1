"""
Text formatting utilities.
"""


def format_clock(seconds: int) -> str:
    """Format seconds as a timestamp badge.

    Args:
        seconds: Offset in whole seconds

    Returns:
        "MM:SS" below one hour (e.g., "01:30"), otherwise "H:MM:SS"
    """
    hours = seconds // 3600
    minutes = (seconds // 60) % 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def single_line(value: str) -> str:
    """Collapse line breaks and runs of whitespace into single spaces."""
    return " ".join(value.split())
