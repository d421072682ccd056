EPSILON = 1e-9


def format_duration(seconds: float) -> str:
    """Format a duration as MM:SS, or HH:MM:SS when it reaches an hour."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
