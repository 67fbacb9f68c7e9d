def like_pattern(query: str) -> str:
    """Substring LIKE pattern with ``%`` and ``_`` matched literally."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
