"""UI utility functions."""


def subtitle_keys(*key_desc_pairs: tuple[str, str]) -> str:
    """Format key bindings for a hint line.

    Args:
        *key_desc_pairs: Variable number of (key, description) tuples

    Returns:
        Formatted string like "(Enter) Select / (ESC) Exit"

    Example:
        >>> subtitle_keys(("Enter", "Select"), ("ESC", "Exit"))
        "(Enter) Select / (ESC) Exit"
    """
    return " / ".join(f"({key}) {desc}" for key, desc in key_desc_pairs)
