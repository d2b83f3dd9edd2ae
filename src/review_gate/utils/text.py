"""
Small text helpers shared by the services
"""


def truncate_text(text: str, max_length: int) -> str:
    """Truncate text to max_length characters, marking the cut with an ellipsis"""
    if len(text) <= max_length:
        return text
    if max_length <= 3:
        return text[:max_length]
    return text[: max_length - 3] + "..."


def count_lines(text: str, limit: int) -> int:
    """
    Count newline-delimited lines, stopping once the count exceeds limit.

    Every "\n" opens a new line, a trailing one included. The scan walks
    newline positions with str.find so it never does more than limit + 1
    steps, whatever the input looks like.

    Returns:
        The line count, or limit + 1 if the text has more than limit lines
    """
    lines = 1
    position = text.find("\n")
    while position != -1:
        lines += 1
        if lines > limit:
            return limit + 1
        position = text.find("\n", position + 1)
    return lines
