"""
Lexical normalizer for Apex source.

Blanks out comments and string literals so that regex-based scans never
match text that is not code. Every blanked character becomes a space and
newlines are kept, so offsets, line numbers and columns in the normalized
text are identical to the original.
"""


def _blank(chunk: str) -> str:
    return "".join("\n" if ch == "\n" else " " for ch in chunk)


def normalize_source(source: str) -> str:
    """
    Strip comments and string literals, preserving layout.

    Handles ``//`` line comments, ``/* */`` block comments and single or
    double quoted literals with backslash escapes. An unterminated literal
    ends at the newline; an unterminated block comment runs to the end.

    Args:
        source: Raw Apex source text

    Returns:
        Normalized text of the same length as ``source``
    """
    if not source:
        return ""

    out: list[str] = []
    i = 0
    n = len(source)

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            end = n if end == -1 else end
            out.append(_blank(source[i:end]))
            i = end
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(_blank(source[i:end]))
            i = end
        elif ch in ("'", '"'):
            j = i + 1
            while j < n and source[j] != ch and source[j] != "\n":
                j += 2 if source[j] == "\\" else 1
            j = min(j, n)
            if j < n and source[j] == ch:
                j += 1
            out.append(_blank(source[i:j]))
            i = j
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def line_of_offset(text: str, offset: int) -> int:
    """Return the 1-indexed line containing ``offset``."""
    return text.count("\n", 0, max(0, offset)) + 1


def line_start_offset(text: str, offset: int) -> int:
    """Return the offset where the line containing ``offset`` starts."""
    return text.rfind("\n", 0, max(0, offset)) + 1
