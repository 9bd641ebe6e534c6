"""Low-level scanning helpers aware of strings and bracket nesting."""

from sdl_transpiler.errors import SchemaSyntaxError

OPENERS = "([{<"
CLOSERS = ")]}>"


def skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opening at `start`.

    Handles both `"..."` strings (with backslash escapes) and `\"\"\"...\"\"\"`
    block strings.
    """
    if text.startswith('"""', start):
        end = text.find('"""', start + 3)
        while end != -1 and text[end - 1] == "\\":
            end = text.find('"""', end + 3)
        if end == -1:
            msg = f"Unterminated block string starting with {text[start:start + 20]!r}"
            raise SchemaSyntaxError(msg)
        return end + 3

    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        if ch == "\n":
            break
        i += 1
    msg = f"Unterminated string starting with {text[start:start + 20]!r}"
    raise SchemaSyntaxError(msg)


def skip_comment(text: str, start: int) -> int:
    """Return the index of the newline ending the comment at `start`."""
    end = text.find("\n", start)
    return len(text) if end == -1 else end


def find_top_level(text: str, targets: str, start: int = 0) -> int:
    """Find the first character of `targets` outside strings and brackets."""
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i = skip_string(text, i)
            continue
        if depth == 0 and ch in targets:
            return i
        if ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth = max(depth - 1, 0)
        i += 1
    return -1


def split_top_level(text: str, separators: str = ",") -> list[str]:
    """Split on separators that sit outside strings and brackets."""
    parts: list[str] = []
    start = 0
    while True:
        idx = find_top_level(text, separators, start)
        if idx == -1:
            parts.append(text[start:].strip())
            return parts
        parts.append(text[start:idx].strip())
        start = idx + 1


def find_matching(text: str, start: int, opener: str, closer: str) -> int:
    """Return the index of the closer matching the opener at `start`, or -1."""
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i = skip_string(text, i)
            continue
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space, leaving string literals intact."""
    out: list[str] = []
    i = 0
    n = len(text)
    pending_space = False
    while i < n:
        ch = text[i]
        if ch == '"':
            end = skip_string(text, i)
            if pending_space and out:
                out.append(" ")
            pending_space = False
            out.append(text[i:end])
            i = end
            continue
        if ch.isspace():
            pending_space = True
        else:
            if pending_space and out:
                out.append(" ")
            pending_space = False
            out.append(ch)
        i += 1
    return "".join(out)
