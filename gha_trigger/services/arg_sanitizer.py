"""
Escaping for free-text workflow inputs.

Wire contract with the receiving workflow: backslash, double quote, LF, CR and
NUL are backslash-escaped, so every value is a single line with no bare quotes
and no byte the OS rejects in an argv entry.
The workflow turns ``\\n`` back into a line break.
"""

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\x00": "\\0",
}
_UNESCAPES = {v[1]: k for k, v in _ESCAPES.items()}


def escape_for_cli(raw: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in (raw or ""))


def unescape_from_cli(escaped: str) -> str:
    """Inverse of escape_for_cli. Unknown escapes are kept as-is."""
    out = []
    i = 0
    n = len(escaped)
    while i < n:
        ch = escaped[i]
        if ch == "\\" and i + 1 < n and escaped[i + 1] in _UNESCAPES:
            out.append(_UNESCAPES[escaped[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
