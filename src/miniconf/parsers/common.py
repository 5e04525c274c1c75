from __future__ import annotations

from typing import Optional, Tuple

ARRAY_SUFFIX = "[]"

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def normalize_key(key: Optional[str], *, case_insensitive: bool = True) -> str:
    k = (key or "").strip()
    return k.lower() if case_insensitive else k


def split_array_key(raw_key: str) -> Tuple[str, bool]:
    """
    Strip a trailing `[]` marker from an already trimmed key.

    Examples:
      "hosts[]" -> ("hosts", True)
      "hosts"   -> ("hosts", False)
    """
    if raw_key.endswith(ARRAY_SUFFIX):
        return raw_key[: -len(ARRAY_SUFFIX)].rstrip(), True
    return raw_key, False


def unquote(val: str) -> str:
    v = val.strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        v = v[1:-1]
    return v


def decode_escapes(val: str) -> Optional[str]:
    """
    Decode backslash escapes.

    Known escapes (\\n, \\t, \\r, \\\\, \\", \\') are replaced, unknown ones are
    kept verbatim. Returns None when the value ends with a lone backslash.
    """
    if "\\" not in val:
        return val

    out = []
    i = 0
    n = len(val)
    while i < n:
        ch = val[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            return None
        nxt = val[i + 1]
        out.append(_ESCAPES.get(nxt, ch + nxt))
        i += 2
    return "".join(out)
