"""Turn free-form user input into a bare Maildrop inbox name."""

MAILDROP_DOMAIN = "maildrop.cc"

_CHECK_COMMAND = "check"
_JSON_FLAGS = frozenset({"--json", "-j"})


def parse_inbox_from_input(raw: str | None) -> str | None:
    """Extract the inbox name from a command-line argument or an interactive line.

    Accepts ``check <name>``, ``name@domain`` and bare ``name`` forms.
    Returns None when no inbox can be determined.
    """
    text = (raw or "").strip()
    if not text:
        return None

    parts = text.split()
    if parts[0].lower() == _CHECK_COMMAND:
        return parts[1] if len(parts) > 1 else None
    if "@" in text:
        return text.split("@", 1)[0] or None
    return parts[0]


def split_flags(line: str) -> tuple[str, bool]:
    """Strip output flags from an interactive line.

    Returns the line without ``--json``/``-j`` tokens and whether one was present.
    """
    tokens = line.split()
    kept = [t for t in tokens if t not in _JSON_FLAGS]
    return " ".join(kept), len(kept) != len(tokens)


def mailbox_address(name: str) -> str:
    return f"{name}@{MAILDROP_DOMAIN}"
