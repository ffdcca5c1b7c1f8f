"""
Name normalization.

Turns a free-form business name into a domain label and combines labels
with extensions into domain keys.
"""

import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")


def normalize_label(name: str) -> str:
    """
    Convert a name candidate into a domain label.

    Lowercases, drops whitespace, then drops anything outside [a-z0-9-].

        >>> normalize_label("Eco Verve!!")
        'ecoverve'
    """
    label = _WHITESPACE.sub("", name.lower())
    return _DISALLOWED.sub("", label)


def normalize_extension(extension: str) -> str:
    """Return the extension lowercased with exactly one leading dot."""
    extension = extension.strip().lower().lstrip(".")
    return f".{extension}" if extension else ""


def domain_key(label: str, extension: str) -> str:
    """Combine a label and an extension ("com" or ".com") into a domain key."""
    return f"{label}{normalize_extension(extension)}"
