"""Identifier helpers shared by schema inference and code generation."""

import re
from dataclasses import dataclass


_LOWER_CAMEL_RE = re.compile(r"^[a-z][a-zA-Z0-9]*$")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def to_camel_case(value: str, fallback: str = "field") -> str:
    """Convert header text to a lowerCamel identifier.

    Text that is already lowerCamel is returned unchanged. Otherwise runs of
    non-alphanumeric characters become word breaks, the first word is
    lower-cased and the rest are title-cased.

    Args:
        value: Source text (e.g. "First Name", "createdDate")
        fallback: Returned when no alphanumeric characters remain or the
            result would start with a digit

    Returns:
        The identifier, e.g. "firstName"

    Example:
        >>> to_camel_case("Received date")
        'receivedDate'
        >>> to_camel_case("名前", "field2")
        'field2'
    """
    trimmed = value.strip()
    if _LOWER_CAMEL_RE.match(trimmed):
        return trimmed

    parts = [p for p in _NON_ALNUM_RE.sub(" ", trimmed).split(" ") if p]
    if not parts:
        return fallback

    head = parts[0].lower()
    tail = "".join(p[:1].upper() + p[1:].lower() for p in parts[1:])
    if head[0].isdigit():
        return fallback
    return head + tail


@dataclass(frozen=True)
class NameVariants:
    """A feature name in the casings used by generated code.

    Attributes:
        pascal: PascalCase, e.g. "TodoList"
        camel: camelCase, e.g. "todoList"
    """
    pascal: str
    camel: str

    @property
    def upper(self) -> str:
        """UPPER form used for range constants, e.g. "TODOLIST"."""
        return self.pascal.upper()


def feature_name_variants(feature_name: str) -> NameVariants:
    """Split a feature name into its PascalCase and camelCase forms."""
    name = str(feature_name)
    return NameVariants(
        pascal=name[:1].upper() + name[1:],
        camel=name[:1].lower() + name[1:],
    )
