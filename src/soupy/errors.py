"""Exception types raised by soupy and helpers for parse error messages.

Selector problems are reported when the selector is built, never while it
is being evaluated. Evaluation only fails when a backend hands the engine
a tree that is not rooted and acyclic.
"""

from __future__ import annotations


class SelectorError(ValueError):
    """Raised when a selector cannot be constructed."""


class PatternError(SelectorError):
    """Raised when a regular expression given to a selector does not compile."""

    pattern: str

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class CapabilityError(SelectorError):
    """Raised when a selector needs pattern matching but it is disabled."""

    def __init__(self, what: str = "pattern matching") -> None:
        super().__init__(f"{what} is not available (set SOUPY_PATTERNS=1 to enable it)")


class StructuralFaultError(RuntimeError):
    """Raised when a tree is deeper than MAX_DEPTH, which means it has a cycle."""

    depth: int

    def __init__(self, depth: int, where: str = "children") -> None:
        self.depth = depth
        super().__init__(f"Tree exceeds maximum depth {depth} while following {where}; the backend tree is not acyclic")


class ParseError(SyntaxError):
    """Raised by the parsers when the input document is malformed.

    Inherits from SyntaxError so that line/column information shows up in
    tracebacks.
    """

    code: str

    def __init__(
        self,
        code: str,
        line: int | None = None,
        column: int | None = None,
        tag_name: str | None = None,
        source: str | None = None,
    ) -> None:
        self.code = code
        message = generate_error_message(code, tag_name)
        super().__init__(message)
        self.msg = message
        self.lineno = line
        self.offset = column
        if source is not None and line is not None:
            lines = source.split("\n")
            if 1 <= line <= len(lines):
                self.text = lines[line - 1]


def generate_error_message(code: str, tag_name: str | None = None) -> str:
    """Generate human-readable error message from error code.

    Args:
        code: The error code string (kebab-case format)
        tag_name: Optional tag name to include in the message for context

    Returns:
        Human-readable error message string
    """
    messages = {
        # HTML tree building
        "unexpected-end-tag": f"Unexpected </{tag_name}> end tag",
        "mismatched-end-tag": f"</{tag_name}> end tag does not close the current element",
        "expected-closing-tag-but-got-eof": f"Expected </{tag_name}> closing tag but reached end of file",
        "end-tag-on-void-element": f"Void element <{tag_name}> cannot have an end tag",
        # XML
        "malformed-xml": "Document is not well-formed XML",
        "empty-document": "Document is empty",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)
