"""Final assembly of accepted fragments."""

from __future__ import annotations

from typing import Any


class OutputAssembler:
    """Join the fragments of one run into the returned string.

    Nothing is sanitized here: every fragment has already been accepted by the
    engine. The output hook may still rewrite or veto the list.
    """

    __slots__ = ("normalizer", "trim_trailing_whitespace")

    def __init__(self, normalizer: Any = None, *, trim_trailing_whitespace: bool = True) -> None:
        self.normalizer = normalizer
        self.trim_trailing_whitespace = bool(trim_trailing_whitespace)

    def assemble(self, sanitizer: Any, fragments: list[str]) -> str:
        if not sanitizer.hooks.on_output(sanitizer, fragments):
            return ""
        output = "".join(fragments)
        if self.normalizer is not None:
            output = self.normalizer.normalize(output)
        if self.trim_trailing_whitespace:
            output = output.rstrip()
        return output
