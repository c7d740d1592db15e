from __future__ import annotations

import json
from pathlib import Path

from lintpad.lint.model import Example
from lintpad.sources.wire import decode_examples

BUNDLED_EXAMPLES_PATH = Path(__file__).resolve().parent.parent / "data" / "examples.json"


class ExampleTable:
    """Static lookup of illustrative good/bad snippets per lint kind."""

    def __init__(self, examples: list[Example] | None = None) -> None:
        self._by_kind: dict[str, list[Example]] = {}
        for example in examples or []:
            self._by_kind.setdefault(example.kind, []).append(example)

    @classmethod
    def from_file(cls, path: str | Path | None) -> "ExampleTable":
        target = Path(path) if path else BUNDLED_EXAMPLES_PATH
        try:
            payload = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return cls()
        return cls(decode_examples(payload))

    def lookup(self, kind: str) -> list[Example]:
        return list(self._by_kind.get(str(kind or "").strip().lower(), []))

    def kinds(self) -> list[str]:
        return sorted(self._by_kind)

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_kind.values())
