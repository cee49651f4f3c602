from __future__ import annotations

from dataclasses import dataclass

CODE_PREVIEW_LENGTH = 50


def shorten_code(code: str, limit: int = CODE_PREVIEW_LENGTH) -> str:
    if len(code) <= limit:
        return code
    return f"{code[:limit]}..."


@dataclass
class Redactor:
    enabled: bool = True
    preview: int = 12

    def redact_code(self, code: str) -> str:
        if not self.enabled:
            return code
        if len(code) <= self.preview:
            return code
        return f"{code[: self.preview]}… ({len(code)} chars)"

    def redact_secret(self, value: str | None) -> str:
        if not value:
            return ""
        if not self.enabled:
            return value
        return "********"
