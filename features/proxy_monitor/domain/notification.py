from __future__ import annotations

from dataclasses import dataclass, field
from email.charset import BASE64, Charset
from email.header import Header
from typing import Dict, List


CRLF = "\r\n"
CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class Labels:
    available: str
    unavailable: str
    changed_subject: str
    persists_subject: str

    def describe(self, available: bool) -> str:
        return self.available if available else self.unavailable


LABELS: Dict[str, Labels] = {
    "zh": Labels(
        available="可用",
        unavailable="不可用",
        changed_subject="状态变更",
        persists_subject="状态持续",
    ),
    "en": Labels(
        available="available",
        unavailable="unavailable",
        changed_subject="state changed",
        persists_subject="state persists",
    ),
}


def encode_word(text: str, charset: str = "utf-8") -> str:
    """Return ``text`` as base64 MIME encoded-words, or unchanged when it is plain ASCII.

    Long values are folded with CRLF so the header block never carries a bare LF.
    """

    if text.isascii():
        return text
    b_charset = Charset(charset)
    b_charset.header_encoding = BASE64
    return Header(text, b_charset).encode(linesep=CRLF)


@dataclass(frozen=True)
class NotificationMessage:
    sender_name: str
    sender: str
    recipients: List[str]
    subject: str
    lines: List[str] = field(default_factory=list)

    @property
    def body(self) -> str:
        return "".join(f"{line}{CRLF}" for line in self.lines)

    def render(self) -> str:
        headers = [
            f"From: {encode_word(self.sender_name)} <{self.sender}>",
            f"To: {','.join(self.recipients)}",
            f"Subject: {encode_word(self.subject)}",
            f"Content-Type: {CONTENT_TYPE}",
        ]
        return CRLF.join(headers) + CRLF + CRLF + self.body
