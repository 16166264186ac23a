import io
import re
from typing import Any

import yaml

from ..core.model import ConvertedNote

_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


class YamlFrontmatter:
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _FM.match(text)
        if not m:
            return {}, text
        fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        body = text[m.end() :]
        return (fm, body)

    def encode(self, meta: dict[str, Any]) -> str:
        if not meta:
            return ""
        buf = io.StringIO()
        # an all-digit id is emitted quoted so it loads back as a string
        # default_flow_style=None keeps scalar-only lists inline: "tags: [wucai]"
        yaml.safe_dump(
            meta, buf, sort_keys=False, allow_unicode=True, default_flow_style=None
        )
        return f"---\n{buf.getvalue()}---\n"


class MemoCodec:
    """
    Memo file layout: frontmatter block, one blank separator line, body verbatim.
    """

    def __init__(self, fm: YamlFrontmatter | None = None):
        self.fm = fm or YamlFrontmatter()

    def encode_file(self, note: ConvertedNote) -> str:
        return self.fm.encode(note.meta.as_frontmatter()) + "\n" + note.body

    def decode_file(self, text: str) -> tuple[dict[str, Any], str]:
        meta, body = self.fm.decode(text)
        if body.startswith("\n"):
            body = body[1:]
        return meta, body
