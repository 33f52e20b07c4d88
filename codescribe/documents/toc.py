"""Automatic table-of-contents generation."""

from __future__ import annotations

import re
from typing import List


class TableOfContentsBuilder:
    """Builds ToC blocks from markdown headings, optionally as a numbered list."""

    PLACEHOLDER = "<!-- codescribe:toc -->"

    def __init__(self, *, numbered: bool = False, max_level: int = 3) -> None:
        self.numbered = numbered
        self.max_level = max(2, max_level)

    def build(self, markdown: str) -> str:
        toc_block = self._build_block(markdown)
        if self.PLACEHOLDER in markdown:
            return markdown.replace(self.PLACEHOLDER, toc_block, 1)
        if not toc_block:
            return markdown
        return toc_block + "\n\n" + markdown

    def _build_block(self, markdown: str) -> str:
        headings: List[tuple[int, str, str]] = []
        in_code = False
        for line in markdown.splitlines():
            stripped = line.strip()
            if stripped.startswith("```"):
                in_code = not in_code
                continue
            if in_code:
                continue
            match = re.match(r"^(#{2,6})\s+(.*)$", stripped)
            if match and len(match.group(1)) <= self.max_level:
                title = match.group(2).strip()
                headings.append((len(match.group(1)), title, self.slugify(title)))

        if not headings:
            return ""

        output: List[str] = ["## Table of Contents", ""]
        counter = 0
        for level, title, anchor in headings:
            indent = "  " * (level - 2)
            if self.numbered and level == 2:
                counter += 1
                output.append(f"{indent}{counter}. [{title}](#{anchor})")
            else:
                output.append(f"{indent}- [{title}](#{anchor})")
        return "\n".join(output)

    @staticmethod
    def slugify(title: str) -> str:
        slug = title.lower()
        slug = re.sub(r"[^a-z0-9\s-]", "", slug)
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"-+", "-", slug)
        return slug.strip("-")


__all__ = ["TableOfContentsBuilder"]
