"""Allow-list HTML sanitizer applied to resolved messages before display."""

from __future__ import annotations

from html import escape
from html.parser import HTMLParser

_MODERATE_TAGS = frozenset({"span", "em", "strong", "b", "i", "br"})

TAG_LEVELS: dict[str, frozenset[str]] = {
    "high": frozenset(),
    "moderate": _MODERATE_TAGS,
    "low": _MODERATE_TAGS
    | {"p", "ul", "ol", "li", "a", "div", "pre", "code", "blockquote"}
    | {f"h{level}" for level in range(1, 7)},
}

_MODERATE_ATTRIBUTES = frozenset({"class", "title", "href", "target", "alt"})

ATTRIBUTE_LEVELS: dict[str, frozenset[str]] = {
    "high": frozenset(),
    "moderate": _MODERATE_ATTRIBUTES,
    "low": _MODERATE_ATTRIBUTES | {"style", "width", "height"},
}

_DROP_CONTENT = frozenset({"script", "style"})
_VOID_TAGS = frozenset({"br"})
_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")


def _is_unsafe_url(value: str) -> bool:
    # Browsers ignore ASCII whitespace and control characters inside a scheme.
    compact = "".join(char for char in value if char > " " and char != "\x7f")
    return compact.lower().startswith(_UNSAFE_SCHEMES)


class _AllowListParser(HTMLParser):
    def __init__(self, tags: frozenset[str], attributes: frozenset[str]) -> None:
        super().__init__(convert_charrefs=False)
        self._tags = tags
        self._attributes = attributes
        self._suppressed = 0
        self.parts: list[str] = []

    def _render_attrs(self, attrs: list[tuple[str, str | None]]) -> str:
        rendered: list[str] = []
        for name, value in attrs:
            if name not in self._attributes:
                continue
            if value is None:
                rendered.append(f" {name}")
                continue
            if name == "href" and _is_unsafe_url(value):
                continue
            rendered.append(f' {name}="{escape(value, quote=True)}"')
        return "".join(rendered)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROP_CONTENT:
            self._suppressed += 1
            return
        if self._suppressed or tag not in self._tags:
            return
        suffix = " /" if tag in _VOID_TAGS else ""
        self.parts.append(f"<{tag}{self._render_attrs(attrs)}{suffix}>")

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._suppressed or tag not in self._tags:
            return
        self.parts.append(f"<{tag}{self._render_attrs(attrs)} />")

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT:
            self._suppressed = max(0, self._suppressed - 1)
            return
        if self._suppressed or tag not in self._tags or tag in _VOID_TAGS:
            return
        self.parts.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._suppressed:
            self.parts.append(escape(data, quote=False))

    def handle_entityref(self, name: str) -> None:
        if not self._suppressed:
            self.parts.append(f"&{name};")

    def handle_charref(self, name: str) -> None:
        if not self._suppressed:
            self.parts.append(f"&#{name};")


def sanitize_string(text: str, tags_level: str = "low", attr_level: str = "moderate") -> str:
    """Strip markup outside the allow-list for ``tags_level``/``attr_level``."""

    try:
        tags = TAG_LEVELS[tags_level]
        attributes = ATTRIBUTE_LEVELS[attr_level]
    except KeyError as exc:
        raise ValueError(f"Unknown sanitization level: {exc.args[0]!r}") from exc

    if "<" not in text and "&" not in text and ">" not in text:
        return text

    parser = _AllowListParser(tags, attributes)
    parser.feed(text)
    parser.close()
    return "".join(parser.parts)


__all__ = ["ATTRIBUTE_LEVELS", "TAG_LEVELS", "sanitize_string"]
