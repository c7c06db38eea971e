"""Extract lyric text from a lyrics web page."""

from html.parser import HTMLParser

LYRIC_CONTAINER_ATTR = "data-lyrics-container"

_VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)


class _LyricExtractor(HTMLParser):
    """Collects text inside lyric container elements; ``<br>`` becomes a newline."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._stack: list[tuple[str, bool]] = []
        self._parts: list[str] = []

    @property
    def _active(self) -> bool:
        return bool(self._stack) and self._stack[-1][1]

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def _open(self, tag: str, attrs: list[tuple[str, str | None]]) -> bool:
        active = self._active or any(name == LYRIC_CONTAINER_ATTR for name, _ in attrs)
        if tag == "br" and active:
            self._parts.append("\n")
        return active

    def handle_starttag(self, tag, attrs):
        active = self._open(tag, attrs)
        if tag not in _VOID_ELEMENTS:
            self._stack.append((tag, active))

    def handle_startendtag(self, tag, attrs):
        self._open(tag, attrs)

    def handle_endtag(self, tag):
        for depth, (open_tag, _) in reversed(list(enumerate(self._stack))):
            if open_tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data):
        if self._active:
            self._parts.append(data)


def parse_lyric_html(html: str) -> str:
    """Return the text of every lyric container in ``html``, in document order."""
    extractor = _LyricExtractor()
    extractor.feed(html)
    extractor.close()
    return extractor.text