"""Clean up track/artist search queries before looking up lyrics."""

# A song name shorter than this (after removing remix metadata) suggests
# the dash is part of the title rather than a metadata separator.
SONG_MIN_LENGTH_WO_REMIX_METADATA = 3


def _is_filler(c: str) -> bool:
    return c == "-" or c.isspace()


def _rfind_non_filler(s: str, idx: int) -> int:
    """Return the position just after the last non-filler char before ``idx``.

    Acts like a right trim of spaces and dashes. Returns ``idx`` unchanged
    when nothing qualifies.
    """
    if idx > len(s):
        return idx
    prefix = s[:idx]
    for pos in range(len(prefix) - 1, -1, -1):
        if not _is_filler(prefix[pos]):
            return pos + 1
    return idx


def _end_of_word(s: str, idx: int) -> int:
    """Extend ``idx`` to the end of the current word (``remixed``, ``remastered``)."""
    if idx > len(s):
        return idx
    for offset, c in enumerate(s[idx:]):
        if not c.isalnum():
            return idx + offset
    return idx


def _remove_remaster(query: str) -> str:
    remaster_start = query.find("remaster")
    if remaster_start == -1:
        return query

    end = _end_of_word(query, remaster_start + len("remaster"))

    start = max(remaster_start - 1, 0)
    prev = query[: max(remaster_start - 2, 0)]
    space = prev.rfind(" ")
    end_of_prev_word = space if space != -1 else 0

    year_start, year_end = end_of_prev_word + 1, max(remaster_start - 1, 0)
    if year_start <= year_end:
        year = query[year_start:year_end]
        if all(c.isspace() or c.isnumeric() for c in year):
            start = end_of_prev_word

    start = _rfind_non_filler(query, start)
    return query[:start] + query[end:]


def _remove_remix(query: str) -> str:
    remix_start = query.find("remix")
    if remix_start == -1:
        return query

    end = _end_of_word(query, remix_start + len("remix"))
    metadata_start = query.rfind("-")
    if metadata_start == -1 or metadata_start < SONG_MIN_LENGTH_WO_REMIX_METADATA:
        return query

    start = _rfind_non_filler(query, metadata_start)
    if start > end:
        return query
    return query[:start] + query[end:]


def improve_query(query: str) -> str:
    """Return a lowercase ``query`` without remaster and remix information.

    Such metadata makes lyric searches return wildly wrong songs.
    """
    return _remove_remix(_remove_remaster(query.lower()))