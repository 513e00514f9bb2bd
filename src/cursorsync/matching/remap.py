"""Map offsets in inline-stripped text back onto the original line.

The stripper in :func:`cursorsync.markdown.syntax.strip_inline_formatting` is
replayed here rule by rule, carrying for every surviving character the index
it came from in the original line. Only markers a rule actually removed are
skipped, so a lone ``*``, ``_`` or ``$`` the stripper keeps maps to itself.
Callers only go through :func:`map_stripped_to_original`.
"""

from __future__ import annotations

from typing import List, Tuple

from cursorsync.markdown.syntax import INLINE_RULES


def _strip_with_origins(original: str) -> Tuple[str, List[int]]:
    text = original
    origins = list(range(len(original)))

    for pattern, keeps_label in INLINE_RULES:
        pieces: List[str] = []
        kept: List[int] = []
        last = 0
        for match in pattern.finditer(text):
            pieces.append(text[last : match.start()])
            kept.extend(origins[last : match.start()])
            if keeps_label:
                start, end = match.span(1)
                pieces.append(text[start:end])
                kept.extend(origins[start:end])
            last = match.end()
        pieces.append(text[last:])
        kept.extend(origins[last:])
        text = "".join(pieces)
        origins = kept

    return text, origins


def map_stripped_to_original(original: str, stripped: str, stripped_pos: int) -> int:
    """Return the offset in ``original`` matching ``stripped_pos`` in ``stripped``.

    ``stripped`` is expected to be ``strip_inline_formatting(original)``. An
    offset at or past its end maps to the end of ``original``. When
    ``stripped`` came from somewhere else the offset is only clamped.
    """
    if stripped_pos >= len(stripped):
        return len(original)
    stripped_pos = max(0, stripped_pos)
    if stripped == original:
        return stripped_pos

    rendered, origins = _strip_with_origins(original)
    if rendered != stripped:
        return min(stripped_pos, len(original))
    return origins[stripped_pos]
