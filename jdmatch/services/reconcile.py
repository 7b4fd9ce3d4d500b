"""Locate an AI-suggested "original" passage in the live resume text and replace it.

The model is asked to echo resume bullets verbatim but routinely drifts: it
collapses PDF line breaks, changes case, or paraphrases the tail of a
sentence. The live text also drifts once earlier rewrites have been applied.
Three search tiers are tried in order and the first hit wins:

1. exact substring match;
2. whitespace/case-normalized match, mapped back onto raw offsets;
3. leading-word fragment match, widened to the end of the matched line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

MatchTier = Literal["exact", "normalized", "fragment"]

FRAGMENT_MAX_WORDS = 8
FRAGMENT_MIN_WORDS = 3


@dataclass(frozen=True)
class MatchRange:
    start: int
    end: int


@dataclass(frozen=True)
class Replacement:
    new_text: str
    # Range of the inserted text inside new_text.
    match_range: MatchRange
    # Range that was replaced inside the old text.
    replaced: MatchRange
    tier: MatchTier


@dataclass(frozen=True)
class NotFound:
    original: str


def normalize_whitespace(text: str) -> str:
    return _normalize_with_offsets(text)[0]


def _normalize_with_offsets(text: str) -> tuple[str, list[int]]:
    # offsets[i] is the raw index that produced normalized character i.
    chars: list[str] = []
    offsets: list[int] = []
    in_space = False
    for index, char in enumerate(text):
        if char.isspace():
            if chars and not in_space:
                chars.append(" ")
                offsets.append(index)
            in_space = True
            continue
        in_space = False
        for lowered in char.lower():
            chars.append(lowered)
            offsets.append(index)
    if chars and chars[-1] == " ":
        chars.pop()
        offsets.pop()
    return "".join(chars), offsets


def _fold_trailing_whitespace(text: str, end: int) -> int:
    run_end = end
    while run_end < len(text) and text[run_end].isspace():
        run_end += 1
    if run_end == end or run_end == len(text):
        return end

    # Keep exactly one separator: the last line break of the run, or its last character.
    line_break = text.rfind("\n", end, run_end)
    if line_break == -1:
        return run_end - 1
    if line_break > end and text[line_break - 1] == "\r":
        return line_break - 1
    return line_break


def _find_exact(live_text: str, original: str) -> MatchRange | None:
    position = live_text.find(original)
    if position == -1:
        return None
    return MatchRange(position, position + len(original))


def _find_normalized(live_text: str, original: str) -> MatchRange | None:
    needle = normalize_whitespace(original)
    if not needle:
        return None
    haystack, offsets = _normalize_with_offsets(live_text)
    position = haystack.find(needle)
    if position == -1:
        return None

    start = offsets[position]
    end = offsets[position + len(needle) - 1] + 1
    return MatchRange(start, _fold_trailing_whitespace(live_text, end))


def _find_fragment(live_text: str, original: str) -> MatchRange | None:
    words = original.split()
    longest = min(len(words), FRAGMENT_MAX_WORDS)
    for size in range(longest, FRAGMENT_MIN_WORDS - 1, -1):
        fragment = " ".join(words[:size])
        match = re.search(re.escape(fragment), live_text, re.IGNORECASE)
        if match is None:
            continue
        line_end = live_text.find("\n", match.start())
        if line_end == -1:
            line_end = len(live_text)
        return MatchRange(match.start(), line_end)
    return None


def locate_original(live_text: str, original: str) -> tuple[MatchRange, MatchTier] | None:
    """Return the raw range of ``original`` in ``live_text`` and the tier that found it."""
    if not original or not original.strip():
        return None
    tiers = (
        ("exact", _find_exact),
        ("normalized", _find_normalized),
        ("fragment", _find_fragment),
    )
    for tier, finder in tiers:
        found = finder(live_text, original)
        if found is not None:
            return found, tier
    return None


def locate_and_replace(live_text: str, original: str, suggested: str) -> Replacement | NotFound:
    """Replace the passage matching ``original`` with ``suggested``.

    Pure function: the caller owns the live text and decides whether to keep
    ``Replacement.new_text``. ``NotFound`` is returned, never raised, when no
    tier matches.
    """
    located = locate_original(live_text, original)
    if located is None:
        return NotFound(original=original)

    replaced, tier = located
    new_text = live_text[: replaced.start] + suggested + live_text[replaced.end :]
    return Replacement(
        new_text=new_text,
        match_range=MatchRange(replaced.start, replaced.start + len(suggested)),
        replaced=replaced,
        tier=tier,
    )
