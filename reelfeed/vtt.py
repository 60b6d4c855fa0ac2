"""
WebVTT cue parsing and lookup.

Only the subset needed to show one line of text at a time:

    WEBVTT

    NOTE anything before the first timing line is skipped

    intro
    00:01.000 --> 00:03.500 align:start
    Hello

Timestamps are ``[HH:]MM:SS.mmm``. Anything unparseable becomes 0.
"""

from __future__ import annotations

import math
from typing import Iterable

from .models import VttCue

TIMING_ARROW = "-->"


def _to_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        return math.nan
    return value


def parse_timestamp(ts: str) -> float:
    parts = ts.strip().split(":")
    if len(parts) < 2:
        return 0.0

    seconds_part, _, millis_part = parts[-1].partition(".")
    seconds = _to_float(seconds_part)
    millis = _to_float((millis_part or "0").ljust(3, "0")[:3])
    minutes = _to_float(parts[-2])
    hours = _to_float(parts[0]) if len(parts) == 3 else 0.0

    total = hours * 3600 + minutes * 60 + seconds + millis / 1000.0
    return total if math.isfinite(total) else 0.0


def _timing_value(raw: str) -> float:
    fields = raw.strip().split(" ")
    return parse_timestamp(fields[0] if fields else "")


def parse_vtt(text: str) -> list[VttCue]:
    lines = text.replace("\r", "").split("\n")
    cues: list[VttCue] = []
    total = len(lines)

    i = 0
    # Header, NOTE blocks, X-TIMESTAMP-MAP and friends.
    while i < total:
        line = lines[i].strip()
        if line and TIMING_ARROW in line:
            break
        i += 1

    while i < total:
        # optional cue identifier
        if (
            lines[i]
            and TIMING_ARROW not in lines[i]
            and i + 1 < total
            and TIMING_ARROW in lines[i + 1]
        ):
            i += 1

        timing = lines[i]
        if not timing or TIMING_ARROW not in timing:
            i += 1
            continue

        start_raw, _, end_raw = timing.partition(TIMING_ARROW)
        start = _timing_value(start_raw)
        end = _timing_value(end_raw)

        i += 1
        text_lines = []
        while i < total and lines[i].strip() != "":
            text_lines.append(lines[i])
            i += 1

        cue_text = "\n".join(text_lines).strip()
        if cue_text:
            cues.append(VttCue(start=start, end=end, text=cue_text))

        while i < total and lines[i].strip() == "":
            i += 1

    return cues


def find_active_cue(cues: Iterable[VttCue], time_seconds: float) -> str:
    for cue in cues:
        if cue.start <= time_seconds <= cue.end:
            return cue.text
    return ""


__all__ = ["parse_vtt", "parse_timestamp", "find_active_cue"]
