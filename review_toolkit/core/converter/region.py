from __future__ import annotations

"""Open/close state machine for multi-line markup regions.

Code, quote and author paragraphs have no grouping element in the source
document: a run of consecutive paragraphs with the same style is the only
signal. The walker therefore decides, for every block, whether the region
left open by the previous block continues or has to be closed first.
"""

from typing import Dict, List, Optional, Tuple

from review_toolkit.core.models import RegionState
from review_toolkit.core.parser.style_analyzer import BlockKind

__all__ = [
    "CLOSE_MARKER",
    "OPEN_MARKERS",
    "REGION_KINDS",
    "transition",
    "region_line",
]

CLOSE_MARKER = "//}\n\n"

OPEN_MARKERS: Dict[RegionState, str] = {
    RegionState.CODE: "//emlist{\n",
    RegionState.QUOTE: "//quote{\n",
    RegionState.AUTHOR: "\n//author{\n",
}

REGION_KINDS: Dict[BlockKind, RegionState] = {
    BlockKind.CODE: RegionState.CODE,
    BlockKind.QUOTE: RegionState.QUOTE,
    BlockKind.AUTHOR: RegionState.AUTHOR,
}

# Lists, tables and frames are written inside whatever region is open.
_PASS_THROUGH_KINDS = {BlockKind.LIST, BlockKind.TABLE, BlockKind.IMAGE}

_LINE_ENDINGS: Dict[RegionState, str] = {
    RegionState.CODE: "\n",
    RegionState.QUOTE: "\n\n",
    RegionState.AUTHOR: "\n",
}


def transition(state: RegionState, kind: Optional[BlockKind]) -> Tuple[List[str], RegionState]:
    """Return ``(markers, new_state)`` for entering a block of *kind*.

    *kind* ``None`` stands for the end of the document. Markers must be
    written before the block's own output.
    """
    if kind in _PASS_THROUGH_KINDS:
        return [], state

    target = REGION_KINDS.get(kind) if kind is not None else None
    if target is not None and target is state:
        return [], state

    markers: List[str] = []
    if state is not RegionState.NONE:
        markers.append(CLOSE_MARKER)
    if target is None:
        return markers, RegionState.NONE

    markers.append(OPEN_MARKERS[target])
    return markers, target


def region_line(state: RegionState, text: str) -> str:
    """Return one rendered paragraph as it is written inside *state*."""
    return text + _LINE_ENDINGS[state]
