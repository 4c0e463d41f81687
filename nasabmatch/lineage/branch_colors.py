"""Deterministic branch colors for tree visualization.

A main-branch founder's position in the ordered founder list selects the
color; the palette wraps when there are more founders than colors.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..core.member import FamilyMember

UNKNOWN_BRANCH_CLASS = 'bg-gray-500'
UNKNOWN_BRANCH_HEX = '#6b7280'

BRANCH_CLASSES = (
    'bg-red-500',
    'bg-blue-500',
    'bg-green-500',
    'bg-yellow-500',
    'bg-purple-500',
    'bg-pink-500',
    'bg-indigo-500',
    'bg-teal-500',
    'bg-orange-500',
    'bg-cyan-500',
    'bg-lime-500',
    'bg-amber-500',
    'bg-emerald-500',
    'bg-violet-500',
    'bg-rose-500',
    'bg-fuchsia-500',
)

BRANCH_HEX_COLORS = (
    '#ef4444',  # red
    '#3b82f6',  # blue
    '#22c55e',  # green
    '#eab308',  # yellow
    '#a855f7',  # purple
    '#ec4899',  # pink
    '#6366f1',  # indigo
    '#14b8a6',  # teal
    '#f97316',  # orange
    '#06b6d4',  # cyan
    '#84cc16',  # lime
    '#f59e0b',  # amber
    '#10b981',  # emerald
    '#8b5cf6',  # violet
    '#f43f5e',  # rose
    '#d946ef',  # fuchsia
)


@dataclass(frozen=True, slots=True)
class ColorPalette:
    primary: str
    secondary: str
    gradient: Tuple[str, str]


LINEAGE_PALETTES = (
    ColorPalette('#ef4444', '#fecaca', ('#f87171', '#ef4444')),  # red
    ColorPalette('#3b82f6', '#bfdbfe', ('#60a5fa', '#3b82f6')),  # blue
    ColorPalette('#22c55e', '#bbf7d0', ('#4ade80', '#22c55e')),  # green
    ColorPalette('#f59e0b', '#fef3c7', ('#fbbf24', '#f59e0b')),  # amber
    ColorPalette('#a855f7', '#e9d5ff', ('#c084fc', '#a855f7')),  # purple
    ColorPalette('#ec4899', '#fbcfe8', ('#f472b6', '#ec4899')),  # pink
    ColorPalette('#6366f1', '#c7d2fe', ('#818cf8', '#6366f1')),  # indigo
    ColorPalette('#14b8a6', '#99f6e4', ('#2dd4bf', '#14b8a6')),  # teal
    ColorPalette('#f97316', '#fed7aa', ('#fb923c', '#f97316')),  # orange
    ColorPalette('#06b6d4', '#a5f3fc', ('#22d3ee', '#06b6d4')),  # cyan
)

# Generation 1 (the founder) sits outside every branch
ROOT_COLOR = ColorPalette('#78716c', '#d6d3d1', ('#a8a29e', '#78716c'))


def get_branch_index(branch_id: Optional[str], gen2_branches: Sequence[FamilyMember]) -> Optional[int]:
    """Position of a founder in the founder list, or None if absent."""
    if not branch_id:
        return None
    for index, branch in enumerate(gen2_branches):
        if branch.id == branch_id:
            return index
    return None


def get_lineage_branch_color(branch_id: Optional[str], gen2_branches: Sequence[FamilyMember]) -> str:
    """CSS utility class for a branch."""
    index = get_branch_index(branch_id, gen2_branches)
    if index is None:
        return UNKNOWN_BRANCH_CLASS
    return BRANCH_CLASSES[index % len(BRANCH_CLASSES)]


def get_lineage_branch_hex_color(branch_id: Optional[str], gen2_branches: Sequence[FamilyMember]) -> str:
    """Hex color for a branch."""
    index = get_branch_index(branch_id, gen2_branches)
    if index is None:
        return UNKNOWN_BRANCH_HEX
    return BRANCH_HEX_COLORS[index % len(BRANCH_HEX_COLORS)]


def get_branch_palette(index: int) -> ColorPalette:
    """Full primary/secondary/gradient palette for a branch index."""
    return LINEAGE_PALETTES[index % len(LINEAGE_PALETTES)]
