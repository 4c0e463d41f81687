"""
Lineage derivation for the family tree.

Resolves ancestor paths and branch founders, renders patronymic full names,
and assigns branch colors.
"""

from .resolver import (
    LineageInfo,
    BranchStats,
    walk_ancestors,
    get_lineage_path,
    get_full_lineage,
    get_gen2_ancestor,
    get_gen3_ancestor,
    get_all_gen2_branches,
    get_all_gen3_sub_branches,
    get_members_by_gen2_branch,
    get_members_by_gen3_sub_branch,
    calculate_lineage_info,
    populate_lineage_info,
    get_lineage_branch_stats,
    format_lineage_display,
)
from .full_name import generate_full_name, generate_full_name_en
from .branch_colors import (
    BRANCH_CLASSES,
    BRANCH_HEX_COLORS,
    LINEAGE_PALETTES,
    UNKNOWN_BRANCH_CLASS,
    UNKNOWN_BRANCH_HEX,
    ColorPalette,
    ROOT_COLOR,
    get_branch_index,
    get_lineage_branch_color,
    get_lineage_branch_hex_color,
    get_branch_palette,
)

__all__ = [
    'LineageInfo',
    'BranchStats',
    'walk_ancestors',
    'get_lineage_path',
    'get_full_lineage',
    'get_gen2_ancestor',
    'get_gen3_ancestor',
    'get_all_gen2_branches',
    'get_all_gen3_sub_branches',
    'get_members_by_gen2_branch',
    'get_members_by_gen3_sub_branch',
    'calculate_lineage_info',
    'populate_lineage_info',
    'get_lineage_branch_stats',
    'format_lineage_display',
    'generate_full_name',
    'generate_full_name_en',
    'BRANCH_CLASSES',
    'BRANCH_HEX_COLORS',
    'LINEAGE_PALETTES',
    'UNKNOWN_BRANCH_CLASS',
    'UNKNOWN_BRANCH_HEX',
    'ColorPalette',
    'ROOT_COLOR',
    'get_branch_index',
    'get_lineage_branch_color',
    'get_lineage_branch_hex_color',
    'get_branch_palette',
]
