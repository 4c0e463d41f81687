"""Command-line interface for nasabmatch."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..core.member import FamilyMember, load_members
from ..errors import NasabMatchError
from ..lineage import (
    calculate_lineage_info,
    format_lineage_display,
    get_full_lineage,
    get_lineage_branch_stats,
    generate_full_name,
)
from ..matching import MatchConfig, MatchResult, NameInput, find_matches, get_match_explanation


def print_match_result(result: MatchResult, show_details: bool = False) -> None:
    """Print a match result as a ranked table.

    Args:
        result: Result returned by find_matches
        show_details: Also print the per-level explanation of each candidate
    """
    print("\n" + "=" * 60)
    print("PLACEMENT CANDIDATES")
    print("=" * 60)
    print(f"Candidates:             {result.match_count}")
    print(f"Suggested action:       {result.suggested_action.value}")
    print(f"Message:                {result.message}")
    print(f"                        {result.message_ar}")

    for i, candidate in enumerate(result.all_matches, 1):
        print("-" * 60)
        print(f"{i}. {candidate.father.first_name} [{candidate.father_id}]")
        print(f"   Score:      {candidate.match_score:g} ({candidate.match_level.value}, "
              f"{candidate.confidence.value} confidence)")
        print(f"   Generation: {candidate.generation}")
        print(f"   Branch:     {candidate.branch or '-'}")
        print(f"   Full name:  {candidate.full_name_preview}")
        print(f"               {candidate.full_name_preview_en}")

        if show_details:
            explanation = get_match_explanation(candidate)
            for line in explanation.details:
                print(f"   * {line}")

    print("=" * 60 + "\n")


def _read_members(path: str) -> Optional[List[FamilyMember]]:
    if not Path(path).exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return None
    return load_members(path)


def match_command(args: argparse.Namespace) -> int:
    """Execute the match command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        members = _read_members(args.members)
        if members is None:
            return 1

        config = MatchConfig(
            minimum_total_score=args.min_score,
            minimum_father_score=args.min_father_score,
            include_low_confidence=not args.exclude_low,
        )
        name_input = NameInput(
            first_name=args.first_name,
            father_name=args.father,
            grandfather_name=args.grandfather,
            great_grandfather_name=args.great_grandfather,
            gender=args.gender,
        )

        result = find_matches(name_input, members, config)

        if args.json:
            print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        else:
            print_match_result(result, show_details=args.details)

        return 0

    except (NasabMatchError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def lineage_command(args: argparse.Namespace) -> int:
    """Execute the lineage command."""
    try:
        members = _read_members(args.members)
        if members is None:
            return 1

        lineage = get_full_lineage(args.member_id, members)
        if not lineage:
            print(f"Error: Member not found: {args.member_id}", file=sys.stderr)
            return 1

        member = lineage[-1]
        info = calculate_lineage_info(member.id, members)

        print(f"\nMember:     {member}")
        print(f"Branch:     {format_lineage_display(member, info)}")
        print(f"Path:       {' > '.join(info.lineage_path) or '(root)'}")
        print(f"Full name:  {generate_full_name(member.first_name, member.gender, lineage[:-1], member.family_name)}\n")
        return 0

    except (NasabMatchError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def branches_command(args: argparse.Namespace) -> int:
    """Execute the branches command."""
    try:
        members = _read_members(args.members)
        if members is None:
            return 1

        stats = get_lineage_branch_stats(members)

        print("\n" + "=" * 60)
        print("BRANCH STATISTICS")
        print("=" * 60)
        print(f"Total Members:          {len(members):,}")
        print(f"Branches:               {len(stats):,}")
        print()
        for branch_id, entry in stats.items():
            print(f"{entry.name} [{branch_id}]: {entry.count:,} members, {entry.living_count:,} living")
        print("=" * 60 + "\n")
        return 0

    except (NasabMatchError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='nasabmatch',
        description='Place a new person in a patronymic family tree from partial ancestor names.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    # Match command
    match_parser = subparsers.add_parser(
        'match',
        help='Find candidate fathers for a new person'
    )
    match_parser.add_argument('members', help='Path to the members JSON snapshot')
    match_parser.add_argument('--first-name', required=True, help="New person's first name")
    match_parser.add_argument('--father', required=True, help="Father's first name")
    match_parser.add_argument('--grandfather', help="Grandfather's first name")
    match_parser.add_argument('--great-grandfather', help="Great-grandfather's first name")
    match_parser.add_argument(
        '--gender',
        choices=['Male', 'Female'],
        default='Male',
        help='Gender of the new person (default: Male)'
    )
    match_parser.add_argument(
        '--min-score',
        type=float,
        default=40,
        help='Minimum total score to keep a candidate (default: 40)'
    )
    match_parser.add_argument(
        '--min-father-score',
        type=float,
        default=70,
        help='Minimum father-name similarity (default: 70)'
    )
    match_parser.add_argument(
        '--exclude-low',
        action='store_true',
        help='Drop low-confidence candidates'
    )
    match_parser.add_argument(
        '-d', '--details',
        action='store_true',
        help='Explain each candidate'
    )
    match_parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )

    # Lineage command
    lineage_parser = subparsers.add_parser(
        'lineage',
        help='Show the lineage and branch of a member'
    )
    lineage_parser.add_argument('members', help='Path to the members JSON snapshot')
    lineage_parser.add_argument('member_id', help='Member identifier')

    # Branches command
    branches_parser = subparsers.add_parser(
        'branches',
        help='Show member counts per main branch'
    )
    branches_parser.add_argument('members', help='Path to the members JSON snapshot')

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # If no command specified, print help
    if not args.command:
        parser.print_help()
        return 0

    if args.command == 'match':
        return match_command(args)
    elif args.command == 'lineage':
        return lineage_command(args)
    elif args.command == 'branches':
        return branches_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
