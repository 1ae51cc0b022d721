"""
Command-line interface for repodata retention.

Prunes old metadata from a repository, migrates retained metadata from an
old repodata/ directory into a new one, and previews the files a
retention strategy would exclude.

Usage:
    python -m repodata_retention --help
    python -m repodata_retention prune /srv/repo --retain 2
    python -m repodata_retention migrate old/repodata new/repodata --retain 0
    python -m repodata_retention blacklist /srv/repo/repodata --retain 1
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import RetentionError
from .formatters import EmojiFormatter
from .migrator import RepoMigrator
from .models import RetentionConfig, RetentionStrategy
from .pruner import RepoPruner
from .selector import build_blacklist


def load_config_file(config_path: str) -> RetentionConfig:
    """
    Load retention configuration from a JSON or YAML file.

    Args:
        config_path: Path to configuration file (.json, .yaml or .yml)

    Returns:
        RetentionConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix in ('.yaml', '.yml'):
                config_data = yaml.safe_load(f) or {}
            else:
                config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")

    if not isinstance(config_data, dict):
        raise ValueError("Invalid configuration format: expected a mapping")

    try:
        config = RetentionConfig(**config_data)
    except TypeError as e:
        raise ValueError(f"Invalid configuration format: {e}")

    expected_types = {
        'retain_old': int,
        'repodata_dirname': str,
        'manifest_filename': str,
        'migration_strategy': str,
        'dry_run': bool,
    }
    for name, expected in expected_types.items():
        value = getattr(config, name)
        # bool is an int subclass; "retain_old: true" is not a count
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"Invalid configuration format: {name} must be {expected.__name__}, "
                f"got {type(value).__name__} ({value!r})"
            )

    try:
        RetentionStrategy(config.migration_strategy)
    except ValueError:
        raise ValueError(
            f"Invalid migration_strategy: {config.migration_strategy!r} "
            f"(expected one of: {', '.join(s.value for s in RetentionStrategy)})"
        )

    return config


def create_default_config(output_path: str) -> None:
    """
    Create a default configuration file.

    Args:
        output_path: Path where config file should be created
    """
    config_dict = dataclasses.asdict(RetentionConfig())

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config_dict, f, indent=2)

    EmojiFormatter.safe_print("success", f"Default configuration created: {output_path}")


def _resolve_config(args: argparse.Namespace) -> RetentionConfig:
    """Load the configuration file, if any, and apply command-line overrides."""
    config = load_config_file(args.config) if args.config else RetentionConfig()

    if args.retain is not None:
        config.retain_old = args.retain
    if args.dry_run:
        config.dry_run = True
    if getattr(args, 'strategy', None):
        config.migration_strategy = args.strategy

    return config


def prune_command(args: argparse.Namespace) -> int:
    """
    Execute prune command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        EmojiFormatter.safe_print("error", f"Configuration error: {e}")
        return 1

    mode = " (dry run)" if config.dry_run else ""
    EmojiFormatter.safe_print(
        "delete",
        f"Pruning old metadata in {args.repo_root} (retain {config.retain_old}){mode}",
    )

    try:
        RepoPruner(config).prune(args.repo_root)
    except RetentionError as e:
        EmojiFormatter.safe_print("error", f"Prune failed: {e}")
        return 1

    EmojiFormatter.safe_print("success", "Prune complete")
    return 0


def migrate_command(args: argparse.Namespace) -> int:
    """
    Execute migrate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        EmojiFormatter.safe_print("error", f"Configuration error: {e}")
        return 1

    mode = " (dry run)" if config.dry_run else ""
    EmojiFormatter.safe_print(
        "copy",
        f"Migrating old metadata {args.old_repo} -> {args.new_repo} "
        f"(retain {config.retain_old}, {config.migration_strategy} strategy){mode}",
    )

    try:
        RepoMigrator(config).migrate(args.old_repo, args.new_repo)
    except RetentionError as e:
        EmojiFormatter.safe_print("error", f"Migration failed: {e}")
        return 1

    EmojiFormatter.safe_print("success", "Migration complete")
    return 0


def blacklist_command(args: argparse.Namespace) -> int:
    """
    Print the files a retention strategy would exclude.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        EmojiFormatter.safe_print("error", f"Configuration error: {e}")
        return 1

    EmojiFormatter.safe_print("search", f"Selecting old metadata in {args.directory}...")

    try:
        blacklist = build_blacklist(
            args.directory,
            config.retain_old,
            strategy=config.strategy,
            manifest_filename=config.manifest_filename,
        )
    except RetentionError as e:
        EmojiFormatter.safe_print("error", f"Selection failed: {e}")
        return 1

    for filename in sorted(blacklist):
        print(filename)

    EmojiFormatter.safe_print("info", f"{len(blacklist)} file(s) selected")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser, with_strategy: bool) -> None:
    parser.add_argument(
        '--retain',
        type=int,
        help='Old metadata files to keep per family (-1 = keep all)'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Log decisions without removing or copying anything'
    )
    if with_strategy:
        parser.add_argument(
            '--strategy',
            choices=[s.value for s in RetentionStrategy],
            help='How old metadata is discovered (default: classic)'
        )


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser for the retention CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='repodata-retention',
        description="Retention and migration of old repository metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Remove all but the 2 newest files of each family, plus repomd.xml
  python -m repodata_retention prune /srv/repo --retain 2

  # Carry old metadata into a freshly generated repodata/
  python -m repodata_retention migrate /srv/repo/repodata /srv/repo/.repodata

  # Preview what the manifest strategy would exclude
  python -m repodata_retention blacklist /srv/repo/repodata --retain 0 --strategy manifest

  # Create default config
  python -m repodata_retention create-config retention.json
        """
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log every per-file decision'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    prune_parser = subparsers.add_parser(
        'prune',
        help='Delete old metadata from a repository'
    )
    prune_parser.add_argument('repo_root', help='Repository root containing repodata/')
    _add_common_arguments(prune_parser, with_strategy=False)

    migrate_parser = subparsers.add_parser(
        'migrate',
        help='Copy retained old metadata into a new repodata directory'
    )
    migrate_parser.add_argument('old_repo', help='Old metadata directory')
    migrate_parser.add_argument('new_repo', help='New metadata directory')
    _add_common_arguments(migrate_parser, with_strategy=True)

    blacklist_parser = subparsers.add_parser(
        'blacklist',
        help='List files a retention strategy would exclude'
    )
    blacklist_parser.add_argument('directory', help='Metadata directory')
    _add_common_arguments(blacklist_parser, with_strategy=True)

    config_parser = subparsers.add_parser(
        'create-config',
        help='Create default configuration file'
    )
    config_parser.add_argument(
        'output',
        type=str,
        help='Output path for configuration file'
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the retention CLI.

    Args:
        argv: Command-line arguments (None = sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return 0

    if args.command == 'prune':
        return prune_command(args)
    elif args.command == 'migrate':
        return migrate_command(args)
    elif args.command == 'blacklist':
        return blacklist_command(args)
    elif args.command == 'create-config':
        create_default_config(args.output)
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
