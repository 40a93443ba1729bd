#!/usr/bin/env python3
"""
Text Replace - Command-line tool for replacing one occurrence of a string in a file.

The old string is located with tolerant matching, so text copied with the
wrong indentation, stray trailing whitespace or small transcription errors
can still be found, as long as it identifies exactly one place in the file.

Usage:
    python -m tools.replace --file <source_file> (--old TEXT | --old-file PATH) (--new TEXT | --new-file PATH) [options]

Options:
    --file PATH       File to edit (required; created if missing and the old string is empty)
    --old TEXT        Text to replace
    --old-file PATH   Read the text to replace from a file
    --new TEXT        Replacement text
    --new-file PATH   Read the replacement text from a file
    --apply           Actually write the change (default is dry-run)
    --backup          Create backup before applying (file.bak)
    --threshold N     Minimum similarity score for last-resort matching (default: from config, 0.6)
    --config PATH     YAML configuration file
    --show-patch      Print the change as a unified diff
    --verbose         Show detailed output
    --help            Show this help message
"""

import argparse
import dataclasses
import logging
from pathlib import Path
import sys
import traceback
from typing import List

from text_edit import EditError, FilesystemTextEditApplier, PatchResult, TextEditConfig, format_patch


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'

    @classmethod
    def disable(cls):
        """Disable colors (for non-terminal output)."""
        cls.RESET = ''
        cls.BOLD = ''
        cls.RED = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.BLUE = ''
        cls.CYAN = ''


class TextReplacer:
    """
    Main replacer application.

    Coordinates:
    - Loading configuration
    - Reading the old and new strings
    - Locating and replacing the old string
    - Reporting and writing results
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize replacer with command-line arguments.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self.source_file = Path(args.file)
        self.verbose = args.verbose

        # Disable colors if not in terminal or if explicitly disabled
        if not sys.stdout.isatty() or args.no_color:
            Colors.disable()

    def run(self) -> int:
        """
        Run the replacer.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            config = self._load_config()
            if config is None:
                return 1

            old_string = self._read_text(self.args.old, self.args.old_file, "old")
            if old_string is None:
                return 1

            new_string = self._read_text(self.args.new, self.args.new_file, "new")
            if new_string is None:
                return 1

            applier = FilesystemTextEditApplier(config)

            try:
                result = applier.apply_edit_to_file(self.source_file, old_string, new_string)

            except EditError as e:
                self._print_edit_error(e)
                return 1

            self._show_result(result)

            if self.args.apply:
                return self._apply_result(applier, result)

            self._show_dry_run_message()
            return 0

        except KeyboardInterrupt:
            self._print_error("\nInterrupted by user")
            return 130

        except Exception as e:
            self._print_error(f"Unexpected error: {e}")
            if self.verbose:
                traceback.print_exc()

            return 1

    def _load_config(self) -> TextEditConfig | None:
        """Load configuration, applying command-line overrides."""
        try:
            config = TextEditConfig()
            if self.args.config:
                config = TextEditConfig.load_from_file(self.args.config)
                self._print_verbose(f"Loaded configuration from {self.args.config}")

            if self.args.threshold is not None:
                config = dataclasses.replace(config, similarity_threshold=self.args.threshold)

            return config

        except (OSError, ValueError) as e:
            self._print_error(f"Invalid configuration: {e}")
            return None

    def _read_text(self, text: str | None, text_file: str | None, name: str) -> str | None:
        """Get an old or new string, either given directly or read from a file."""
        if text is not None:
            return text

        try:
            with open(text_file, 'r', encoding='utf-8', newline='') as f:
                content = f.read()

            self._print_verbose(f"Read {name} string ({len(content)} characters) from {text_file}")
            return content

        except OSError as e:
            self._print_error(f"Failed to read {name} string file: {e}")
            return None

    def _show_result(self, result: PatchResult) -> None:
        """Display information about the located match."""
        print(f"\n{Colors.BOLD}Replacement Information:{Colors.RESET}")
        print(f"  File:       {Colors.CYAN}{self.source_file}{Colors.RESET}")

        if result.match_kind is None:
            print(f"  Match:      {Colors.CYAN}new file{Colors.RESET}")

        else:
            print(f"  Match:      {Colors.CYAN}{result.match_kind.value}{Colors.RESET}")
            print(f"  Confidence: {Colors.CYAN}{result.confidence:.2f}{Colors.RESET}")

        print(f"  Edits:      {Colors.CYAN}{len(result.edits)}{Colors.RESET}")

        if self.verbose:
            print(f"\n{Colors.BOLD}Edit Details:{Colors.RESET}")
            for i, edit in enumerate(result.edits, 1):
                print(
                    f"  Edit {i}: {edit.start_line + 1}:{edit.start_column + 1}"
                    f" to {edit.end_line + 1}:{edit.end_column + 1}"
                )
                print(f"    New text: {edit.new_text!r}")

        if self.args.show_patch:
            print(f"\n{Colors.BOLD}Patch:{Colors.RESET}")
            for line in format_patch(result.patch, str(self.source_file)).splitlines():
                print(self._color_patch_line(line))

    def _color_patch_line(self, line: str) -> str:
        """Color a single line of unified diff output."""
        if line.startswith(('---', '+++')):
            return f"{Colors.BOLD}{line}{Colors.RESET}"

        if line.startswith('@@'):
            return f"{Colors.CYAN}{line}{Colors.RESET}"

        if line.startswith('-'):
            return f"{Colors.RED}{line}{Colors.RESET}"

        if line.startswith('+'):
            return f"{Colors.GREEN}{line}{Colors.RESET}"

        return line

    def _apply_result(self, applier: FilesystemTextEditApplier, result: PatchResult) -> int:
        """Write the updated content to the source file."""
        print(f"\n{Colors.BOLD}Applying replacement...{Colors.RESET}")

        try:
            backup_file = applier.write_file(self.source_file, result.updated_file, self.args.backup)

        except EditError as e:
            self._print_error(str(e))
            return 1

        print(f"{Colors.GREEN}✓ Replacement applied successfully{Colors.RESET}")
        print(f"  Modified: {Colors.CYAN}{self.source_file}{Colors.RESET}")

        if backup_file is not None:
            print(f"  Backup:   {Colors.CYAN}{backup_file}{Colors.RESET}")

        return 0

    def _show_dry_run_message(self) -> None:
        """Show message about dry-run mode."""
        print(f"\n{Colors.YELLOW}Dry-run mode: No changes were made{Colors.RESET}")
        print(f"  Use {Colors.BOLD}--apply{Colors.RESET} to actually write the change")
        print(f"  Use {Colors.BOLD}--backup{Colors.RESET} to create a backup before applying")

    def _print_edit_error(self, error: EditError) -> None:
        """Print an edit failure with its details."""
        self._print_error(f"{error} [{error.kind_for_telemetry}]")

        if self.verbose and error.error_details:
            for key, value in error.error_details.items():
                print(f"  {key}: {value}", file=sys.stderr)

    def _print_error(self, message: str) -> None:
        """Print error message."""
        print(f"{Colors.RED}Error:{Colors.RESET} {message}", file=sys.stderr)

    def _print_verbose(self, message: str) -> None:
        """Print verbose message."""
        if self.verbose:
            print(f"{Colors.BLUE}[verbose]{Colors.RESET} {message}")


def parse_arguments(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replace one occurrence of a string in a file, with tolerant matching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dry run (default) - show what would happen
  python -m tools.replace --file src/example.py --old 'x = 1' --new 'x = 2'

  # Apply the change and show it as a diff
  python -m tools.replace --file src/example.py --old-file old.txt --new-file new.txt --apply --show-patch

  # Apply with backup
  python -m tools.replace --file src/example.py --old 'x = 1' --new 'x = 2' --apply --backup

  # Require closer similarity for last-resort matching
  python -m tools.replace --file src/example.py --old-file old.txt --new-file new.txt --threshold 0.8
        """
    )

    parser.add_argument(
        '--file',
        required=True,
        help='File to edit'
    )

    old_group = parser.add_mutually_exclusive_group(required=True)
    old_group.add_argument(
        '--old',
        help='Text to replace'
    )
    old_group.add_argument(
        '--old-file',
        help='File containing the text to replace'
    )

    new_group = parser.add_mutually_exclusive_group(required=True)
    new_group.add_argument(
        '--new',
        help='Replacement text'
    )
    new_group.add_argument(
        '--new-file',
        help='File containing the replacement text'
    )

    parser.add_argument(
        '--apply',
        action='store_true',
        help='Actually write the change (default is dry-run)'
    )

    parser.add_argument(
        '--backup',
        action='store_true',
        help='Create backup before applying (file.bak)'
    )

    parser.add_argument(
        '--threshold',
        type=float,
        default=None,
        help='Minimum similarity score for last-resort matching (default: 0.6)'
    )

    parser.add_argument(
        '--config',
        default=None,
        help='YAML configuration file'
    )

    parser.add_argument(
        '--show-patch',
        action='store_true',
        help='Print the change as a unified diff'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed output'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    replacer = TextReplacer(args)
    return replacer.run()


if __name__ == "__main__":
    sys.exit(main())
