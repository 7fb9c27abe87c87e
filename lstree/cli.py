"""
Command line interface for lstree.

Parses the flags into one TreeOptions record, normalizes the root paths
and hands everything to ``print_trees``. Only argument-level problems
(an unknown sort name, an unwritable output file) change the exit status;
unreadable entries inside a tree are shown inline.
"""

import argparse
import locale
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .api import print_trees
from .config import AUTO_DEPTH, SortKind, TreeOptions
from .errors import CollectErrors

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser.

    ``-h`` selects human readable sizes, so help is only ``--help``.
    """
    p = argparse.ArgumentParser(
        prog="lstree",
        description="List the contents of directories in a tree-like format.",
        add_help=False,
    )
    p.add_argument("paths", nargs="*", default=["."], metavar="PATH")

    listing = p.add_argument_group("listing options")
    listing.add_argument("-I", "--ignore", dest="exclude_pattern", default="",
                         help="Do not list files that match the given pattern.")
    listing.add_argument("-L", "--level", dest="level", type=int, default=AUTO_DEPTH,
                         help="Descend only N level dirs. deep (0=all, -1=auto (def)).")
    listing.add_argument("-P", "--pattern", dest="include_pattern", default="",
                         help="List only those files that match the pattern given.")
    listing.add_argument("-a", "--all", action="store_true",
                         help="All files are listed.")
    listing.add_argument("-d", "--dirs-only", action="store_true",
                         help="List directories only.")
    listing.add_argument("-f", "--full-path", action="store_true",
                         help="Print the full path prefix for each file.")
    listing.add_argument("-l", "--follow", action="store_true",
                         help="Follow symbolic links like directories.")
    listing.add_argument("-o", "--output", default="",
                         help="Output to file instead of stdout.")
    listing.add_argument("--ignore-case", action="store_true",
                         help="Ignore case when pattern matching.")
    listing.add_argument("--noreport", action="store_true",
                         help="Turn off file/directory count at end of tree listing.")

    files = p.add_argument_group("file options")
    files.add_argument("-D", "--mtime", action="store_true",
                       help="Print the date of last modification change.")
    files.add_argument("-g", "--gid", action="store_true",
                       help="Displays file group owner or GID number.")
    files.add_argument("-h", "--human", action="store_true",
                       help="Print the size in a more human readable way.")
    files.add_argument("-p", "--protections", action="store_true",
                       help="Print the protections for each file.")
    files.add_argument("-u", "--uid", action="store_true",
                       help="Displays file owner or UID number.")
    files.add_argument("-s", "--bytes", action="store_true",
                       help="Print the size in bytes of each file.")
    files.add_argument("--device", action="store_true",
                       help="Print device ID number to which each file belongs.")
    files.add_argument("--inodes", action="store_true",
                       help="Print inode number of each file.")

    sorting = p.add_argument_group("sorting options")
    sorting.add_argument("-U", dest="unsorted", action="store_true",
                         help="Leave files unsorted.")
    sorting.add_argument("-c", dest="ctime", action="store_true",
                         help="Sort files by last status change time.")
    sorting.add_argument("-r", dest="reverse", action="store_true",
                         help="Reverse the order of the sort.")
    sorting.add_argument("-t", dest="mtime_sort", action="store_true",
                         help="Sort files by last modification time.")
    sorting.add_argument("-v", dest="version", action="store_true",
                         help="Sort files alphanumerically by version.")
    sorting.add_argument("--dirsfirst", action="store_true",
                         help="List directories before files (-U disables).")
    sorting.add_argument("--sort", default="",
                         help="Select sort: name,version,size,mtime,ctime.")

    graphics = p.add_argument_group("graphics options")
    graphics.add_argument("-C", "--color", action="store_true",
                          help="Turn colorization on always. (def: on for terminals)")
    graphics.add_argument("-F", "--classify", action="store_true",
                          help="Append indicator (one of */=@|) to entries.")
    graphics.add_argument("-J", "--nojoin", action="store_true",
                          help="Turn joining of single directories off.")
    graphics.add_argument("-Q", "--quote", action="store_true",
                          help="Quote filenames with double quotes.")
    graphics.add_argument("-i", "--noindent", action="store_true",
                          help="Don't print indentation lines.")
    graphics.add_argument("--numeric-uid-gid", action="store_true",
                          help="Print the user and group IDs as numbers.")

    misc = p.add_argument_group("other options")
    misc.add_argument("--verbose", action="store_true",
                      help="Log skipped entries and traversal details to stderr.")
    misc.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    misc.add_argument("--help", action="help", help="Show this help message and exit.")
    return p


def resolve_sort(args: argparse.Namespace) -> SortKind:
    """
    Pick the one active ordering from the sort flags.

    Raises:
        ValueError: If --sort names an unknown ordering
    """
    selected = SortKind.parse(args.sort) if args.sort else None
    if args.unsorted:
        return SortKind.NONE
    if args.mtime_sort or selected is SortKind.MOD_TIME:
        return SortKind.MOD_TIME
    if args.ctime or selected is SortKind.STATUS_CHANGE_TIME:
        return SortKind.STATUS_CHANGE_TIME
    if args.version or selected is SortKind.VERSION:
        return SortKind.VERSION
    if selected is not None:
        return selected
    return SortKind.NAME


def options_from_args(args: argparse.Namespace, colorize: bool) -> TreeOptions:
    """Translate parsed arguments into the immutable options record."""
    return TreeOptions(
        all=args.all,
        dirs_only=args.dirs_only,
        full_path=args.full_path,
        ignore_case=args.ignore_case,
        follow_links=args.follow,
        max_depth=args.level,
        include_pattern=args.include_pattern or None,
        exclude_pattern=args.exclude_pattern or None,
        show_bytes=args.bytes,
        show_human_size=args.human,
        show_mode=args.protections,
        show_owner=args.uid,
        show_group=args.gid,
        show_mod_time=args.mtime,
        quote_names=args.quote,
        show_inodes=args.inodes,
        show_device=args.device,
        numeric_ids=args.numeric_uid_gid,
        sort=resolve_sort(args),
        dirs_first=args.dirsfirst,
        reverse=args.reverse,
        no_indent=args.noindent,
        colorize=colorize,
        join_single_child_dirs=not args.nojoin,
        classify=args.classify,
    )


def normalize_root(path: str) -> str:
    """Make a root path absolute and resolve it when it is a symlink.

    Paths that cannot be inspected are returned unchanged so the tree
    shows the error inline.
    """
    try:
        absolute = os.path.abspath(path)
        if os.path.islink(absolute):
            return os.path.realpath(absolute)
        os.lstat(absolute)
        return absolute
    except OSError:
        return path


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def fail(message: str) -> int:
    print(f'lstree: "{message}"', file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line interface.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.debug("Locale from environment not available; using C locale")

    try:
        sort = resolve_sort(args)
    except ValueError as e:
        return fail(str(e))
    logger.debug("Sort order: %s", sort.value)

    out = sys.stdout
    colorize = args.color
    if args.output:
        try:
            out = open(args.output, "w", encoding="utf-8")
        except OSError as e:
            return fail(str(e))
    elif sys.stdout.isatty():
        colorize = True

    options = options_from_args(args, colorize)
    for problem in options.validate():
        logger.warning("Option problem: %s", problem)

    errors = CollectErrors(verbose=args.verbose)
    try:
        print_trees([normalize_root(p) for p in args.paths], options, out=out,
                    report=not args.noreport, on_error=errors)
    finally:
        if out is not sys.stdout:
            out.close()
    if errors.errors:
        logger.info("%d entries could not be read", len(errors.errors))
    return 0


if __name__ == "__main__":
    sys.exit(main())
