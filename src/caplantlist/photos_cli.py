#!/usr/bin/env python3
"""
iNaturalist photo maintenance.

Usage:
    cpl-photos checkmissing                  # Taxa without exactly 5 photos
    cpl-photos checkmissing --minphotos 3    # Taxa with fewer than 3 photos
    cpl-photos addmissing                    # Fetch photos for taxa with fewer than 5
    cpl-photos prune                         # List photo rows for unknown taxa
    cpl-photos prune --update                # ...and remove them
"""

from __future__ import annotations

import argparse
import importlib.util
from pathlib import Path

from caplantlist.config import DEFAULT_PHOTO_FILE
from caplantlist.errorlog import ErrorLog
from caplantlist.inat import INatPhotoProvider
from caplantlist.photos import PhotoCurator, PhotoProvider
from caplantlist.taxa import Taxa


def load_custom_loader(path: str | Path):
    """Import the TaxaLoader class from a Python file."""
    path = Path(path).resolve()
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load taxa loader from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.TaxaLoader


def get_taxa(args: argparse.Namespace) -> Taxa:
    """Load the taxon list, logging data problems to errors.tsv."""
    error_log = ErrorLog(Path(args.outputdir) / "errors.tsv", echo=True)

    if args.loader:
        loader_class = load_custom_loader(args.loader)
        taxa = loader_class.load_taxa(args, error_log)
    else:
        taxa = Taxa(
            args.datadir,
            error_log,
            args.show_flower_errors,
            photo_file=args.photofile,
        )

    error_log.write()
    return taxa


def get_curator(args: argparse.Namespace) -> PhotoCurator:
    taxa = get_taxa(args)
    error_log = ErrorLog(Path(args.outputdir) / "log.tsv", echo=True)
    return PhotoCurator(taxa, args.photofile, error_log)


def checkmissing(args: argparse.Namespace) -> None:
    curator = get_curator(args)
    missing = curator.check_missing(args.minphotos)
    curator.error_log.write()
    print(f"{len(missing):,} taxa missing photos")


def addmissing(args: argparse.Namespace, provider: PhotoProvider | None = None) -> None:
    curator = get_curator(args)
    if provider is None:
        provider = INatPhotoProvider()
    added = curator.add_missing_photos(provider)
    curator.error_log.write()
    print(f"Added {sum(len(p) for p in added.values()):,} photos to {len(added):,} taxa")


def prune(args: argparse.Namespace) -> None:
    curator = get_curator(args)
    invalid_names = curator.prune(args.update)
    curator.error_log.write()
    action = "Removed" if args.update else "Found"
    print(f"{action} {len(invalid_names):,} taxa not in taxa list")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maintain iNaturalist photos for the plant list")
    parser.add_argument("-d", "--datadir", default="./data",
                        help="Directory containing taxa.csv (default: ./data)")
    parser.add_argument("-o", "--outputdir", default="./output",
                        help="Directory for log files (default: ./output)")
    parser.add_argument("--photofile", default=str(DEFAULT_PHOTO_FILE),
                        help=f"Photo table to read and update (default: {DEFAULT_PHOTO_FILE})")
    parser.add_argument("--loader",
                        help="Python file containing a TaxaLoader class to use instead of the default loader")
    parser.add_argument("--show-flower-errors", action="store_true",
                        help="Log flowering taxa that have no flower color")

    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser(
        "checkmissing", help="List taxa with less than the maximum number of photos")
    check_parser.add_argument("--minphotos", type=int, default=None,
                              help="Minimum number of photos. Taxa with fewer than this number will be listed.")
    check_parser.set_defaults(func=checkmissing)

    add_parser = subparsers.add_parser(
        "addmissing", help="Add photos to taxa with fewer than the maximum")
    add_parser.set_defaults(func=addmissing)

    prune_parser = subparsers.add_parser(
        "prune", help="Remove photos without valid taxon names")
    prune_parser.add_argument("--update", action="store_true",
                              help="Update the file if possible.")
    prune_parser.set_defaults(func=prune)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
