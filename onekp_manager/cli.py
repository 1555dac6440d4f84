#!/usr/bin/env python3
"""
Command-line interface for the OneKP Manager.

Usage:
    onekp metadata [--filter-key KEY --filter-values V1,V2]
    onekp show -k clade
    onekp fetch --filter-key clade --filter-values Mosses -s protein -r DIR

    python -m onekp_manager.cli show -k order
    onekp --metadata local_table.tsv metadata --filter-key id --filter-values WOGB
"""

import argparse
import logging
import sys
from pathlib import Path

from .cache import fetch_cached_text
from .config import ASSEMBLY_INDEX_URL, CATALOG_COLUMNS, DEFAULT_CACHE_DIR, DEFAULT_TIMEOUT
from .errors import FetchError, InvalidKeyError, OneKpError, ParseError
from .fetcher import Fetcher, fetch_all, summarize
from .filters import FILTER_KEYS, distinct_values, filter_records, resolve_key
from .records import Catalog, load_catalog
from .urls import SequenceType, build_urls, parse_directory_index, resolve_directory

logger = logging.getLogger(__name__)


def split_values(text: str) -> list:
    """Parse a comma-separated value list."""
    return [v.strip() for v in text.split(',') if v.strip()]


def _load(args):
    return load_catalog(
        args.metadata,
        pad_short_rows=args.pad_short_rows,
        refresh=args.refresh,
        cache_dir=args.cache_dir,
    )


def cmd_metadata(args):
    """Print catalog rows as TSV, optionally filtered."""
    if (args.filter_key is None) != (args.filter_values is None):
        raise SystemExit("error: --filter-key and --filter-values must be used together")

    if args.filter_key is not None:
        resolve_key(args.filter_key)

    catalog = _load(args)
    if args.filter_key is not None:
        records = filter_records(catalog, args.filter_key, args.filter_values)
    else:
        records = list(catalog)

    print('\t'.join(CATALOG_COLUMNS))
    for rec in records:
        print('\t'.join(rec.to_row()))
    return 0


def cmd_show(args):
    """Print the distinct values of one field."""
    resolve_key(args.key)
    catalog = _load(args)
    for value in distinct_values(catalog, args.key):
        print(value)
    return 0


def cmd_fetch(args):
    """Download translated assemblies for the selected samples."""
    key = resolve_key(args.filter_key)

    if key == 'id':
        sample_ids = list(dict.fromkeys(args.filter_values))
        matched = None
    else:
        matched = Catalog(filter_records(_load(args), key, args.filter_values))
        sample_ids = [rec.id for rec in matched]

    if not sample_ids:
        print("No samples matched the filter.")
        return 0

    index_html = fetch_cached_text(
        ASSEMBLY_INDEX_URL, cache_dir=args.cache_dir, refresh=args.refresh)
    directories = parse_directory_index(index_html)

    # ids given directly need not be in the catalog
    if matched is None:
        targets = []
        for sample_id in sample_ids:
            directory = resolve_directory(sample_id, directories)
            if directory is None:
                logger.warning("%s is not listed in the assembly index; using the id as directory",
                               sample_id)
            targets.append((sample_id, directory))
    else:
        targets = [(rec.id, rec.directory) for rec in matched.with_directories(directories)]

    urls = []
    for sample_id, directory in targets:
        urls.extend(build_urls(sample_id, args.sequence_type, directory))

    print(f"Fetching {len(urls)} files for {len(sample_ids)} samples into {args.root_dir}")
    print("-" * 50)

    with Fetcher(timeout=args.timeout) as fetcher:
        results = fetch_all(
            urls, args.root_dir, fetcher=fetcher, skip_existing=not args.no_skip)

    stats = summarize(results)
    failed = [r.url for r in results if not r.ok]

    print("-" * 50)
    print("Download complete!")
    print(f"  Success: {stats['success']}")
    print(f"  Failed:  {stats['failed']}")
    print(f"  Skipped: {stats['skipped']}")
    for url in failed:
        print(f"  FAILED: {url}")

    if failed and args.fail_on_error:
        return 1
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='onekp',
        description="Query the 1KP sample catalog and download translated assemblies from GigaDB",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--metadata', default=None,
                        help='Local catalog TSV (default: published GigaDB table, cached)')
    parser.add_argument('--cache-dir', type=Path, default=DEFAULT_CACHE_DIR,
                        help=f'Cache directory (default: {DEFAULT_CACHE_DIR})')
    parser.add_argument('--refresh', action='store_true',
                        help='Re-download cached files even if they are fresh')
    parser.add_argument('--pad-short-rows', action='store_true',
                        help='Fill missing trailing catalog columns instead of failing')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    key_help = f"Field to filter on: {', '.join(FILTER_KEYS)}"

    # Metadata command
    p_metadata = subparsers.add_parser('metadata', help='Print catalog rows as TSV')
    p_metadata.add_argument('--filter-key', help=key_help)
    p_metadata.add_argument('--filter-values', type=split_values,
                            help='Comma-separated accepted values')
    p_metadata.set_defaults(func=cmd_metadata)

    # Fetch command
    p_fetch = subparsers.add_parser('fetch', help='Download assemblies for matching samples')
    p_fetch.add_argument('--filter-key', required=True, help=key_help)
    p_fetch.add_argument('--filter-values', type=split_values, required=True,
                         help='Comma-separated accepted values')
    p_fetch.add_argument('-s', '--sequence-type', required=True,
                         choices=[t.value for t in SequenceType],
                         help='Which translated assembly to download')
    p_fetch.add_argument('-r', '--root-dir', default='.', help='Output directory')
    p_fetch.add_argument('--no-skip', action='store_true', help="Don't skip existing files")
    p_fetch.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT,
                         help=f'HTTP timeout in seconds (default: {DEFAULT_TIMEOUT})')
    p_fetch.add_argument('--fail-on-error', action='store_true',
                         help='Exit with status 1 if any download failed')
    p_fetch.set_defaults(func=cmd_fetch)

    # Show command
    p_show = subparsers.add_parser('show', help='List distinct values of a field')
    p_show.add_argument('-k', '--key', required=True, help=key_help)
    p_show.set_defaults(func=cmd_show)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (ParseError, InvalidKeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except (FetchError, OSError) as e:
        print(f"ERROR: could not load {e}", file=sys.stderr)
        return 1
    except OneKpError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
