"""``wren routes``: print a site's post and redirect tables.

Loads the config store exactly as the server does at startup and prints
what it published, plus how many malformed lines were dropped.
"""

import argparse
import sys

from wren.config import AppConfig
from wren.storage import FileStore
from wren.store import ConfigStore


def _table(headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> None:
    widths = [max([len(h), *(len(r[i]) for r in rows)]) for i, h in enumerate(headers)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths)
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row))


def run_routes(args: argparse.Namespace) -> None:
    config = AppConfig.from_env(**({"root": args.root} if args.root else {}))
    files = FileStore(config.root)
    if not files.root.is_dir():
        print(f"Error: site root {str(files.root)!r} is not a directory", file=sys.stderr)
        raise SystemExit(1)

    store = ConfigStore(
        files,
        routes_file=config.routes_file,
        redirects_file=config.redirects_file,
    )
    report = store.reload()
    tables = store.snapshot()

    if tables.posts:
        _table(
            ("PATH", "FILE", "TITLE"),
            [(p.url_path, p.file_name, p.title) for p in tables.posts],
        )
    else:
        print("No post mappings.")
    print()
    if tables.redirects:
        _table(
            ("FROM", "TO"),
            [(r.from_path, r.to_path) for r in tables.redirects],
        )
    else:
        print("No redirects.")
    print()
    print(
        f"{report.posts} posts, {report.redirects} redirects "
        f"({report.skipped_posts + report.skipped_redirects} malformed lines skipped)"
    )
    for path in report.missing:
        print(f"Not found: {path}")
