"""Unified CLI with filter, services, and duplicates commands."""

from __future__ import annotations

import sys
from typing import List

from crmsearch.duplicates import cli as duplicates_cli
from crmsearch.fuzzy import cli as fuzzy_cli
from crmsearch.services import cli as services_cli

USAGE = """usage: crmsearch <filter|services|duplicates> [args...]

subcommands:
  filter      fuzzy-filter a CSV/JSON record export by a query
  services    suggest service-taxonomy mappings for provider services
  duplicates  find probable duplicate providers

examples:
  crmsearch filter providers.csv --query "joao silva" --fields name,email
  crmsearch services providers.csv --taxonomy service_taxonomy.yaml
  crmsearch duplicates providers.json --name-threshold 90
"""

COMMANDS = {
    "filter": fuzzy_cli.main,
    "services": services_cli.main,
    "duplicates": duplicates_cli.main,
}


def main(argv: List[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] in {"-h", "--help", "help"}:
        print(USAGE)
        return 0
    if not argv:
        print(USAGE)
        return 2

    cmd = argv[0]
    rest = argv[1:]

    handler = COMMANDS.get(cmd)
    if handler is None:
        print(f"unknown command: {cmd}")
        return 2
    return handler(rest)


if __name__ == "__main__":
    raise SystemExit(main())
