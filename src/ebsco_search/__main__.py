"""Dev CLI for ebsco-search. Usage: python -m ebsco_search <query> | --info"""

from __future__ import annotations

import asyncio
import logging
import sys

USAGE = "Usage: python -m ebsco_search <query> | --info"


def main() -> None:
    if len(sys.argv) < 2:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    from ebsco_search.config import load_config

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if sys.argv[1] == "--info":
        _run_info(config)
        return

    query = " ".join(sys.argv[1:])
    try:
        result = asyncio.run(_search(query, config))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if result.failed:
        print(f"Search failed ({result.failure.value}): {result.error}", file=sys.stderr)
        sys.exit(2)

    from ebsco_search import export_markdown

    print(f"{result.total_items} hits")
    print(export_markdown(result))


def _run_info(config) -> None:
    from ebsco_search import fetch_info

    try:
        info = asyncio.run(fetch_info(config))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if info.failed:
        print(f"Info request failed ({info.failure.value}): {info.error}", file=sys.stderr)
        sys.exit(2)

    for db in info.databases:
        print(f"{db.short_name}\t{db.long_name or ''}")


async def _search(query: str, config):
    from ebsco_search import search

    return await search(query, config=config)


if __name__ == "__main__":
    main()
