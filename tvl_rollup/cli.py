"""CLI entrypoint for building a parent protocol snapshot.

Examples:
  python -m tvl_rollup.cli parent#aave --directory protocols.json
  python -m tvl_rollup.cli Aave --directory protocols.json --hourly --out aave.json
  python -m tvl_rollup.cli parent#aave --directory protocols.json --config settings.yaml --skip-aggregated-tvl
"""
from __future__ import annotations
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from tvl_rollup.core.config import ConfigError, Settings, default_settings, load_settings
from tvl_rollup.core.errors import NoChildrenError, ProviderError
from tvl_rollup.directory import ProtocolDirectory
from tvl_rollup.providers.snapshots import SnapshotProvider
from tvl_rollup.service import build_parent_snapshot, error_payload


def setup_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(),
               format="{time:YYYY-MM-DD HH:mm:ss.SSS} - {level} - {message}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='tvl_rollup', description='Combine child protocol TVL series into a parent snapshot')
    p.add_argument('parent', help='parent protocol id, name or slug')
    p.add_argument('--directory', required=True, help='protocol directory JSON')
    p.add_argument('--config', default=None, help='settings YAML (defaults used when omitted)')
    p.add_argument('--hourly', action='store_true', default=None, help='use hourly child series')
    p.add_argument('--skip-aggregated-tvl', action='store_true', default=None,
                   help='do not combine global tvl/tokens series')
    p.add_argument('--now', type=int, default=None, help='fixed epoch seconds for date rounding')
    p.add_argument('--out', default=None, help='write JSON here instead of stdout')
    p.add_argument('--log-level', default=None, type=str.upper,
                   choices=['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR'])
    return p


async def _run(args: argparse.Namespace, settings: Settings) -> dict:
    directory = ProtocolDirectory.from_json_path(args.directory)
    parent = directory.get_parent(args.parent)
    use_hourly = settings.rollup.use_hourly_data if args.hourly is None else args.hourly
    skip_agg = settings.rollup.skip_aggregated_tvl if args.skip_aggregated_tvl is None else args.skip_aggregated_tvl
    async with SnapshotProvider(settings.provider) as provider:
        result = await build_parent_snapshot(
            parent, directory, provider,
            use_hourly_data=use_hourly,
            skip_aggregated_tvl=skip_agg,
            now=args.now,
            max_response_bytes=settings.rollup.max_response_bytes,
        )
    return result.to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.config) if args.config else default_settings()
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 1
    setup_logging(args.log_level or settings.logging.level)

    try:
        payload = asyncio.run(_run(args, settings))
    except (NoChildrenError, ProviderError) as e:
        status, body = error_payload(e)
        logger.error("[parent_snapshot_failure] parent={} status={} msg={}", args.parent, status, body['message'])
        print(json.dumps(body), file=sys.stderr)
        return 2 if isinstance(e, NoChildrenError) else 1

    text = json.dumps(payload, separators=(',', ':'))
    if args.out:
        Path(args.out).write_text(text, encoding='utf-8')
        logger.info("wrote {} bytes to {}", len(text), args.out)
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
