"""tvl_rollup: combine child protocol TVL series into a parent protocol snapshot.

Subpackages:
  - core: settings, snapshot types, errors, time helpers
  - rollup: granularity, date alignment, merging, aggregation, size guard
  - providers: async snapshot fetching

`service.build_parent_snapshot` wires them together; `cli` is the command
line entrypoint.
"""

__all__ = [
    'core',
    'rollup',
    'providers',
    'directory',
    'service',
    'cli',
]
