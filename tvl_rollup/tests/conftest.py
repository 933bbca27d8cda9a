"""
Pytest Fixtures for the tvl_rollup Test Suite

Shared date constants and snapshot builders. Snapshots are built through
`ProtocolSnapshot.from_dict` so tests exercise the same parsing path as the
remote provider.
"""
from typing import Any, Dict, List, Optional, Sequence

import pytest

from tvl_rollup.core.config import Settings
from tvl_rollup.core.custom_types import ParentProtocol, ProtocolSnapshot

HOUR = 3600
DAY = 86_400
D_2023_12_31 = 1_703_980_800
D_2024_01_01 = 1_704_067_200
D_2024_01_02 = 1_704_153_600
# fixed "now" well after every test date
NOW = D_2024_01_02 + 30 * DAY


def tvl_rows(dates: Sequence[int], values: Sequence[float]) -> List[Dict[str, Any]]:
    return [{'date': d, 'totalLiquidityUSD': v} for d, v in zip(dates, values)]


def token_rows(dates: Sequence[int], tokens: Sequence[Dict[str, float]]) -> List[Dict[str, Any]]:
    return [{'date': d, 'tokens': t} for d, t in zip(dates, tokens)]


def snapshot_payload(
    name: str,
    dates: Sequence[int],
    values: Sequence[float],
    *,
    chains: Optional[Dict[str, Dict[str, Any]]] = None,
    tokens: Optional[List[Dict[str, Any]]] = None,
    tokens_in_usd: Optional[List[Dict[str, Any]]] = None,
    current: Optional[Dict[str, float]] = None,
    raises: Optional[List[Dict[str, Any]]] = None,
    hallmarks: Optional[List[List[Any]]] = None,
    other_protocols: Optional[List[str]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        'name': name,
        'tvl': tvl_rows(dates, values),
        'chainTvls': chains or {},
        'currentChainTvls': current or {},
    }
    if tokens is not None:
        payload['tokens'] = tokens
    if tokens_in_usd is not None:
        payload['tokensInUsd'] = tokens_in_usd
    if raises is not None:
        payload['raises'] = raises
    if hallmarks is not None:
        payload['hallmarks'] = hallmarks
    if other_protocols is not None:
        payload['otherProtocols'] = other_protocols
    return payload


def make_snapshot(name: str, dates: Sequence[int], values: Sequence[float], **kw) -> ProtocolSnapshot:
    return ProtocolSnapshot.from_dict(snapshot_payload(name, dates, values, **kw))


@pytest.fixture
def parent() -> ParentProtocol:
    return ParentProtocol(id='parent#aave', name='Aave', metadata={'url': 'https://aave.com'})


@pytest.fixture
def settings_fixture() -> Settings:
    """Validated settings without a YAML file."""
    return Settings.model_validate({
        'provider': {'protocol_url': 'https://api.test/updatedProtocol', 'hourly_url': 'https://api.test/hourly',
                     'timeout_sec': 5, 'rate_limit_rps': 1000},
        'rollup': {'max_response_bytes': 5_800_000},
        'logging': {'level': 'DEBUG'},
    })


@pytest.fixture
def directory_payload() -> Dict[str, Any]:
    return {
        'protocols': [
            {'id': '1', 'name': 'Aave V2', 'parentProtocol': 'parent#aave'},
            {'id': '2', 'name': "Aave V3", 'parentProtocol': 'parent#aave'},
            {'id': '3', 'name': 'Uniswap V3', 'parentProtocol': 'parent#uniswap'},
            {'id': '4', 'name': 'Lonely'},
        ],
        'parentProtocols': [
            {'id': 'parent#aave', 'name': 'Aave', 'url': 'https://aave.com'},
            {'id': 'parent#uniswap', 'name': 'Uniswap'},
            {'id': 'parent#ghost', 'name': 'Ghost Finance'},
        ],
    }
