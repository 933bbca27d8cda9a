"""
Custom Type Definitions
-----------------------

Snapshot data model shared by the provider, the rollup and the CLI.

- TvlPoint / TokensPoint: one dated sample of a scalar or per-token series.
- ChainSeries: the per-chain breakdown of a protocol (tvl, tokens, tokensInUsd).
- ProtocolSnapshot: everything the remote API returns for a single protocol.
- ParentSnapshot: the combined result for a parent protocol. Its `to_dict`
  output is shaped like an ordinary protocol payload plus `isParentProtocol`.

Dates are integer epoch seconds throughout.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# token symbol -> amount
TokenAmounts = Dict[str, float]

# (date, description)
Hallmark = Tuple[int, str]

# keys consumed by ProtocolSnapshot.from_dict; everything else is passthrough metadata
_SNAPSHOT_KEYS = {
    'tvl', 'tokens', 'tokensInUsd', 'chainTvls', 'currentChainTvls',
    'raises', 'hallmarks', 'otherProtocols', 'isParentProtocol',
}


@dataclass(frozen=True)
class TvlPoint:
    date: int
    total_liquidity_usd: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'totalLiquidityUSD': self.total_liquidity_usd}


@dataclass(frozen=True)
class TokensPoint:
    date: int
    tokens: TokenAmounts

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'tokens': dict(self.tokens)}


def _parse_tvl(rows: Optional[List[Dict[str, Any]]]) -> List[TvlPoint]:
    return [TvlPoint(date=int(r['date']), total_liquidity_usd=float(r.get('totalLiquidityUSD') or 0))
            for r in (rows or [])]


def _parse_tokens(rows: Optional[List[Dict[str, Any]]]) -> Optional[List[TokensPoint]]:
    if rows is None:
        return None
    return [TokensPoint(date=int(r['date']),
                        tokens={k: float(v) for k, v in (r.get('tokens') or {}).items() if v is not None})
            for r in rows]


def _dump_tokens(points: Optional[List[TokensPoint]]) -> Optional[List[Dict[str, Any]]]:
    if points is None:
        return None
    return [p.to_dict() for p in points]


@dataclass
class ChainSeries:
    tvl: List[TvlPoint] = field(default_factory=list)
    tokens: Optional[List[TokensPoint]] = None
    tokens_in_usd: Optional[List[TokensPoint]] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'ChainSeries':
        return cls(
            tvl=_parse_tvl(payload.get('tvl')),
            tokens=_parse_tokens(payload.get('tokens')),
            tokens_in_usd=_parse_tokens(payload.get('tokensInUsd')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tvl': [p.to_dict() for p in self.tvl],
            'tokens': _dump_tokens(self.tokens),
            'tokensInUsd': _dump_tokens(self.tokens_in_usd),
        }


@dataclass
class ProtocolSnapshot:
    """One protocol's full set of series as served by the remote API."""
    tvl: List[TvlPoint] = field(default_factory=list)
    tokens: Optional[List[TokensPoint]] = None
    tokens_in_usd: Optional[List[TokensPoint]] = None
    chain_tvls: Dict[str, ChainSeries] = field(default_factory=dict)
    current_chain_tvls: Dict[str, float] = field(default_factory=dict)
    raises: Optional[List[Dict[str, Any]]] = None
    hallmarks: Optional[List[Hallmark]] = None
    other_protocols: Optional[List[Any]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'ProtocolSnapshot':
        hallmarks = payload.get('hallmarks')
        return cls(
            tvl=_parse_tvl(payload.get('tvl')),
            tokens=_parse_tokens(payload.get('tokens')),
            tokens_in_usd=_parse_tokens(payload.get('tokensInUsd')),
            # dict preserves payload order; the first chain anchors date rounding
            chain_tvls={name: ChainSeries.from_dict(c or {}) for name, c in (payload.get('chainTvls') or {}).items()},
            current_chain_tvls={k: float(v) for k, v in (payload.get('currentChainTvls') or {}).items()
                                if v is not None},
            raises=payload.get('raises'),
            hallmarks=[(int(d), str(desc)) for d, desc in hallmarks] if hallmarks is not None else None,
            other_protocols=payload.get('otherProtocols'),
            metadata={k: v for k, v in payload.items() if k not in _SNAPSHOT_KEYS},
        )


@dataclass(frozen=True)
class ParentProtocol:
    id: str
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'ParentProtocol':
        return cls(
            id=str(payload['id']),
            name=str(payload['name']),
            metadata={k: v for k, v in payload.items() if k not in ('id', 'name')},
        )


@dataclass
class ParentSnapshot:
    parent: ParentProtocol
    tvl: List[TvlPoint] = field(default_factory=list)
    tokens: List[TokensPoint] = field(default_factory=list)
    tokens_in_usd: List[TokensPoint] = field(default_factory=list)
    chain_tvls: Dict[str, ChainSeries] = field(default_factory=dict)
    current_chain_tvls: Dict[str, float] = field(default_factory=dict)
    raises: List[Dict[str, Any]] = field(default_factory=list)
    hallmarks: List[Hallmark] = field(default_factory=list)
    other_protocols: Optional[List[Any]] = None
    is_parent_protocol: bool = True

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'id': self.parent.id, 'name': self.parent.name, **self.parent.metadata}
        out.update({
            'currentChainTvls': dict(self.current_chain_tvls),
            'chainTvls': {name: c.to_dict() for name, c in self.chain_tvls.items()},
            'tokens': [p.to_dict() for p in self.tokens],
            'tokensInUsd': [p.to_dict() for p in self.tokens_in_usd],
            'tvl': [p.to_dict() for p in self.tvl],
            'isParentProtocol': self.is_parent_protocol,
            'raises': list(self.raises),
            'otherProtocols': self.other_protocols,
            'hallmarks': [[d, desc] for d, desc in self.hallmarks],
        })
        return out


__all__ = [
    'TokenAmounts', 'Hallmark', 'TvlPoint', 'TokensPoint', 'ChainSeries',
    'ProtocolSnapshot', 'ParentProtocol', 'ParentSnapshot',
]
