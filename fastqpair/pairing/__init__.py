from fastqpair.core.constants import DEFAULT_DUPLICATE_POLICY, DuplicatePolicy, PairingMethod
from fastqpair.pairing.base import IndexedPairingStrategy, Matched, PairingStrategy, Unmatched
from fastqpair.pairing.iterate import InterleavedStrategy
from fastqpair.pairing.seek import OffsetIndexStrategy
from fastqpair.pairing.store import FullIndexStrategy

STRATEGIES: dict[str, type[PairingStrategy]] = {
    FullIndexStrategy.method: FullIndexStrategy,
    OffsetIndexStrategy.method: OffsetIndexStrategy,
    InterleavedStrategy.method: InterleavedStrategy,
}


def get_strategy(
    method: PairingMethod, duplicate_policy: DuplicatePolicy = DEFAULT_DUPLICATE_POLICY, strict: bool = False
) -> PairingStrategy:
    """Create the pairing strategy registered under ``method``."""
    try:
        strategy_cls = STRATEGIES[method]
    except KeyError:
        raise ValueError(f"Unknown pairing method '{method}', choose one of {', '.join(STRATEGIES)}") from None
    return strategy_cls(duplicate_policy=duplicate_policy, strict=strict)


__all__ = [
    "STRATEGIES",
    "FullIndexStrategy",
    "IndexedPairingStrategy",
    "InterleavedStrategy",
    "Matched",
    "OffsetIndexStrategy",
    "PairingStrategy",
    "Unmatched",
    "get_strategy",
]
