"""
Greedy change making over the accepted coin denominations.

Every balance is built from valid coin deposits and every product cost is a
multiple of the smallest coin, so any amount handed in here decomposes
exactly. A leftover remainder means a caller broke that guarantee.
"""

from VM_Engine.vm_shared import config


def make_change(amount: int) -> dict[int, int]:
    """Decompose ``amount`` into a minimal-count {denomination: count} mapping.

    Denominations are visited largest first and only those actually used
    appear in the result, so ``make_change(0) == {}``.
    """
    if amount < 0:
        raise ValueError(f"Cannot make change for a negative amount: {amount}")

    change: dict[int, int] = {}
    remaining = amount
    for coin in config.COIN_DENOMINATIONS:
        count = remaining // coin
        if count > 0:
            change[coin] = count
            remaining -= count * coin

    if remaining != 0:
        raise ValueError(
            f"Amount {amount} is not a multiple of {config.SMALLEST_COIN}; {remaining} left over"
        )
    return change
