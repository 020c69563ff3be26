from enum import IntEnum

from VM_Engine.vm_shared import errors


class Coin(IntEnum):
    FIVE    = 5
    TEN     = 10
    TWENTY  = 20
    FIFTY   = 50
    HUNDRED = 100

    @classmethod
    def validate(cls, raw_value: int) -> "Coin":
        # bool is an int subclass; True must not pass as a coin
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise errors.InvalidCoinError(raw_value)
        try:
            return cls(raw_value)
        except ValueError:
            raise errors.InvalidCoinError(raw_value)
