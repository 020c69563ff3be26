from dataclasses import asdict, dataclass, field
from typing import Optional, Union

from VM_Engine.vm_shared.errors import ErrorKind


@dataclass
class BuyerRecord:
    buyer_id:   str
    username:   str
    deposit:    int

@dataclass
class Stock:
    amount_available: int
    cost:             int

@dataclass
class ProductSnapshot:
    product_id:       str
    product_name:     str
    amount_available: int
    cost:             int
    seller_id:        str

    @property
    def stock(self) -> Stock:
        return Stock(amount_available=self.amount_available, cost=self.cost)

@dataclass
class DepositReceipt:
    new_balance: int
    message:     str = "Deposit successful"

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class PurchaseReceipt:
    total_spent:        int
    quantity_purchased: int
    change:             dict[int, int]
    product:            ProductSnapshot

    @property
    def change_total(self) -> int:
        return sum(coin * count for coin, count in self.change.items())

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class ResetReceipt:
    returned_amount: int
    message:         str = ""

    def __post_init__(self):
        if not self.message:
            self.message = f"Deposit reset successful. Returned: {self.returned_amount} cents"

    def to_dict(self) -> dict:
        return asdict(self)


Receipt = Union[DepositReceipt, PurchaseReceipt, ResetReceipt]


@dataclass
class Outcome:
    receipt: Optional[Receipt] = None
    kind:    Optional[ErrorKind] = None
    detail:  str = field(default="")

    @property
    def ok(self) -> bool:
        return self.kind is None

@dataclass
class HealthStatus:
    connected:     bool
    buyer_count:   int
    product_count: int
