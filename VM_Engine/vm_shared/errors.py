from enum import Enum


class ErrorKind(str, Enum):
    INVALID_COIN       = "INVALID_COIN"
    NOT_FOUND          = "NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_OPERATION  = "INVALID_OPERATION"


class VendingEngineError(Exception):
    kind: ErrorKind


class InvalidCoinError(VendingEngineError):
    kind = ErrorKind.INVALID_COIN

    def __init__(self, value):
        self.value = value
        message = f"Invalid coin value: {value}. Accepted values: 5, 10, 20, 50, 100"
        super().__init__(message)


class NotFoundError(VendingEngineError):
    kind = ErrorKind.NOT_FOUND


class BuyerNotFoundError(NotFoundError):
    def __init__(self, buyer_id):
        self.buyer_id = buyer_id
        message = f"Buyer {buyer_id} not found"
        super().__init__(message)


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        message = f"Product {product_id} not found"
        super().__init__(message)


class InsufficientStockError(VendingEngineError):
    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_id, available, requested):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        message = f"Insufficient stock for {product_id}. Available: {available}, Requested: {requested}"
        super().__init__(message)


class InsufficientFundsError(VendingEngineError):
    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, buyer_id, required, available):
        self.buyer_id = buyer_id
        self.required = required
        self.available = available
        message = f"Insufficient funds for {buyer_id}. Required: {required} cents, Available: {available} cents"
        super().__init__(message)


class InvalidOperationError(VendingEngineError):
    kind = ErrorKind.INVALID_OPERATION

    def __init__(self, message):
        super().__init__(message)


class LedgerError(Exception):
    pass


class LedgerUnavailableError(LedgerError):
    def __init__(self, operation):
        self.operation = operation
        message = f"Ledger_error  = {operation}"
        super().__init__(message)


class ConcurrencyError(LedgerError):
    def __init__(self, operation):
        self.operation = operation
        message = f"Optimistic lock failed after max retries: {operation}"
        super().__init__(message)
