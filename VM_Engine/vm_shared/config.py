import os

# Redis Connection

REDIS_HOST              = os.environ.get("VM_REDIS_HOST", "localhost")
REDIS_PORT              = int(os.environ.get("VM_REDIS_PORT", "6379"))
REDIS_LEDGER_DB         = int(os.environ.get("VM_REDIS_DB", "2"))    # Buyers and products share one DB
REDIS_SOCKET_TIMEOUT    = 5          # seconds

# Key Namespace Prefixes

BUYER_KEY_PREFIX        = "vm:v1:buyer"          # vm:v1:buyer:{buyer_id}
PRODUCT_KEY_PREFIX      = "vm:v1:product"        # vm:v1:product:{product_id}

# Ledger Settings

LEDGER_OPTIMISTIC_LOCK_RETRIES = 10

# Coins (smallest currency unit, cents)

COIN_DENOMINATIONS      = (100, 50, 20, 10, 5)   # Descending, used by change making
SMALLEST_COIN           = COIN_DENOMINATIONS[-1]

# Products

MIN_PRODUCT_COST        = 5
