#!/usr/bin/env python3
"""
Vending Machine Engine Demo Runner — preflight checks + purchase walkthrough.

Usage:
    python demo.py              Run the walkthrough against a local Redis
    python demo.py --fake       Run the walkthrough against in-process fakeredis
    python demo.py --check      Only run preflight checks, don't start demo
    python demo.py --tests      Run the full test suite

Requires:
    - pip install -e ".[test]"
    - Redis reachable at VM_REDIS_HOST:VM_REDIS_PORT (not needed with --fake)
"""

import sys
import argparse
import logging
import subprocess
import socket

# ─── Terminal output ───

BOLD, DIM, RESET = "\033[1m", "\033[2m", "\033[0m"
MARKS = {"ok": "\033[92m✓", "fail": "\033[91m✗", "info": "\033[96m→", "warn": "\033[93m!"}


def say(mark, msg):
    print(f"  {MARKS[mark]}{RESET} {msg}")


# ─── Preflight checks ───

def preflight(fake: bool = False):
    """Confirm the client libraries import and, unless faking, that Redis answers."""
    print(f"\n{BOLD}  Preflight{RESET}\n")
    passed = True

    for module in ("redis", "fakeredis") if fake else ("redis",):
        try:
            __import__(module)
            say("ok", f"{module} importable")
        except ImportError as e:
            say("fail", f"{module} missing: {e}")
            passed = False

    if not fake:
        from VM_Engine.vm_shared import config
        try:
            with socket.create_connection((config.REDIS_HOST, config.REDIS_PORT), timeout=2):
                say("ok", f"Redis answering at {config.REDIS_HOST}:{config.REDIS_PORT}")
        except OSError:
            say("fail", f"No Redis at {config.REDIS_HOST}:{config.REDIS_PORT}")
            passed = False

    print()
    return passed


def run_tests():
    result = subprocess.run([sys.executable, "-m", "pytest", "VM_Engine", "--tb=short"])
    return result.returncode == 0


# ─── Walkthrough ───

def _client(fake: bool):
    if fake:
        import fakeredis
        return fakeredis.FakeRedis()
    from VM_Engine.vm_db.connection import create_ledger_client
    return create_ledger_client()


def run_demo(fake: bool = False):
    """Deposit, buy, reset and a few rejected requests."""
    from VM_Engine.engine import TransactionEngine
    from VM_Engine.vm_db import connection

    client = _client(fake)
    engine = TransactionEngine(client)

    buyer, product = "demo_buyer", "demo_cola"
    engine.balances.register_buyer(buyer, "demo")
    engine.stock.register_product(product, "Cola", amount_available=10, cost=60, seller_id="demo_seller")

    print(f"  {BOLD}── Deposit ──{RESET}")
    for coin in (100, 50):
        receipt = engine.deposit(buyer, coin)
        say("ok", f"Inserted {coin:>3} → balance {BOLD}{receipt.new_balance}{RESET}")

    outcome = engine.attempt("deposit", buyer, 25)
    say("warn", f"Inserted  25 → {outcome.kind.value}: {DIM}{outcome.detail}{RESET}")

    print(f"\n  {BOLD}── Buy ──{RESET}")
    receipt = engine.buy(buyer, product, 1)
    change = ", ".join(f"{count}×{coin}" for coin, count in receipt.change.items()) or "none"
    say("ok", f"Bought {receipt.quantity_purchased} × {receipt.product.product_name} for {receipt.total_spent}")
    say("info", f"Change: {change}  ({receipt.change_total} cents)")
    say("info", f"Stock left: {receipt.product.amount_available}, balance: {engine.balances.get(buyer)}")

    print(f"\n  {BOLD}── Reset ──{RESET}")
    outcome = engine.attempt("reset", buyer)
    say("warn", f"Reset on empty balance → {outcome.kind.value}")
    engine.deposit(buyer, 20)
    receipt = engine.reset(buyer)
    say("ok", receipt.message)

    status = connection.health_check(client)
    print()
    say("info", f"Ledger: {status.buyer_count} buyer(s), {status.product_count} product(s)")
    connection.close(client)


# ─── Entry point ───

def parse_args():
    parser = argparse.ArgumentParser(
        description="Vending Machine Engine Demo Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  python demo.py              Run the walkthrough against Redis
  python demo.py --fake       Run the walkthrough against fakeredis
  python demo.py --check      Only run preflight checks
  python demo.py --tests      Run the full test suite
        """,
    )
    parser.add_argument("--fake", action="store_true", help="Use an in-process fakeredis server")
    parser.add_argument("--check", action="store_true", help="Only run preflight checks")
    parser.add_argument("--tests", action="store_true", help="Run the full test suite")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show engine log output")
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"""
{BOLD}    ┌─────────────────────────────────────────────────┐
    │   Vending Machine Transaction Engine              │
    │   Deposit / Buy / Reset Walkthrough               │
    └─────────────────────────────────────────────────┘{RESET}
    """)

    if args.check:
        ok_flag = preflight(args.fake)
        sys.exit(0 if ok_flag else 1)

    if args.tests:
        ok_flag = run_tests()
        sys.exit(0 if ok_flag else 1)

    if not preflight(args.fake):
        say("fail", "Preflight failed — fix the issues above first")
        print(f"\n  {DIM}Hint: docker run -p 6379:6379 redis, or pass --fake{RESET}\n")
        sys.exit(1)

    run_demo(args.fake)


if __name__ == "__main__":
    main()
