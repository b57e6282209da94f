"""
Walk through zlog's output before and after enabling auto source/callstack.

This script:
1. Logs one record per level with the default policy
2. Enables auto-source everywhere and auto-callstack for ERROR and DEBUG
3. Logs the same records again
4. Logs an order-processing failure enriched with context, segment and error

Usage:
    python scripts/demo.py
    python scripts/demo.py --config policy.json --output stdout,logs/demo.jsonl
"""

import argparse
from typing import List, Optional

import zlog
from zlog import Level
from zlog.sink import parse_destinations


def process_order(order_id: str) -> None:
    raise ConnectionError(f"simulated database connection timeout for {order_id}")


def process_payment() -> None:
    zlog.info().segment("payment", "process").message("Payment processing started")


def run_default_policy() -> None:
    zlog.error().err(RuntimeError("test error")).msg("No source or callstack for error yet")
    zlog.warn().message("No source for warn yet")
    zlog.debug().message("No source or callstack for debug yet")
    zlog.info().message("No source for info yet")


def run_configured_policy(policy: Optional[zlog.DepthPolicy] = None) -> None:
    if policy is None:
        policy = zlog.configure(
            zlog.auto_source_config(Level.ERROR, True),
            zlog.auto_callstack_config(Level.ERROR, True),
            zlog.max_callstack_depth_config(Level.ERROR, 8),
            zlog.auto_source_config(Level.WARN, True),
            zlog.auto_source_config(Level.INFO, True),
            zlog.auto_source_config(Level.DEBUG, True),
            zlog.auto_callstack_config(Level.DEBUG, True),
            zlog.max_callstack_depth_config(Level.DEBUG, 12),
        )
    zlog.set_config(policy)

    zlog.error().err(RuntimeError("test error")).msg("Error now carries source and callstack")
    zlog.warn().message("Warn now carries source")
    zlog.debug().message("Debug now carries source and callstack")
    zlog.info().message("Info now carries source")


def run_scenario() -> None:
    ctx = {"userID": "12345", "requestID": "req-abc-123"}

    try:
        process_order("order-456")
    except ConnectionError as e:
        zlog.error().context(ctx, ["userID", "requestID"]).segment("order", "process").err(
            e
        ).msgf("taskId: %s", "task-789")

    process_payment()

    zlog.info().context(ctx, ["userID", "requestID"]).segment("user", "profile", "update").message(
        "User profile updated"
    )


def main(argv: Optional[List[str]] = None):
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Demonstrate zlog output")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON policy file applied instead of the built-in demo policy",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="stdout",
        help="Comma-separated destinations (stdout, stderr, file paths)",
    )
    args = parser.parse_args(argv)

    zlog.set_output(*parse_destinations(args.output))
    policy = zlog.load_config(args.config) if args.config else None

    print("=== DEFAULT POLICY ===")
    run_default_policy()

    print("\n=== CONFIGURED POLICY ===")
    run_configured_policy(policy)

    print("\n=== SCENARIO ===")
    run_scenario()


if __name__ == "__main__":
    main()
