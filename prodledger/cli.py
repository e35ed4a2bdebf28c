#!/usr/bin/env python3
"""
prodledger CLI

Command-line access to a persisted product ledger:
  prodledger set-authority <principal>
  prodledger set-fee <fee>
  prodledger register --caller <principal> --hash <hex>|--file <path> ...
  prodledger update <id> --caller <principal> --origin ... --production-date ... --compliance ...
  prodledger show <id>
  prodledger count
  prodledger exists <hex>
  prodledger hash <file>
  prodledger transfers

Usage:
  prodledger --config ledger.yaml register --caller ST1TEST --file label.pdf \\
      --origin Valencia --production-date 100 --type organic --quality 90 \\
      --expiry 365 --location Madrid --currency STX --min 50 --max 1000 --batch 10
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .authority import StaticAuthorities
from .clock import ManualClock, SystemClock
from .config import LedgerConfig
from .hashing import hash_file, parse_hash
from .payments import RecordingPaymentProvider
from .registry import ProductRegistry
from .store import LedgerStore


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def load_config(args) -> LedgerConfig:
    config = LedgerConfig.from_file(args.config) if args.config else LedgerConfig()
    if args.store_dir:
        config.store_dir = Path(args.store_dir)
    if config.store_dir is None:
        config.store_dir = Path("./ledger")
    return config


def open_registry(args, config: LedgerConfig) -> ProductRegistry:
    """Build a registry over the configured store."""
    store = LedgerStore(config.store_dir)
    state = store.load(default=config.new_state())
    state.max_products = config.max_products
    payments = RecordingPaymentProvider(store.load_transfers())
    clock = ManualClock(args.time) if args.time is not None else SystemClock()
    return ProductRegistry(
        state,
        verifier=StaticAuthorities(config.authorities),
        payments=payments,
        clock=clock,
        store=store,
    )


def _fail(result) -> int:
    name = result.error.name if result.error is not None else "FAILED"
    print(f"ERROR: {name}", file=sys.stderr)
    return 1


def cmd_set_authority(args, registry: ProductRegistry) -> int:
    result = registry.set_authority_contract(args.principal)
    if not result:
        return _fail(result)
    print(f"Authority contract: {args.principal}")
    return 0


def cmd_set_fee(args, registry: ProductRegistry) -> int:
    result = registry.set_registration_fee(args.fee)
    if not result:
        return _fail(result)
    print(f"Registration fee: {args.fee}")
    return 0


def cmd_register(args, registry: ProductRegistry) -> int:
    if args.file:
        digest = hash_file(args.file)
    elif args.hash:
        digest = parse_hash(args.hash)
    else:
        print("ERROR: one of --hash or --file is required", file=sys.stderr)
        return 2

    result = registry.register_product(
        args.caller,
        digest,
        args.origin,
        args.production_date,
        args.compliance,
        args.type,
        args.quality,
        args.expiry,
        args.location,
        args.currency,
        args.min,
        args.max,
        args.batch,
    )
    if not result:
        return _fail(result)

    store: LedgerStore = registry.store
    store.save_transfers(registry.payments.transfers)
    _print_json({"id": result.value, "hash": digest.hex()})
    return 0


def cmd_update(args, registry: ProductRegistry) -> int:
    result = registry.update_product(
        args.caller,
        args.id,
        args.origin,
        args.production_date,
        args.compliance,
    )
    if not result:
        return _fail(result)
    print(f"Updated product {args.id}")
    return 0


def cmd_show(args, registry: ProductRegistry) -> int:
    product = registry.get_product(args.id)
    if product is None:
        print(f"ERROR: product {args.id} not found", file=sys.stderr)
        return 1
    data = {"id": args.id, **product.to_dict()}
    update = registry.get_product_update(args.id)
    if update is not None:
        data["last_update"] = update.to_dict()
    _print_json(data)
    return 0


def cmd_count(args, registry: ProductRegistry) -> int:
    print(registry.get_product_count().value)
    return 0


def cmd_exists(args, registry: ProductRegistry) -> int:
    exists = registry.check_product_existence(parse_hash(args.hash)).value
    print("true" if exists else "false")
    return 0 if exists else 1


def cmd_transfers(args, registry: ProductRegistry) -> int:
    _print_json([t.to_dict() for t in registry.payments.transfers])
    return 0


def cmd_hash(args) -> int:
    print(hash_file(args.file).hex())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prodledger",
        description="Product registration ledger",
    )
    parser.add_argument("--config", help="Ledger YAML config file")
    parser.add_argument("--store-dir", help="Ledger directory (default: ./ledger)")
    parser.add_argument("--time", type=int, help="Ledger time for this call (default: now)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    authority_parser = subparsers.add_parser("set-authority", help="Set the fee recipient (once)")
    authority_parser.add_argument("principal", help="Authority contract principal")

    fee_parser = subparsers.add_parser("set-fee", help="Change the registration fee")
    fee_parser.add_argument("fee", type=int, help="New fee")

    register_parser = subparsers.add_parser("register", help="Register a product")
    register_parser.add_argument("--caller", required=True, help="Registering principal")
    register_parser.add_argument("--hash", help="Product hash (64 hex chars)")
    register_parser.add_argument("--file", help="Compute the product hash from a file")
    register_parser.add_argument("--origin", required=True)
    register_parser.add_argument("--production-date", type=int, required=True)
    register_parser.add_argument("--compliance", default="")
    register_parser.add_argument("--type", required=True,
                                 help="organic, manufactured or processed")
    register_parser.add_argument("--quality", type=int, required=True, help="0-100")
    register_parser.add_argument("--expiry", type=int, required=True)
    register_parser.add_argument("--location", required=True)
    register_parser.add_argument("--currency", required=True, help="STX, USD or BTC")
    register_parser.add_argument("--min", type=int, required=True)
    register_parser.add_argument("--max", type=int, required=True)
    register_parser.add_argument("--batch", type=int, required=True)

    update_parser = subparsers.add_parser("update", help="Amend a product (producer only)")
    update_parser.add_argument("id", type=int, help="Product id")
    update_parser.add_argument("--caller", required=True, help="Amending principal")
    update_parser.add_argument("--origin", required=True)
    update_parser.add_argument("--production-date", type=int, required=True)
    update_parser.add_argument("--compliance", default="")

    show_parser = subparsers.add_parser("show", help="Show a product")
    show_parser.add_argument("id", type=int, help="Product id")

    subparsers.add_parser("count", help="Number of registered products")

    exists_parser = subparsers.add_parser("exists", help="Check whether a hash is registered")
    exists_parser.add_argument("hash", help="Product hash (64 hex chars)")

    hash_parser = subparsers.add_parser("hash", help="Compute the product hash of a file")
    hash_parser.add_argument("file", help="File to hash")

    subparsers.add_parser("transfers", help="List registration fee transfers")

    return parser


COMMANDS = {
    "set-authority": cmd_set_authority,
    "set-fee": cmd_set_fee,
    "register": cmd_register,
    "update": cmd_update,
    "show": cmd_show,
    "count": cmd_count,
    "exists": cmd_exists,
    "transfers": cmd_transfers,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "hash":
        return cmd_hash(args)

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    registry = open_registry(args, config)
    try:
        return COMMANDS[args.command](args, registry)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
