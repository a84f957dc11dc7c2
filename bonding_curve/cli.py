"""
Offline bonding-curve calculator.

    python -m bonding_curve.cli quote --side buy --amount 10000000000000
    python -m bonding_curve.cli simulate --buys 5 --amount 50000000000000

Both commands run against a fresh curve seeded from the config file and print
JSON to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Sequence

from .config import load_config
from .core.curve import create_curve, state_to_dict
from .core.pricing import get_buy_quote, get_sell_quote, market_cap, spot_price_e9
from .errors import BondingCurveError
from .integration.platform import Platform

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "bonding_curve.yaml"


def _cmd_quote(args: argparse.Namespace) -> dict:
    config = load_config(args.config)
    curve = create_curve(config)
    if args.side == "buy":
        quote = get_buy_quote(curve, args.amount, config)
    else:
        quote = get_sell_quote(curve, args.amount, config)
    return {
        "quote": asdict(quote),
        "spot_price_e9": spot_price_e9(curve),
        "market_cap": market_cap(curve),
    }


def _cmd_simulate(args: argparse.Namespace) -> dict:
    config = load_config(args.config)
    platform = Platform(config)
    handle = "SIM"
    platform.create_curve(handle, creator="simulator")
    trader = "trader"
    steps = []
    for i in range(args.buys):
        amount = min(args.amount, platform.curve(handle).real_token_reserves)
        quote = platform.quote_buy(handle, amount)
        platform.deposit(trader, quote.total)
        result = platform.buy(handle, trader, amount, quote.total)
        curve = platform.curve(handle)
        steps.append({
            "i": i,
            "paid": result.effect.paid,
            "fee": result.effect.fee,
            "spot_price_e9": spot_price_e9(curve),
            "complete": curve.complete,
        })
        if curve.complete:
            break
    return {
        "steps": steps,
        "curve": state_to_dict(platform.curve(handle)),
        "trader_tokens": platform.balance(trader, handle),
        "fee_recipient_sol": platform.balance(config.fee_recipient),
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Offline bonding-curve quotes and trade simulation")
    ap.add_argument("--config", type=str, default=str(DEFAULT_CONFIG_PATH))
    ap.add_argument("--log-level", type=str, default="WARNING")
    sub = ap.add_subparsers(dest="command", required=True)

    q = sub.add_parser("quote", help="quote a buy or sell against a fresh curve")
    q.add_argument("--side", choices=("buy", "sell"), default="buy")
    q.add_argument("--amount", type=int, required=True)
    q.set_defaults(func=_cmd_quote)

    s = sub.add_parser("simulate", help="run sequential buys against a fresh curve")
    s.add_argument("--buys", type=int, default=10)
    s.add_argument("--amount", type=int, required=True)
    s.set_defaults(func=_cmd_simulate)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        report = args.func(args)
    except BondingCurveError as exc:
        print(json.dumps({"error": exc.code, "detail": str(exc)}))
        return 1
    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
