#!/usr/bin/env python3
"""
main.py - Orchestrator for the farm simulation

Usage examples:
    python main.py sim_run --days 30
    python main.py sim_run --days 60 --config my_farm.yaml --seed 7
    python main.py shop --level 4

This script expects to be run from the project root.
"""
import argparse
import sys
import logging
from datetime import datetime
from pathlib import Path

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from farmsim.config import load_config, set_seeds
from farmsim.catalog import build_catalog, GLOBAL_COVERAGE
from farmsim.hardware import DeviceRegistry
from farmsim.runner import run_simulation


def sim_run(args):
    cfg = load_config(args.config)
    if args.seed is not None:
        set_seeds(args.seed)
    days = args.days or 30

    # Setup logging
    log_dir = ROOT / "logs"
    log_dir.mkdir(exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"sim_run_{timestamp}.log"

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        handlers=[
            logging.FileHandler(log_file, mode='w'),
            logging.StreamHandler()  # Also print to console
        ]
    )
    logger = logging.getLogger(__name__)

    logger.info("="*80)
    logger.info("SIMULATION RUN STARTED")
    logger.info(f"Days: {days}")
    logger.info(f"Config: {args.config or 'default'}")
    logger.info(f"Log file: {log_file}")
    logger.info("="*80)

    records = run_simulation(cfg, days=days, catalog=build_catalog(cfg))

    final = records[-1] if records else {}
    logger.info("="*80)
    logger.info("SIMULATION RUN FINISHED")
    logger.info(f"Total harvested: {sum(r['harvested'] for r in records)}")
    logger.info(f"Total revenue: {sum(r['revenue'] for r in records)}")
    logger.info(f"Total electricity: {sum(r['electricity_cost'] for r in records):.2f}")
    logger.info(f"Final cash: {final.get('cash', 0.0):.2f}")
    logger.info("="*80)


def shop(args):
    cfg = load_config(args.config)
    registry = DeviceRegistry(catalog=build_catalog(cfg))
    level = args.level or 1
    print(f"[main] Equipment available at level {level}:")
    for item in registry.shop_inventory(level):
        coverage = 'global' if item['coverage'] and item['coverage'] >= GLOBAL_COVERAGE else item['coverage']
        print(f"  {item['type']:<18} {item['name']:<20} cost={item['cost']:>6.0f} "
              f"op/day={item['operating_cost']:>5.1f} power={item['power_usage']:>4.0f}W "
              f"coverage={coverage}")


def parse_args():
    p = argparse.ArgumentParser(description="Farm simulation - main orchestrator")
    sub = p.add_subparsers(dest="cmd")

    s = sub.add_parser("sim_run", help="Run the demo farm for a number of days")
    s.add_argument("--days", type=int, help="simulated days to run")
    s.add_argument("--config", type=str, default=None, help="path to YAML config (default: packaged defaults)")
    s.add_argument("--seed", type=int, default=None, help="random seed (overrides config)")
    s.add_argument("--verbose", action='store_true', help="log at DEBUG level")

    sh = sub.add_parser("shop", help="List equipment unlocked at a level")
    sh.add_argument("--level", type=int, help="player unlock level")
    sh.add_argument("--config", type=str, default=None, help="path to YAML config")

    return p.parse_args()


def main():
    args = parse_args()
    if not args.cmd:
        print("No command given. Use -h to see options.")
        return
    if args.cmd == "sim_run":
        sim_run(args)
    elif args.cmd == "shop":
        shop(args)
    else:
        print("Unknown command:", args.cmd)


if __name__ == "__main__":
    main()
