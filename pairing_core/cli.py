"""
Lane pairing recommender CLI.

Usage:
  # Write a default config file
  pairing-core init-config --config pairing.yaml

  # Check a session snapshot and its history
  pairing-core validate --state state.yaml --history history.csv

  # Print the recommended moves as CSV
  pairing-core recommend --state state.yaml --history history.yaml --config pairing.yaml
"""
from __future__ import annotations
import argparse
import logging
import sys

from .config import ensure_config_exists, load_config
from .io import load_history_csv, load_history_yaml, load_state_yaml, save_moves_csv_bytes
from .scheduler import recommend
from .validation import validate_history, validate_state

logger = logging.getLogger(__name__)


def _load_history(path):
    if not path:
        return []
    if path.lower().endswith(".csv"):
        return load_history_csv(path)
    return load_history_yaml(path)


def cmd_init_config(args):
    if ensure_config_exists(args.config):
        print(f"Wrote default config to: {args.config}")
    else:
        logger.warning("Config already exists, left untouched: %s", args.config)


def cmd_validate(args):
    state = load_state_yaml(args.state)
    history = _load_history(args.history)
    problems = validate_state(state) + validate_history(history)
    if not problems:
        print("OK")
        return 0
    for p in problems:
        print(f"  {p}")
    return 1


def cmd_recommend(args):
    config = load_config(args.config, shuffle=args.shuffle or None, random_seed=args.seed,
                         assign_tracks=args.tracks or None)
    state = load_state_yaml(args.state)
    history = _load_history(args.history)
    result = recommend(state, history, config)
    if result.moves is None:
        print(f"No recommendation: {result.error}", file=sys.stderr)
        return 2
    sys.stdout.write(save_moves_csv_bytes(result.moves + result.tracks).decode("utf-8"))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Recommend lane pairings for the next rotation round",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", help="Command")

    p_init = sub.add_parser("init-config", help="Write a default config file")
    p_init.add_argument("--config", required=True, help="Config path")

    p_val = sub.add_parser("validate", help="Check a state snapshot and history")
    p_val.add_argument("--state", required=True, help="State YAML path")
    p_val.add_argument("--history", default=None, help="History YAML or CSV path")

    p_rec = sub.add_parser("recommend", help="Print recommended moves as CSV")
    p_rec.add_argument("--state", required=True, help="State YAML path")
    p_rec.add_argument("--history", default=None, help="History YAML or CSV path")
    p_rec.add_argument("--config", default=None, help="Config YAML path")
    p_rec.add_argument("--shuffle", action="store_true")
    p_rec.add_argument("--seed", type=int, default=None)
    p_rec.add_argument("--tracks", action="store_true", help="Also place tracks")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not args.command:
        parser.print_help()
        return 1

    dispatch = {
        "init-config": cmd_init_config,
        "validate": cmd_validate,
        "recommend": cmd_recommend,
    }
    return dispatch[args.command](args) or 0


if __name__ == "__main__":
    sys.exit(main())
