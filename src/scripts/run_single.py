#!/usr/bin/env python3
"""
Single DLA Growth Runner

Grows one aggregate headlessly and prints the final braille frame.
Parameters come from defaults, a preset, and/or a JSON/TOML params file.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from dla_term import Simulation, SimulationParams, grid_size_for_terminal, utils
from dla_term.presets import apply_preset, preset_names


def build_params(args):
    params = utils.load_params(args.params) if args.params else None
    if params is None:
        params = SimulationParams()
    if args.preset:
        params = apply_preset(params, args.preset)
    for name in ("particle_count", "seed_pattern", "color_scheme", "seed"):
        value = getattr(args, name)
        if value is not None:
            params = params.with_value(name, value)
    return params


def build_parser():
    parser = argparse.ArgumentParser(
        description="Grow a DLA aggregate and print it as braille",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--params", type=str, default=None, help="JSON/TOML parameter file")
    parser.add_argument("--preset", choices=preset_names(), default=None, help="Named preset")
    parser.add_argument("--particle-count", dest="particle_count", type=int, default=None)
    parser.add_argument("--seed-pattern", dest="seed_pattern", type=str, default=None)
    parser.add_argument("--color-scheme", dest="color_scheme", type=str, default=None)
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides --params)")
    parser.add_argument("--columns", type=int, default=80, help="Terminal columns (default: 80)")
    parser.add_argument("--rows", type=int, default=24, help="Terminal rows (default: 24)")
    parser.add_argument("--out", type=str, default=None, help="Optional .npz export path")
    parser.add_argument("--save-params", type=str, default=None, help="Write the final params as JSON")
    parser.add_argument("--no-color", action="store_true", help="Print plain braille")
    return parser


def main():
    args = build_parser().parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    params = build_params(args)
    width, height = grid_size_for_terminal(args.columns, args.rows)
    sim = Simulation(params, width=width, height=height)

    print(f"Growing {params.particle_count} particles on {width}x{height} dots, seed={params.seed}")
    start_time = time.time()
    while not sim.is_complete():
        report = sim.advance(10_000)
        if report.exhausted:
            print("Grid saturated, stopping early")
            break
    elapsed_time = time.time() - start_time

    frame = sim.render()
    print("\n".join(frame.lines()) if args.no_color else frame.to_ansi())

    if args.out:
        utils.save_cluster_result(args.out, sim.to_result())
        print(f"   Cluster saved to: {args.out}")
    if args.save_params:
        utils.save_params(Path(args.save_params), sim.params)
        print(f"   Params saved to: {args.save_params}")

    print(f"\n✅ Done in {elapsed_time:.2f} seconds")
    print(f"   Particles stuck: {sim.particles_stuck} (+{sim.seed_cells} seed cells)")
    print(f"   Escaped: {sim.stats.escaped}, absorbed: {sim.stats.removed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
