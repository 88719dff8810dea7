#!/usr/bin/env python3
import argparse, json, logging, sys
from pathlib import Path

from almanac_pipeline import (
    AlmanacError, PipelineConfig, load_config_yaml, AlmanacPipeline, plot_stage_intervals,
    load_almanac, save_result_json
)

def build_argparser():
    ap = argparse.ArgumentParser(description="Almanac lowest-location resolver")
    ap.add_argument("almanac", type=str, help="Almanac text file (seeds + seven maps)")
    ap.add_argument("--config", type=str, default="", help="YAML config file (optional)")
    ap.add_argument("--strategy", choices=["split", "brute", "vectorized"], default=None,
                    help="Override range resolution strategy")
    ap.add_argument("--no-cache", action="store_true", help="Disable the locality cache in brute scans")
    ap.add_argument("--max-brute-values", type=int, default=0,
                    help="Refuse to enumerate more than N seed values (0 = config value)")
    ap.add_argument("--output-dir", type=str, default="", help="Directory to store summary.json and plots")
    ap.add_argument("--plot", action="store_true", help="Show the stage interval plot interactively")
    ap.add_argument("--save-plots", action="store_true", help="Save the stage interval plot in output-dir")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap

def main(argv=None):
    args = build_argparser().parse_args(argv)

    try:
        cfg = load_config_yaml(args.config) if args.config else PipelineConfig()
    except AlmanacError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.strategy:
        cfg.resolver.strategy = args.strategy
    if args.no_cache:
        cfg.resolver.use_cache = False
    if args.max_brute_values > 0:
        cfg.resolver.max_brute_values = args.max_brute_values

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        almanac = load_almanac(args.almanac)
        res = AlmanacPipeline(cfg).run(almanac)
    except AlmanacError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    out_dir = Path(args.output_dir) if args.output_dir else None
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        save_result_json(res, out_dir / "summary.json")

    if (args.save_plots and out_dir is not None) or args.plot:
        plot_stage_intervals(
            res.stage_intervals,
            title="Seed ranges through each domain",
            show=args.plot,
            save_path=str(out_dir / "plot_stage_intervals.png") if args.save_plots and out_dir else None,
        )

    print(json.dumps(res.summary()))
    return 0

if __name__ == "__main__":
    sys.exit(main())
