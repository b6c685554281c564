import argparse
import csv
import multiprocessing as mp
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from flipfive.daily import (  # noqa: E402
    archive_dates,
    clamp_to_today,
    generate_daily,
    today_utc,
)
from flipfive.evaluation.metrics import summarize_run  # noqa: E402
from flipfive.game import FlipFiveGame  # noqa: E402
from flipfive.strategies import (  # noqa: E402
    ChasingLights,
    LinearAlgebraMinWeight,
)

mp.freeze_support()

FIELDNAMES = [
    "date",
    "strategy",
    "scrambles",
    "initial_on",
    "optimal",
    "solved",
    "presses_used",
    "excess",
    "time_ms",
]


def make_strategy(name: str, params=None):
    name = name.lower()
    if name == "linear_algebra_minweight":
        return LinearAlgebraMinWeight()
    if name == "chasing_lights":
        return ChasingLights(
            tie_break=(params or {}).get("tie_break", "min_weight")
        )
    raise ValueError(f"Unknown strategy: {name}")


def parse_strategies(cfg_strats):
    """Parse strategy configs from YAML."""
    parsed = []
    for item in cfg_strats:
        if isinstance(item, str):
            parsed.append({"name": item, "params": {}})
        elif isinstance(item, dict) and "name" in item:
            parsed.append(
                {"name": item["name"], "params": item.get("params") or {}}
            )
        else:
            raise ValueError(f"Invalid strategy spec: {item}")
    return parsed


def survey_day(job):
    """Play one day's puzzle with every configured strategy."""
    date = job["date"]
    budget_T = job["budget_T"]
    puzzle = generate_daily(date)

    rows = []
    for spec in job["strategies"]:
        game = FlipFiveGame(puzzle.start_bits, date=date)
        strat = make_strategy(spec["name"], spec["params"])
        strat.reset(game.n, params=spec["params"])

        start_time = time.perf_counter()
        _, actions, counts = game.run(strat, T=budget_T)
        time_ms = (time.perf_counter() - start_time) * 1000

        summary = summarize_run(actions, counts, budget_T, game.optimal)
        rows.append(
            {
                "date": date,
                "strategy": spec["name"],
                "scrambles": len(puzzle.scramble),
                "initial_on": counts[0],
                "optimal": "" if game.optimal is None else game.optimal,
                "solved": int(summary.solved),
                "presses_used": summary.presses,
                "excess": "" if summary.excess is None else summary.excess,
                "time_ms": time_ms,
            }
        )
    return rows


def run_pool(jobs, writer, workers):
    """Run jobs in parallel and write results as they complete."""
    ctx = mp.get_context("spawn")
    total_jobs = len(jobs)
    done = 0
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        futures = [ex.submit(survey_day, j) for j in jobs]
        for fut in as_completed(futures):
            writer.writerows(fut.result())
            done += 1
            elapsed = time.time() - start_time
            print(
                f"\r[progress] {done}/{total_jobs} days ({done / total_jobs:>6.1%}) | "
                f"elapsed: {elapsed:.1f}s",
                end="",
                flush=True,
            )
    print()


def main(argv=None):
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser(
        description="Survey daily Flip Five puzzles over a date range."
    )
    ap.add_argument(
        "--config",
        default=str(ROOT / "configs" / "survey_daily.yaml"),
    )
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=default_workers, help="Number of workers"
    )
    args = ap.parse_args(argv)

    with open(args.config, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)["survey"]

    range_days = int(cfg.get("range_days", 30))
    end_date = clamp_to_today(str(cfg.get("end_date") or today_utc()))
    budget_T = int(cfg.get("budget_T", 25))
    strat_specs = parse_strategies(cfg["strategies"])
    out_dir = Path(cfg.get("output_dir", "results/survey"))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / f"survey_{end_date}.csv")

    jobs = [
        {"date": d, "budget_T": budget_T, "strategies": strat_specs}
        for d in archive_dates(range_days, today=end_date)
    ]

    print(
        f"\nSurveying {len(jobs)} days ending {end_date} with {args.workers} workers...\n"
    )
    start_time = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        if args.workers <= 1:
            for job in jobs:
                writer.writerows(survey_day(job))
        else:
            run_pool(jobs, writer, workers=args.workers)

    elapsed = time.time() - start_time
    print(f"\nDone in {elapsed:.1f}s")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    main()
