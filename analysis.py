#!/usr/bin/env python3
"""
AutoAGL flight log analysis script.

Reads an autoagl_log.csv produced by sim.world.World and computes:

- Basic counts:
    * Fraction of time the altimeter spent in ASL / AGL
    * Number of touchdowns and crashes

- Stability:
    * Automatic vs pilot switches
    * Shortest gap between two switches
    * Automatic switches that broke the dwell time (should be 0)
    * Switches per minute of flight (chatter)

- Timeliness:
    * For every touchdown: was the altimeter in AGL on the way down,
      and how long before touchdown did it switch to AGL

- Overrides:
    * Pilot locks, locks cleared by the recommendation catching up,
      fraction of time spent locked

Usage:
    python analysis.py logs/autoagl_log.csv
    python analysis.py logs/autoagl_log.csv --out-csv summary.csv
"""

import argparse
import csv
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import config


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass
class LogRow:
    time_s: float
    scenario: str
    situation: str
    clearance_m: float
    vertical_mps: float
    displayed: str
    locked: str
    recommended: str
    events: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

def load_log(path: str) -> List[LogRow]:
    """
    Load the flight log CSV into a list of LogRow objects, sorted by time.
    """
    rows: List[LogRow] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for r in reader:
            try:
                events = r["events"].strip()
                rows.append(
                    LogRow(
                        time_s=float(r["time_s"]),
                        scenario=r["scenario"],
                        situation=r["situation"],
                        clearance_m=float(r["clearance_m"]),
                        vertical_mps=float(r["vertical_mps"]),
                        displayed=r["displayed"],
                        locked=r["locked"],
                        recommended=r["recommended"],
                        events=events.split("|") if events else [],
                    )
                )
            except KeyError as e:
                raise RuntimeError(f"Missing expected column in CSV: {e}")
    rows.sort(key=lambda x: x.time_s)
    return rows


def _step_durations(rows: List[LogRow]) -> List[float]:
    """Time covered by each row (gap to the next row; last row reuses the previous gap)."""
    dts: List[float] = []
    for i, r in enumerate(rows):
        if i + 1 < len(rows):
            dts.append(max(0.0, rows[i + 1].time_s - r.time_s))
        else:
            dts.append(dts[-1] if dts else 0.0)
    return dts


def _switch_events(rows: List[LogRow]):
    """Yield (time_s, by_user, mode) for every altimeter change in the log."""
    for r in rows:
        for ev in r.events:
            kind, _, mode = ev.partition(":")
            if kind in ("AUTO", "USER"):
                yield r.time_s, kind == "USER", mode


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def compute_basic_counts(rows: List[LogRow]) -> Dict[str, float]:
    dts = _step_durations(rows)
    total = sum(dts)
    agl = sum(dt for r, dt in zip(rows, dts) if r.displayed == "AGL")
    asl = sum(dt for r, dt in zip(rows, dts) if r.displayed == "ASL")
    touchdowns = sum(1 for r in rows if "TOUCHDOWN" in r.events)
    crashes = sum(1 for r in rows if "CRASH" in r.events)

    return {
        "samples": len(rows),
        "duration_s": total,
        "frac_agl": agl / total if total > 0 else 0.0,
        "frac_asl": asl / total if total > 0 else 0.0,
        "touchdowns": touchdowns,
        "crashes": crashes,
    }


def compute_stability(rows: List[LogRow]) -> Dict[str, float]:
    """
    Counts switches and checks the dwell rule: an automatic switch must come
    at least MINIMUM_DWELL_S after the previous switch of any kind.
    """
    auto = user = violations = 0
    min_gap = float("inf")
    last_t: Optional[float] = None

    for t, by_user, _ in _switch_events(rows):
        if by_user:
            user += 1
        else:
            auto += 1
        if last_t is not None:
            gap = t - last_t
            min_gap = min(min_gap, gap)
            # small tolerance for the log's rounding
            if not by_user and gap < config.MINIMUM_DWELL_S - 1e-3:
                violations += 1
        last_t = t

    duration = compute_basic_counts(rows)["duration_s"] if rows else 0.0
    per_min = (auto + user) / (duration / 60.0) if duration > 0 else 0.0

    return {
        "auto_switches": auto,
        "user_switches": user,
        "min_switch_gap_s": min_gap,
        "dwell_violations": violations,
        "switches_per_min": per_min,
    }


def compute_timeliness(rows: List[LogRow]) -> Dict[str, float]:
    """
    For each touchdown, look at the frame before it: was the altimeter in AGL,
    and how long had it been in AGL.
    """
    landings = 0
    in_agl = 0
    leads: List[float] = []
    agl_since: Optional[float] = None

    for i, r in enumerate(rows):
        before = rows[i - 1] if i > 0 else None
        if before is not None and before.displayed != "AGL":
            agl_since = None
        if r.displayed == "AGL" and agl_since is None:
            agl_since = r.time_s

        if "TOUCHDOWN" in r.events or "CRASH" in r.events:
            landings += 1
            if before is not None and before.displayed == "AGL":
                in_agl += 1
                start = agl_since if agl_since is not None else before.time_s
                leads.append(r.time_s - start)

    return {
        "landings": landings,
        "landed_in_agl": in_agl,
        "agl_rate": in_agl / landings if landings else 0.0,
        "mean_agl_lead_s": sum(leads) / len(leads) if leads else 0.0,
        "min_agl_lead_s": min(leads) if leads else 0.0,
    }


def compute_overrides(rows: List[LogRow]) -> Dict[str, float]:
    dts = _step_durations(rows)
    total = sum(dts)
    locked_time = sum(dt for r, dt in zip(rows, dts) if r.locked not in ("NONE", ""))
    locks = sum(1 for _, by_user, _ in _switch_events(rows) if by_user)
    cleared = sum(1 for r in rows if "CLEAR" in r.events)
    disagreements = sum(
        1 for r in rows
        if r.locked not in ("NONE", "") and r.recommended and r.recommended != r.locked
    )

    return {
        "user_locks": locks,
        "locks_cleared": cleared,
        "frac_locked": locked_time / total if total > 0 else 0.0,
        "locked_disagreement_samples": disagreements,
    }


# ---------------------------------------------------------------------------
# Main / reporting
# ---------------------------------------------------------------------------

def print_block(title: str, metrics: Dict[str, float]) -> None:
    print(title)
    for k in sorted(metrics.keys()):
        print(f"{k:28s}: {metrics[k]}")
    print()


def write_metrics_csv(path: str, blocks: Dict[str, Dict[str, float]]) -> None:
    """
    Flatten named metric blocks into a single-row CSV for easy comparison
    across runs (e.g., projection on vs off).
    """
    flat: Dict[str, float] = {}
    for block_name, metrics in blocks.items():
        for k, v in metrics.items():
            flat[f"{block_name}.{k}"] = v

    fieldnames = sorted(flat.keys())
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerow(flat)


def main():
    parser = argparse.ArgumentParser(description="Analyze AutoAGL flight log CSV.")
    parser.add_argument("csv_path", help="Path to autoagl_log.csv")
    parser.add_argument(
        "--out-csv",
        help="Optional path to write a single-row CSV summary of all metrics.",
        default=None,
    )
    args = parser.parse_args()

    rows = load_log(args.csv_path)

    blocks = {
        "basic": compute_basic_counts(rows),
        "stability": compute_stability(rows),
        "timeliness": compute_timeliness(rows),
        "overrides": compute_overrides(rows),
    }

    print_block("=== Basic Counts ===", blocks["basic"])
    print_block("=== Stability Metrics ===", blocks["stability"])
    print_block("=== Timeliness Metrics ===", blocks["timeliness"])
    print_block("=== Override Metrics ===", blocks["overrides"])

    if args.out_csv:
        write_metrics_csv(args.out_csv, blocks)
        print(f"Metric summary written to: {args.out_csv}")


if __name__ == "__main__":
    main()
