from __future__ import annotations
import argparse
import subprocess
import sys
import re
from pathlib import Path

PY = sys.executable  # respects venv if activated, otherwise uses current python
RUN_SIM = str(Path(__file__).resolve().parent / "run_sim.py")

POLICIES = ["first", "best", "worst"]

PATTERNS = {
    "allocated": re.compile(r"Allocated:\s+(\d+)"),
    "freed": re.compile(r"Freed:\s+(\d+)"),
    "compactions": re.compile(r"Compactions:\s+(\d+)"),
    "moved": re.compile(r"Units moved:\s+(\d+)"),
    "unsatisfiable": re.compile(r"unsatisfiable=(\d+)"),
    "insufficient": re.compile(r"insufficient=(\d+)"),
    "used": re.compile(r"Used:\s+(\d+)"),
    "lfe": re.compile(r"Fragmentation: LFE=(\d+)"),
    "holes": re.compile(r"holes=(\d+)"),
    "external_frag": re.compile(r"external_frag=([0-9\.]+)"),
}

def run(script: str, policy: str, total_size=None) -> str:
    cmd = [PY, RUN_SIM, script, "--policy", policy, "--summary"]
    if total_size is not None:
        cmd += ["--total-size", str(total_size)]
    return subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True)

def parse(out: str):
    def get(key, default=None):
        # the summary block comes last; snapshot lines never match these patterns
        m = PATTERNS[key].search(out)
        return m.group(1) if m else default
    return {
        "allocated": int(get("allocated", 0)),
        "freed": int(get("freed", 0)),
        "compactions": int(get("compactions", 0)),
        "moved": int(get("moved", 0)),
        "unsatisfiable": int(get("unsatisfiable", 0)),
        "insufficient": int(get("insufficient", 0)),
        "used": int(get("used", 0)),
        "lfe": int(get("lfe", 0)),
        "holes": int(get("holes", 0)),
        "external_frag": float(get("external_frag", 0.0)),
    }

def main(argv=None):
    ap = argparse.ArgumentParser(description="Compare fit policies on one allocation script.")
    ap.add_argument("script")
    ap.add_argument("--total-size", type=int, default=None)
    args = ap.parse_args(argv)

    rows = []
    for policy in POLICIES:
        out = run(args.script, policy, args.total_size)
        rows.append((policy, parse(out)))

    header = ["policy","allocated","freed","compactions","moved","unsat","insuff","used","LFE","holes","ext_frag"]
    print("="*110)
    print(f"Contiguous Allocation - Policy Comparison ({args.script})")
    print("="*110)
    print("{:<8} {:>9} {:>6} {:>11} {:>8} {:>6} {:>7} {:>8} {:>8} {:>6} {:>8}".format(*header))
    for policy, m in rows:
        print("{:<8} {:>9} {:>6} {:>11} {:>8} {:>6} {:>7} {:>8} {:>8} {:>6} {:>8.3f}".format(
            policy, m["allocated"], m["freed"], m["compactions"], m["moved"], m["unsatisfiable"],
            m["insufficient"], m["used"], m["lfe"], m["holes"], m["external_frag"]
        ))
    print("="*110)
    print("Tip: add --show-map to a single run_sim.py invocation for a visual memory map.")
    print(f"  python run_sim.py {args.script} --policy best --summary --show-map")

if __name__ == "__main__":
    main()
