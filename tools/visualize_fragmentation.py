"""
Contiguous Allocation Simulator - Occupancy Visualizer

Replays a command script and writes a Matplotlib heatmap of the address space
after every command: rows are time, columns are binned addresses, and each
owned block is drawn with its own shade. Compactions are marked as horizontal
lines.

How to run (recommended, from repo root):
    python -m tools.visualize_fragmentation --script scripts/sample.txt --policy best --out out_fragmentation.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script:
# (python -m tools.visualize_fragmentation already works without this,
#  but this makes `python tools/visualize_fragmentation.py ...` work too.)
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from control.dispatcher import CommandDispatcher
from memory.allocator import ContiguousAllocator
from memory.fragmentation import compute_metrics
from policy.fit import FitPolicy
from workload.script import ScriptError, load_script


def render_state(alloc: ContiguousAllocator, width: int) -> np.ndarray:
    """
    Return a 1D occupancy row over the address space, binned to 'width'.
    Free bins are 0; owned bins carry a shade in (0, 1] derived from the pid.
    """
    cap = alloc.total_size
    bins = np.zeros(width, dtype=np.float32)
    scale = cap / width

    for pid, base, limit in alloc.snapshot():
        if pid is None:
            continue
        a = int(base / scale)
        b = int((base + limit - 1) / scale)
        a = max(0, min(width - 1, a))
        b = max(0, min(width - 1, b))
        bins[a : b + 1] = 0.35 + 0.65 * ((pid * 37) % 97) / 96.0

    return bins


def replay(script_path: str, policy, width: int, every: int = 1):
    """Run the script, returning (frames, compaction frame indexes, allocator)."""
    script = load_script(script_path)
    alloc = ContiguousAllocator(script.total_size, policy or script.policy)
    disp = CommandDispatcher(alloc)

    frames: list[np.ndarray] = []
    compact_marks: list[int] = []
    for i, ev in enumerate(disp.run(script.commands), start=1):
        if getattr(ev.result, "compacted", False):
            compact_marks.append(len(frames))
        if every <= 1 or (i % every == 0):
            frames.append(render_state(alloc, width))
    return frames, compact_marks, alloc


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--script", required=True, help="Path to the command script")
    ap.add_argument("--out", default="out_fragmentation.png", help="Output image file")
    ap.add_argument("--policy", choices=["first", "best", "worst"], default=None,
                    help="Override the script's fit mode")
    ap.add_argument("--width", type=int, default=140, help="Heatmap width (bins)")
    ap.add_argument("--every", type=int, default=1, help="Record every N commands")
    args = ap.parse_args(argv)

    script_path = Path(args.script)
    if not script_path.exists():
        raise SystemExit(f"Script not found: {script_path}")

    policy = FitPolicy.from_name(args.policy) if args.policy else None
    try:
        frames, compact_marks, alloc = replay(str(script_path), policy, args.width, args.every)
    except OSError as e:
        raise SystemExit(f"Unable to read script: {script_path} ({e.strerror or e})")
    except ScriptError as e:
        raise SystemExit(f"Bad script {script_path}: {e}")

    if not frames:
        raise SystemExit("No frames captured. Check the script and --every.")

    H = np.stack(frames, axis=0)  # (time, width)

    fig = plt.figure(figsize=(10.5, 4.6))
    ax = fig.add_subplot(111)
    ax.imshow(H, aspect="auto", interpolation="nearest", vmin=0.0, vmax=1.0)
    ax.set_title(f"Address Space Occupancy ({alloc.policy.short}-fit)")
    ax.set_xlabel("address (binned)")
    ax.set_ylabel("time (frames)")

    for t in compact_marks:
        ax.axhline(t, linewidth=1)

    m = compute_metrics(alloc)
    caption = (
        f"Final fragmentation: LFE={m.lfe}, holes={m.hole_count}, "
        f"external_frag={m.external_frag:.3f}, entropy={m.entropy:.3f}, "
        f"utilization={m.utilization:.3f}"
    )
    fig.text(0.01, 0.01, caption, fontsize=9)

    fig.tight_layout()
    out_path = Path(args.out)
    fig.savefig(str(out_path), dpi=220)
    plt.close(fig)
    print(f"Wrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
