from __future__ import annotations
import argparse, logging
from typing import List, Optional
from control.dispatcher import CommandDispatcher
from memory.allocator import ContiguousAllocator
from memory.fragmentation import compute_metrics
from memory.outcomes import Outcome
from policy.fit import FitPolicy
from viz.ascii_map import render_map
from viz.report import format_snapshot
from workload.script import ScriptError, load_script

def build_parser() -> argparse.ArgumentParser:
    ap=argparse.ArgumentParser(description="Replay an allocation script against a contiguous allocator.")
    ap.add_argument('script', help="command script: fit mode line, total size line, then A/D/P commands")
    ap.add_argument('--policy', choices=['first','best','worst'], default=None,
                    help="override the fit mode given on the script's first line")
    ap.add_argument('--total-size', type=int, default=None,
                    help="override the address space size given on the script's second line")
    ap.add_argument('--summary', action='store_true', help="print a summary block after the run")
    ap.add_argument('--show-map', action='store_true', help="print an ASCII memory map with the summary")
    ap.add_argument('--width', type=int, default=80, help="memory map width in characters")
    ap.add_argument('-v', '--verbose', action='count', default=0,
                    help="log allocator decisions (-v info, -vv debug)")
    return ap

def main(argv: Optional[List[str]] = None):
    args=build_parser().parse_args(argv)
    logging.basicConfig(
        level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        script=load_script(args.script)
    except FileNotFoundError:
        raise SystemExit(f"Unable to find file: {args.script}")
    except OSError as e:
        raise SystemExit(f"Unable to read file: {args.script} ({e.strerror or e})")
    except ScriptError as e:
        raise SystemExit(f"Bad script {args.script}: {e}")

    policy=FitPolicy.from_name(args.policy) if args.policy else script.policy
    total=args.total_size if args.total_size is not None else script.total_size
    if total <= 0:
        raise SystemExit(f"--total-size must be positive, got {total}")

    alloc=ContiguousAllocator(total, policy)
    disp=CommandDispatcher(alloc)

    for ev in disp.run(script.commands):
        if ev.snapshot is not None:
            print(format_snapshot(ev.snapshot), end='')
        elif ev.duplicate:
            print(f"Pid {ev.command.pid} is already allocated, skipping line {ev.command.lineno}")
        elif ev.command.op=='alloc':
            res=ev.result
            if res.compacted:
                print("compacting\n")
            if res.outcome in (Outcome.UNSATISFIABLE, Outcome.INSUFFICIENT_TOTAL_SPACE):
                print(f"Not enough space to allocate pid: {res.pid}")

    if not args.summary:
        return

    st=disp.stats
    m=compute_metrics(alloc)
    print("="*72)
    print("Contiguous Allocation Simulator - Summary")
    print("="*72)
    print(f"Policy: {policy.short}   Script: {args.script}")
    print(f"Capacity: {alloc.total_size}  Used: {alloc.used()}  Free: {alloc.free_bytes()}  Processes: {len(alloc.procs)}")
    print(f"Events: alloc={st['alloc_events']} free={st['free_events']} print={st['print_events']}")
    print(f"Allocated: {st['allocated']}  Freed: {st['freed']}  Compactions: {st['compactions']}  Units moved: {st['moved']}")
    print(f"Failures: unsatisfiable={st['unsatisfiable']} insufficient={st['insufficient']} "
          f"unknown_free={st['unknown_free']} duplicate={st['rejected_duplicate']}")
    print("-"*72)
    print(f"Fragmentation: LFE={m.lfe} holes={m.hole_count} external_frag={m.external_frag:.3f} "
          f"entropy={m.entropy:.3f} utilization={m.utilization:.3f}")
    if args.show_map:
        print("-"*72)
        print("Memory map (ASCII):")
        print(render_map(alloc, args.width))
    print("="*72)

if __name__=='__main__':
    main()
