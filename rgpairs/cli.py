"""
Command line front end.

Usage:
  rgpairs run -a mypkg.merge:MergePairing graph1.json graph2.json
  rgpairs run -a mypkg.merge:MergePairing graphs/*.json --out results/
  rgpairs validate -a mypkg.merge:MergePairing -b mypkg.ppp:PropagateAndPair graph.json
  rgpairs compare run_a.tables.json run_b.tables.json
  rgpairs plot run_a.tables.json -o diagram.png
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Dict, List, Optional

from .compare import compare_diagrams
from .extract import count_loops, extract
from .graph import load_graph_json
from .harness import any_failed, cross_validate, iter_batch
from .pairing import resolve_object
from .serialize import load_tables, save_tables, to_csv

BANNER = """
   ###################################################################################
   Propagate and pair: A single-pass approach to critical point pairing in reeb graphs
   International Symposium on Visual Computing, Springer, Cham, 2019
   Junyi Tu, Mustafa Hajij, and Paul Rosen

   Usage:
      > rgpairs run -a <module:Algorithm> <file1> <file2> ... <fileN>
"""


def _loader(spec: Optional[str]):
    return load_graph_json if spec is None else resolve_object(spec)


def _stem(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def _check_unique_stems(paths: List[str]) -> None:
    seen: Dict[str, str] = {}
    for path in paths:
        stem = _stem(path)
        if stem in seen and seen[stem] != path:
            raise ValueError(f"inputs {seen[stem]} and {path} would both write {stem}.csv")
        seen[stem] = path


def cmd_run(args: argparse.Namespace) -> int:
    if not args.inputs:
        print(BANNER)
        return 0
    if not args.algorithm:
        print("error: --algorithm is required when inputs are given", file=sys.stderr)
        return 2

    if args.out:
        _check_unique_stems(args.inputs)
        os.makedirs(args.out, exist_ok=True)

    results = []
    for path, outcome in iter_batch(args.inputs, args.algorithm, loader=_loader(args.loader), verbose=args.verbose):
        results.append((path, outcome))
        print(path)
        if outcome.ok:
            sys.stdout.write(to_csv(outcome.diagram))
        else:
            print(f"[FAIL] {path}: {outcome.error}", file=sys.stderr)
        print(flush=True)

        if args.out and outcome.ok:
            stem = _stem(path)
            with open(os.path.join(args.out, f"{stem}.csv"), "w", encoding="utf-8", newline="\n") as f:
                f.write(to_csv(outcome.diagram))
            save_tables(os.path.join(args.out, f"{stem}.tables.json"), outcome.tables)

    if args.out:
        summary_path = os.path.join(args.out, "summary.json")
        with open(summary_path, "w", encoding="utf-8") as f:
            json.dump([o.as_dict() for _, o in results], f, indent=2)
        print(f"Wrote {len(results)} result(s) to {args.out}/", file=sys.stderr)

    if args.legacy_exit:
        return 0
    return 1 if any_failed(results) else 0


def cmd_validate(args: argparse.Namespace) -> int:
    loader = _loader(args.loader)
    failed = False
    for path in args.inputs:
        report = cross_validate(path, args.algorithm, args.algorithm_b, loader=loader, verbose=args.verbose)
        print(report.summary())
        if report.comparison is not None:
            for line in report.comparison.report():
                print(line)
        failed = failed or not report.ok
    return 1 if failed else 0


def cmd_compare(args: argparse.Namespace) -> int:
    tables_a = load_tables(args.tables_a)
    tables_b = load_tables(args.tables_b)
    result = compare_diagrams(tables_a, tables_b, symmetric=not args.one_way)
    loops_a, loops_b = count_loops(tables_a), count_loops(tables_b)
    for line in result.report():
        print(line)
    if loops_a != loops_b:
        print(f"  error == loop count {loops_a} != {loops_b}")
    ok = result.equivalent and loops_a == loops_b
    print(
        f"{'EQUIVALENT' if ok else 'DIFFERENT'}: {result.checked_pairs} pairs, "
        f"{result.checked_essential} essential, {len(result.mismatches)} mismatch(es), loops {loops_a}/{loops_b}"
    )
    return 0 if ok else 1


def cmd_plot(args: argparse.Namespace) -> int:
    from .plot import save_diagram_plot

    diagram = extract(load_tables(args.tables))
    out = args.out or f"{_stem(args.tables)}.png"
    save_diagram_plot(diagram, out, title=args.title or _stem(args.tables), use_real=not args.normalized)
    print(f"Wrote: {out}", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rgpairs", description="Persistence diagram extraction and validation for paired graphs")
    sub = ap.add_subparsers(dest="command")

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--loader", default=None,
                       help="Graph loader as module:attr (default: JSON vertices/edges loader)")
        p.add_argument("--verbose", "-v", action="store_true", help="Show progress and timings on stderr")

    p_run = sub.add_parser("run", help="Pair each input and print its persistence diagram as CSV")
    p_run.add_argument("inputs", nargs="*", help="Graph files")
    p_run.add_argument("--algorithm", "-a", help="Pairing algorithm as module:attr")
    p_run.add_argument("--out", "-o", default=None, help="Also write CSV, tables JSON and summary.json here")
    p_run.add_argument("--legacy-exit", action="store_true", help="Always exit 0, even if inputs failed")
    add_common(p_run)
    p_run.set_defaults(func=cmd_run)

    p_val = sub.add_parser("validate", help="Check that two algorithms pair every input identically")
    p_val.add_argument("inputs", nargs="+", help="Graph files")
    p_val.add_argument("--algorithm", "-a", required=True, help="First pairing algorithm (module:attr)")
    p_val.add_argument("--algorithm-b", "-b", required=True, help="Second pairing algorithm (module:attr)")
    add_common(p_val)
    p_val.set_defaults(func=cmd_validate)

    p_cmp = sub.add_parser("compare", help="Compare two saved tables files")
    p_cmp.add_argument("tables_a")
    p_cmp.add_argument("tables_b")
    p_cmp.add_argument("--one-way", action="store_true", help="Only check A's pairs against B")
    p_cmp.set_defaults(func=cmd_compare)

    p_plot = sub.add_parser("plot", help="Render the persistence diagram of a saved tables file")
    p_plot.add_argument("tables")
    p_plot.add_argument("--out", "-o", default=None, help="Output image (default: <tables stem>.png)")
    p_plot.add_argument("--title", default=None)
    p_plot.add_argument("--normalized", action="store_true", help="Plot normalized instead of real values")
    p_plot.set_defaults(func=cmd_plot)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.command is None:
        print(BANNER)
        return 0
    try:
        return args.func(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
