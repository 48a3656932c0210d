#!/usr/bin/env python3
"""
Command line front end: solve a clause file and print the assignment.

    python solve_cnf.py formula.txt --table raw --show_formula

Exit status follows the SAT competition convention: 10 for SATISFIABLE,
20 for UNSATISFIABLE, 1 if the input could not be read or parsed.
"""

import argparse
import json
import os
import sys

import util
from sat_solver import (BacktrackingSolver, format_instance, format_raw_table,
                        format_solution_table, parse_instance_from_file,
                        reconstruct)

EXIT_SAT = 10
EXIT_UNSAT = 20
EXIT_ERROR = 1


def main(opts, cfg):
    outcome = parse_instance_from_file(opts.filename)
    if not outcome.ok:
        print(f"c {outcome.error.message}", file=sys.stderr)
        return EXIT_ERROR
    instance = outcome.instance

    print(f"c {instance.num_variables} variables, {len(instance.clauses)} clauses")
    if cfg['show_formula']:
        print(f"c {format_instance(instance)}")

    solver = BacktrackingSolver(instance)
    if cfg['verify']:
        result, elapsed = util.timeit(solver.solve)
    else:
        terminal, elapsed = util.timeit(solver.search)
        result = None if terminal is None else reconstruct(terminal)
    print(f"c {solver.n_instances} instances derived, {solver.n_pruned} pruned, "
          f"{elapsed:.3f}s")

    if cfg['save_path'] is not None and solver.terminal is not None:
        util.save_instance(solver.terminal, cfg['save_path'])
        print(f"c terminal instance saved to {cfg['save_path']}")

    if opts.infopath is not None:
        with open(opts.infopath, "a") as f:
            f.write(f"{opts.filename}\t{'SAT' if result is not None else 'UNSAT'}\t"
                    f"{solver.n_instances}\t{elapsed:.6f}\n")

    if result is None:
        print("s UNSATISFIABLE")
        return EXIT_UNSAT

    print("s SATISFIABLE")
    if cfg['table'] == "pretty":
        print(format_solution_table(instance, result))
    elif cfg['table'] == "raw":
        print(format_raw_table(instance, result))
    return EXIT_SAT


def load_config(cfg_name):
    cfg_path = cfg_name if os.path.isfile(cfg_name) else util.solve_config_dir(cfg_name)
    with open(cfg_path, "r") as f:
        return json.load(f)


def init(argv=None):
    parser = argparse.ArgumentParser(description='A backtracking CNF SAT solver')
    parser.add_argument("filename", type=str,
                        help='Path to a clause file, one clause per line, e.g. "X ~Y Z"')
    parser.add_argument("--cfg_name", help='config file name under configs/solve, or a path',
                        type=str, default="default.json")
    parser.add_argument("--table", type=str, default=None,
                        choices=["pretty", "raw", "none"])
    parser.add_argument("--show_formula", action='store_true', default=False)
    parser.add_argument("--no_verify", action='store_true', default=False)
    parser.add_argument("--save_path", type=str, default=None,
                        help='where to pickle the terminal instance (dill)')
    parser.add_argument("--infopath", type=str, default=None,
                        help='append a one-line run summary to this file')
    opts = parser.parse_args(argv)

    cfg = load_config(opts.cfg_name)
    cfg.setdefault('table', "pretty")
    cfg.setdefault('show_formula', False)
    cfg.setdefault('verify', True)
    cfg.setdefault('save_path', None)

    if opts.table is not None:
        cfg['table'] = opts.table
        print("c table is changed to ", opts.table)

    if opts.show_formula:
        cfg['show_formula'] = True
        print("c show_formula is changed to ", True)

    if opts.no_verify:
        cfg['verify'] = False
        print("c verify is changed to ", False)

    if opts.save_path is not None:
        cfg['save_path'] = opts.save_path
        print("c save_path is changed to ", opts.save_path)

    return main(opts, cfg=cfg)


if __name__ == "__main__":
    sys.exit(init())
