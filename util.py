import os
import time
import numpy as np
import dill as pickle

import sat_solver

# misc


def flip(rs, p=0.5): return rs.random_sample() < p


def timeit(f, *args, **kwargs):
    start_time = time.time()
    result = f(*args, **kwargs)
    end_time = time.time()
    return result, end_time - start_time

# numpy


def random_cnf_text(n_vars, n_clauses, k=3, seed=None, prefix="x"):
    """
    Random k-CNF formula in clause text format, one clause per line.
    Each clause uses k distinct variables with independently chosen signs.
    """
    assert 1 <= k <= n_vars, f"k={k} must be in [1, n_vars={n_vars}]"
    rs = np.random.RandomState(seed)
    lines = []
    for _ in range(n_clauses):
        idxs = rs.choice(n_vars, size=k, replace=False) + 1
        tokens = [("~" if flip(rs) else "") + f"{prefix}{i}" for i in idxs]
        lines.append(" ".join(tokens))
    return "\n".join(lines)


def random_instance(n_vars, n_clauses, k=3, seed=None):
    return sat_solver.parse_instance(random_cnf_text(n_vars, n_clauses, k, seed)).unwrap()

# persistence


def save_instance(instance, path):
    # dill keeps the whole decision chain, parents included
    with open(path, "wb") as f:
        pickle.dump(instance, f)


def load_instance(path):
    with open(path, "rb") as f:
        return pickle.load(f)

# paths


def config_root_dir(): return os.path.join(os.path.dirname(os.path.abspath(__file__)), "configs")
def solve_config_dir(file_name): return os.path.join(config_root_dir(), "solve", file_name)
