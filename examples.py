#!/usr/bin/env python3
"""
Advanced examples for the Backtracking SAT Solver
"""

from sat_solver import (BacktrackingSolver, Instance, format_instance,
                        format_raw_table, format_solution_table, parse_instance, sat)


def example_3_coloring():
    """
    Graph 3-coloring problem.

    Given a graph, can we color each vertex with one of 3 colors
    such that no two adjacent vertices have the same color?

    Graph: Triangle (3 vertices, all connected)
    This is satisfiable.
    """
    print("\n" + "="*60)
    print("Example: Graph 3-Coloring (Triangle)")
    print("="*60)

    # vK_cJ means vertex K has color J
    vertices = ["v1", "v2", "v3"]
    colors = ["red", "green", "blue"]
    edges = [("v1", "v2"), ("v1", "v3"), ("v2", "v3")]

    instance = Instance()

    # Each vertex must have at least one color
    for v in vertices:
        instance.add_clause(" ".join(f"{v}_{c}" for c in colors))

    # Each vertex has at most one color
    for v in vertices:
        for i, c1 in enumerate(colors):
            for c2 in colors[i + 1:]:
                instance.add_clause(f"~{v}_{c1} ~{v}_{c2}")

    # Adjacent vertices have different colors
    for a, b in edges:
        for c in colors:
            instance.add_clause(f"~{a}_{c} ~{b}_{c}")

    result = sat(instance)

    coloring = {}
    if result is not None:
        print("SAT - 3-coloring exists!")
        print("\nColoring:")
        for v in vertices:
            for c in colors:
                if result.get(f"{v}_{c}", False):
                    coloring[v] = c
                    print(f"  Vertex {v}: {c}")
    else:
        print("UNSAT - No 3-coloring exists")
    return coloring


def example_sudoku_cell():
    """
    Mini Sudoku: Single cell must have value 1-4, but not conflicting.
    Demonstrates encoding a constraint satisfaction problem.
    """
    print("\n" + "="*60)
    print("Example: Mini Sudoku Cell (1-4)")
    print("="*60)

    lines = ["is1 is2 is3 is4"]
    for i in range(1, 5):
        for j in range(i + 1, 5):
            lines.append(f"~is{i} ~is{j}")
    # value must be 2 or 3 (from other cells)
    lines.append("is2 is3")

    instance = parse_instance("\n".join(lines)).unwrap()
    result = sat(instance)

    if result is None:
        print("UNSAT")
        return None

    print("SAT - Valid assignment exists!")
    print(format_raw_table(instance, result))
    value = next(i for i in range(1, 5) if result.get(f"is{i}", False))
    print(f"  Cell value: {value}")
    return value


def example_search_statistics():
    """
    Show how much of the search tree is visited for a formula with several
    solutions, and which one the fixed branching order picks.
    """
    print("\n" + "="*60)
    print("Example: Search Statistics")
    print("="*60)

    instance = parse_instance("A ~B ~C\n~D E F").unwrap()
    print(f"\nFormula: {format_instance(instance)}")

    solver = BacktrackingSolver(instance)
    result = solver.solve()

    print(f"Derived instances: {solver.n_instances}, pruned: {solver.n_pruned}")
    print(format_solution_table(instance, result))
    return result


def example_pigeonhole():
    """
    Pigeonhole principle: n+1 pigeons in n holes.
    This is a classic UNSAT problem.
    """
    print("\n" + "="*60)
    print("Example: Pigeonhole Principle (4 pigeons, 3 holes)")
    print("="*60)

    n_pigeons = 4
    n_holes = 3

    instance = Instance()

    # Each pigeon must be in at least one hole
    for p in range(n_pigeons):
        instance.add_clause(" ".join(f"p{p}h{h}" for h in range(n_holes)))

    # At most one pigeon per hole
    for h in range(n_holes):
        for p1 in range(n_pigeons):
            for p2 in range(p1 + 1, n_pigeons):
                instance.add_clause(f"~p{p1}h{h} ~p{p2}h{h}")

    print(f"\n{len(instance.clauses)} clauses generated")

    result = sat(instance)

    if result is not None:
        print("SAT - Assignment found (unexpected!)")
    else:
        print("UNSAT - Cannot fit 4 pigeons in 3 holes (as expected)")
    return result


if __name__ == "__main__":
    print("\nBacktracking SAT Solver - Advanced Examples")
    print("="*60)

    example_search_statistics()
    example_3_coloring()
    example_sudoku_cell()
    example_pigeonhole()

    print("\n" + "="*60)
    print("All examples completed!")
    print("="*60)
