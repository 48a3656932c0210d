#!/usr/bin/env python3
"""
Backtracking SAT Solver

Decides satisfiability of CNF formulas written with named variables and,
when a formula is satisfiable, reconstructs a partial assignment from the
search tree.

Each variable is numbered 1..n in the order it is first seen by an instance.
A literal is the integer 2*x for the positive variable x and 2*x + 1 for its
negation, so for the table {"X": 1, "Y": 2}:

    2 -> "X"    3 -> "~X"    4 -> "Y"    5 -> "~Y"

A clause is the ascending list of its literals, e.g.
(~X or Y) = [3, 4].
"""

from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from tabulate import tabulate

NEGATION = "~"

Clause = List[int]
Table = Dict[str, int]
Assignment = Dict[str, bool]


class ErrorKind(Enum):
    PARSE = "parse"
    LITERAL_RANGE = "literal_range"
    FILE_READ = "file_read"


class SatSolverError(Exception):
    """Base class for the errors raised at the solver's parsing boundary."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(SatSolverError):
    """Malformed token or clause line."""

    kind = ErrorKind.PARSE

    prefix = "Error while parsing"

    def __init__(self, raw: str):
        super().__init__(f"{self.prefix}: {raw!r}")
        self.raw = raw


class ClauseParseError(ParseError):
    """A clause line could not be added to an instance."""

    prefix = "Error while parsing clause"


class LiteralRangeError(SatSolverError):
    kind = ErrorKind.LITERAL_RANGE

    def __init__(self, value: int, num_variables: int):
        super().__init__(
            f"Error while parsing literal: x not in [2, ..., {2 * num_variables + 1}], x={value} given."
        )
        self.value = value


class FileReadError(SatSolverError):
    kind = ErrorKind.FILE_READ

    def __init__(self, path: str):
        super().__init__(f"Error while parsing instance from file: {path}")
        self.path = path


class Value(Enum):
    """Value of a variable as reported to the user."""

    TRUE = "true"
    FALSE = "false"
    UNCONSTRAINED = "Any"

    @classmethod
    def of(cls, solution: Assignment, name: str) -> "Value":
        if name not in solution:
            return cls.UNCONSTRAINED
        return cls.TRUE if solution[name] else cls.FALSE

    def __str__(self) -> str:
        return self.value


# Literal encoding

def _split_token(token: str) -> Tuple[str, bool]:
    """Strip one leading negation marker: "~X" -> ("X", True)."""
    negated = token.startswith(NEGATION)
    return (token[len(NEGATION):] if negated else token), negated


def encode(table: Table, token: str) -> int:
    """
    Encode a token such as "X" or "~X" as a literal, registering its
    variable in `table` if it has not been seen before.

    Raises:
        ParseError: if the variable name is empty.
    """
    name, negated = _split_token(token)
    if not name:
        raise ParseError(token)
    if name not in table:
        table[name] = len(table) + 1
    return table[name] << 1 | negated


def decode(table: Table, literal: int) -> str:
    """
    Decode a literal back into its token according to `table`.

    Raises:
        LiteralRangeError: if `literal` is not in [2, 2n + 1].
    """
    if not 2 <= literal <= 2 * len(table) + 1:
        raise LiteralRangeError(literal, len(table))
    # Indices are handed out in insertion order, so the (x-1)th key has index x.
    name = list(table)[(literal >> 1) - 1]
    return NEGATION + name if literal & 1 else name


class Decision(NamedTuple):
    """Edge from a derived instance back to the instance it was derived from."""

    parent: "Instance"
    variable: str
    value: bool


class Instance:
    """
    A CNF formula: a variable table, an ordered list of clauses and, for
    instances derived during search, the decision that produced it.
    """

    def __init__(self):
        self.variables_table: Table = {}
        self.clauses: List[Clause] = []
        self.decision: Optional[Decision] = None

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Instance":
        instance = cls()
        instance.build_from_lines(lines)
        return instance

    def add_clause(self, line: str) -> None:
        """
        Parse a clause such as "X ~Y Z" and append it.

        Raises:
            ClauseParseError: if any token is malformed. The instance is
                left untouched.
        """
        try:
            clause = self._encode_tokens(line.split())
        except SatSolverError as e:
            raise ClauseParseError(line) from e
        self.clauses.append(clause)

    def build_from_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            if line.strip():
                self.add_clause(line)

    def _encode_tokens(self, tokens: Iterable[str]) -> Clause:
        # New names are only registered once the whole clause has encoded.
        table = dict(self.variables_table)
        clause = sorted(encode(table, token) for token in tokens)
        self.variables_table = table
        return clause

    def decode(self, literal: int) -> str:
        return decode(self.variables_table, literal)

    @property
    def variables(self) -> List[str]:
        return list(self.variables_table)

    @property
    def num_variables(self) -> int:
        return len(self.variables_table)

    @property
    def parent(self) -> Optional["Instance"]:
        return self.decision.parent if self.decision is not None else None

    def is_empty(self) -> bool:
        """True when no clause is left, i.e. the instance is satisfied."""
        return not self.clauses

    def has_empty_clause(self) -> bool:
        return any(not clause for clause in self.clauses)

    def __repr__(self) -> str:
        return f"Instance({format_instance(self)!r})"


def lookup_clause(instance: Instance, line: str) -> Clause:
    """
    Parse a clause against the variables already known to `instance`
    without registering new ones.

    Raises:
        ParseError: on an unknown or empty variable name.
    """
    clause = []
    for token in line.split():
        name, negated = _split_token(token)
        if name not in instance.variables_table:
            raise ParseError(token)
        clause.append(instance.variables_table[name] << 1 | negated)
    return sorted(clause)


# Simplification and search

def simplify(instance: Instance, variable: str, value: bool) -> Instance:
    """
    Apply the assignment `variable = value` to `instance`.

    Clauses satisfied by the assignment are dropped, the falsified literal is
    removed from the remaining clauses that contain it, and everything else
    is copied. The result gets a fresh variable table, so its literals do not
    line up with those of `instance`.

    E.g.
        instance = parse_instance("X Y ~Z\\n~X ~Y\\n~X W ~Z").unwrap()
        simplify(instance, "X", True)  ->  (~Y) (~Z W)
    """
    index = instance.variables_table[variable]
    satisfied = index << 1 | (not value)
    falsified = satisfied ^ 1

    new_instance = Instance()
    for clause in instance.clauses:
        if satisfied in clause:
            continue
        if falsified in clause:
            # Can leave an empty clause behind, which marks a dead branch.
            clause = [lit for lit in clause if lit >> 1 != index]
        tokens = [instance.decode(lit) for lit in clause]
        new_instance.clauses.append(new_instance._encode_tokens(tokens))
    return new_instance


class BacktrackingSolver:
    """
    Exhaustive depth-first search over instances derived by `simplify`.

    The branching variable is always the first variable of the popped
    instance's table and True is tried before False. Both children are built
    before either is explored, so the False child is popped before any
    descendant of the True child.
    """

    def __init__(self, instance: Instance):
        self.instance = instance
        self.terminal: Optional[Instance] = None
        self.n_instances = 0
        self.n_pruned = 0

    def search(self) -> Optional[Instance]:
        """
        Returns:
            The first derived instance with no clauses left, or None if every
            branch ends in an empty clause.
        """
        self.n_instances = 0
        self.n_pruned = 0
        self.terminal = None

        root = self.instance
        if root.is_empty():
            self.terminal = root
            return root
        if root.has_empty_clause():
            return None

        stack = [root]
        while stack:
            parent = stack.pop()
            variable = next(iter(parent.variables_table))

            for value in (True, False):
                child = simplify(parent, variable, value)
                child.decision = Decision(parent, variable, value)
                self.n_instances += 1

                if child.is_empty():
                    self.terminal = child
                    return child
                elif not child.has_empty_clause():
                    stack.append(child)
                else:
                    self.n_pruned += 1
        return None

    def solve(self) -> Optional[Assignment]:
        """
        Search and reconstruct the satisfying assignment.

        Returns:
            A mapping from variable name to value if SAT, None if UNSAT.
            Variables missing from the mapping may take either value.
        """
        terminal = self.search()
        if terminal is None:
            return None

        result = reconstruct(terminal)
        if not is_satisfied_by(self.instance, result):
            raise RuntimeError("Invalid solution found!")
        return result


def search(root: Instance) -> Optional[Instance]:
    return BacktrackingSolver(root).search()


def reconstruct(terminal: Instance) -> Assignment:
    """Collect the decisions on the path from `terminal` back to the root."""
    solution: Assignment = {}
    decision = terminal.decision
    while decision is not None:
        solution[decision.variable] = decision.value
        decision = decision.parent.decision
    return solution


def sat(instance: Instance) -> Optional[Assignment]:
    """
    Solve `instance`.

    E.g.
        sat(parse_instance("X Y ~Z\\n~X ~Y\\n~X W ~Z").unwrap())
        -> {"Y": True, "X": False}
    """
    return BacktrackingSolver(instance).solve()


def is_satisfiable(instance: Instance) -> bool:
    return search(instance) is not None


# Checking assignments

def literal_satisfied(instance: Instance, literal: int, assignment: Assignment) -> bool:
    """True if `literal` evaluates to true under `assignment`. Unassigned literals do not."""
    token = instance.decode(literal)
    name = token[len(NEGATION):] if literal & 1 else token
    if name not in assignment:
        return False
    return assignment[name] != bool(literal & 1)


def clause_satisfied(instance: Instance, clause: Clause, assignment: Assignment) -> bool:
    return any(literal_satisfied(instance, lit, assignment) for lit in clause)


def satisfied_clauses(instance: Instance, assignment: Assignment) -> List[Clause]:
    """
    Return only the clauses of `instance` satisfied by `assignment`.

    E.g.
        a = {"X": True, "Y": False, "Z": True, "W": False}
        instance = parse_instance("X Y ~Z\\n~X ~Y\\n~X W ~Z").unwrap()
        satisfied_clauses(instance, a) = [[2, 4, 7], [3, 5]]
    """
    return [c for c in instance.clauses if clause_satisfied(instance, c, assignment)]


def is_satisfied_by(instance: Instance, assignment: Assignment) -> bool:
    return all(clause_satisfied(instance, c, assignment) for c in instance.clauses)


# Text boundary

class ParseOutcome(NamedTuple):
    """Result of parsing formula text: either an instance or an error."""

    instance: Optional[Instance]
    error: Optional[SatSolverError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Instance:
        if self.error is not None:
            raise self.error
        return self.instance


def parse_instance(text: str) -> ParseOutcome:
    """
    Parse a formula with one clause per line, e.g.

        X Y ~Z
        ~X ~Y
        ~X W ~Z
    """
    try:
        return ParseOutcome(Instance.from_lines(text.splitlines()))
    except SatSolverError as e:
        return ParseOutcome(None, e)


def read_instance_file(path: str) -> Instance:
    """
    Raises:
        FileReadError: if the file cannot be read.
        ClauseParseError: if one of its lines is malformed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(str(path)) from e
    return Instance.from_lines(text.splitlines())


def parse_instance_from_file(path: str) -> ParseOutcome:
    try:
        return ParseOutcome(read_instance_file(path))
    except SatSolverError as e:
        return ParseOutcome(None, e)


# Rendering

def clause_to_string(instance: Instance, clause: Clause) -> str:
    """
    E.g. for the table {"X": 1, "Y": 2, "Z": 3, "W": 4}:
        [2, 3, 4] -> "X ~X Y"
        [2, 7, 8] -> "X ~Z W"
    """
    return " ".join(instance.decode(lit) for lit in clause)


def format_instance(instance: Instance) -> str:
    return " ".join(f"({clause_to_string(instance, c)})" for c in instance.clauses)


def solution_table(instance: Instance, solution: Assignment) -> List[Tuple[str, Value]]:
    return [(name, Value.of(solution, name)) for name in instance.variables]


def format_solution_table(instance: Instance, solution: Assignment) -> str:
    rows = [(name, str(value)) for name, value in solution_table(instance, solution)]
    return tabulate(rows, headers=["Variable", "Value"], tablefmt="pretty", stralign="left")


def format_raw_table(instance: Instance, solution: Assignment) -> str:
    """
    E.g.
        X : Any
        Y : false
        Z : false
        W : Any
    """
    return "\n".join(f"{name} : {value}" for name, value in solution_table(instance, solution))


if __name__ == "__main__":
    print("Backtracking SAT Solver")
    print("=" * 50)

    for text in ["A ~B ~C\n~D E F", "A\n~A", "X Y\n~X\n~Y", "A"]:
        instance = parse_instance(text).unwrap()
        print(f"\n{format_instance(instance)}")
        result = sat(instance)
        if result is not None:
            print("SAT")
            print(format_solution_table(instance, result))
        else:
            print("UNSAT")
