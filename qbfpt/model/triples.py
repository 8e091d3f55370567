"""Prohibited triples: deterministic generation and feasibility checks."""

from typing import Iterable, Set, Tuple

Triple = Tuple[int, int, int]

# Linear congruential parameters (pi1, pi2) for g(u) and h(u)
G_PARAMS = (131, 1031)
H_PARAMS = (193, 1093)


def _l(u: int, pi1: int, pi2: int, n: int) -> int:
    """l(u) = 1 + ((pi1 * (u - 1) + pi2) mod n)."""
    return 1 + ((pi1 * (u - 1) + pi2) % n)


def _g(u: int, n: int) -> int:
    l_res = _l(u, *G_PARAMS, n)
    if l_res == u:
        return 1 + (l_res % n)
    return l_res


def _h(u: int, g_res: int, n: int) -> int:
    l_res = _l(u, *H_PARAMS, n)
    if l_res == u or l_res == g_res:
        l_mod = 1 + (l_res % n)
        if l_mod == u or l_mod == g_res:
            return 1 + ((l_res + 1) % n)
        return l_mod
    return l_res


def generate_triples(n: int) -> Set[Triple]:
    """
    Generate the prohibited triple set T for a domain of size n.

    For every u in [1, n] the sorted triple (u, g(u), h(u)) is added to a set,
    so duplicates collapse and |T| <= n. Elements are 1-based.

    Args:
        n: Domain size

    Returns:
        Set of sorted 3-tuples. Empty when n < 3, since no three distinct
        indices exist.

    Raises:
        ValueError: if n < 1
    """
    if n < 1:
        raise ValueError(f"cannot generate triples for domain size {n}")
    if n < 3:
        return set()

    triples: Set[Triple] = set()
    for u in range(1, n + 1):
        g_res = _g(u, n)
        h_res = _h(u, g_res, n)
        triples.add(tuple(sorted((u, g_res, h_res))))
    return triples


def to_zero_based(triples: Iterable[Triple]) -> list:
    """Triples as sorted 0-based index tuples, in a stable order."""
    return sorted((a - 1, b - 1, c - 1) for a, b, c in triples)


def is_solution_feasible(solution: Iterable[int], triples: Iterable[Triple]) -> bool:
    """
    Check that no prohibited triple is fully selected.

    Args:
        solution: Selected 0-based indices
        triples: 1-based prohibited triples

    Returns:
        True if feasible
    """
    selected = set(solution)
    for e1, e2, e3 in triples:
        if e1 - 1 in selected and e2 - 1 in selected and e3 - 1 in selected:
            return False
    return True
