"""Tabu Search for the QBF with prohibited triples (time- or iteration-limited)."""

import copy
import time
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

import numpy as np

from ..model.instance import QBFInstance
from ..model.evaluator import QBFEvaluator, PenalizedQBFEvaluator
from ..model.result import SearchResult
from ..model.solution import Solution, empty_solution
from ..model.triples import generate_triples, is_solution_feasible, Triple
from .candidates import update_candidate_list
from .construction import grasp_constructor
from .intensification import Intensificator, update_recency, select_fixed_variables
from .neighborhoods import best_improving_move, first_improving_move, apply_move, make_tabu_list
from .penalty import PenaltySchedule

STRATEGIES = {
    'best': best_improving_move,
    'first': first_improving_move,
}


@dataclass
class TabuConfig:
    """
    Tabu Search parameters.

    Attributes:
        tenure: Tabu tenure; the tabu list holds 2 * tenure entries
        iterations: Iteration budget of the main loop
        strategy: Local search strategy, 'best' or 'first' improving
        oscillation: Penalize triple violations instead of pruning candidates
        intensificator: Intensification parameters, or None to disable it
        time_limit: Optional wall-clock budget in seconds
        seed: Seed of the random generator used by the construction
        use_triples: Generate the prohibited triples (False means T is empty)
        initial_penalty: Starting penalty in oscillation mode
        verbose: Print progress
    """
    tenure: int = 20
    iterations: int = 10000
    strategy: str = 'best'
    oscillation: bool = False
    intensificator: Optional[Intensificator] = None
    time_limit: Optional[float] = None
    seed: int = 0
    use_triples: bool = True
    initial_penalty: float = 1.0
    verbose: bool = False

    def validate(self) -> None:
        if self.tenure < 1:
            raise ValueError(f"tenure must be >= 1, got {self.tenure}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {self.strategy!r}, expected one of {sorted(STRATEGIES)}")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit must be non-negative, got {self.time_limit}")
        if self.initial_penalty <= 0:
            raise ValueError(f"initial_penalty must be positive, got {self.initial_penalty}")


class TabuSearch:
    """
    Tabu Search engine.

    Runs a semi-greedy construction followed by a loop of single moves
    (insertion, removal or exchange) chosen by the configured strategy, with a
    FIFO tabu list, aspiration by objective, optional intensification by
    fixing recently used variables, and either hard pruning or strategic
    oscillation to handle the prohibited triples.

    All search state (current solution, incumbent, tabu list, recency, fixed
    set, penalty) is owned by the instance and mutated between iterations.
    """

    def __init__(
        self,
        instance: QBFInstance,
        config: Optional[TabuConfig] = None,
        evaluator: Optional[QBFEvaluator] = None,
    ):
        config = config if config is not None else TabuConfig()
        config.validate()
        instance.validate()

        self.instance = instance
        self.config = config
        self.domain_size = instance.n

        if evaluator is None:
            if config.oscillation:
                evaluator = PenalizedQBFEvaluator(instance, penalty=config.initial_penalty)
            else:
                evaluator = QBFEvaluator(instance)
        if config.oscillation and not isinstance(evaluator, PenalizedQBFEvaluator):
            raise ValueError("strategic oscillation requires a PenalizedQBFEvaluator")
        self.evaluator = evaluator
        self.penalized = isinstance(evaluator, PenalizedQBFEvaluator)

        self.triples: Set[Triple] = generate_triples(instance.n) if config.use_triples else set()
        # Stable scan order for the candidate manager
        self._triple_list: List[Triple] = sorted(self.triples)

        self._move = STRATEGIES[config.strategy]
        self.intensificator: Optional[Intensificator] = (
            copy.copy(config.intensificator) if config.intensificator is not None else None
        )
        self.reset()

    def reset(self) -> None:
        """Restore the run state of a fresh engine (seeded stream, penalty, counters)."""
        self.rng = np.random.default_rng(self.config.seed)
        self.penalty: Optional[PenaltySchedule] = (
            PenaltySchedule(value=self.config.initial_penalty) if self.config.oscillation else None
        )
        if self.penalty is not None:
            self.evaluator.set_penalty(self.penalty.value)
        if self.penalized:
            self.evaluator.set_violations(np.zeros(self.domain_size, dtype=int))
        if self.intensificator is not None:
            self.intensificator.running = False
            self.intensificator.remaining_it = 0

        self.current: Solution = empty_solution()
        self.incumbent: Solution = empty_solution()
        self.tabu_list = make_tabu_list(self.config.tenure)
        self.fixed: Set[int] = set()
        self.recency = np.zeros(self.domain_size, dtype=int)
        self.consecutive_failures = 0
        self.last_feasible_iteration = 0
        self.iteration = 0
        self.intensifications = 0

    def _log(self, msg: str) -> None:
        if self.config.verbose:
            print(msg)

    def is_solution_feasible(self, sol: Solution) -> bool:
        """Hard pruning keeps every solution feasible; oscillation must check."""
        if not self.config.oscillation:
            return True
        return is_solution_feasible(sol, self._triple_list)

    def refresh_candidates(self) -> List[int]:
        """Recompute the candidate list, handing violation counts to the evaluator."""
        cl = update_candidate_list(
            self.current,
            self.domain_size,
            self._triple_list,
            oscillation=self.config.oscillation,
            fixed=self.fixed,
        )
        if self.penalized:
            self.evaluator.set_violations(cl.violations)
        return cl.candidates

    def constructive_heuristic(self) -> Solution:
        self.current = grasp_constructor(
            self.evaluator,
            self._triple_list,
            oscillation=self.config.oscillation,
            rng=self.rng,
        )
        return self.current

    def neighborhood_move(self) -> None:
        candidates = self.refresh_candidates()
        move = self._move(
            self.current,
            self.incumbent.cost,
            candidates,
            self.evaluator,
            self.tabu_list,
            self.fixed,
        )
        apply_move(self.current, move, self.tabu_list, self.evaluator)

    def start_intensification(self) -> None:
        """
        Restart from the incumbent with its most recently used variables fixed.
        """
        self.intensificator.start()
        self.intensifications += 1
        self.current = self.incumbent.copy()
        self.evaluator.evaluate(self.current)
        self.fixed = select_fixed_variables(self.recency, self.incumbent, self.domain_size)
        self.recency[:] = 0

    def end_intensification(self) -> None:
        self.intensificator.running = False
        self.intensificator.remaining_it = 0
        self.fixed.clear()

    def solve(self) -> SearchResult:
        """
        Run the search.

        Returns:
            SearchResult holding the best feasible solution found
        """
        start_time = time.perf_counter()
        time_limit = self.config.time_limit

        self.reset()
        self.evaluator.evaluate(self.incumbent)

        self.constructive_heuristic()
        if self.is_solution_feasible(self.current) and self.current.cost < self.incumbent.cost:
            self.incumbent = self.current.copy()
        self._log(f"Constructed solution: {self.current}")

        cost_log = [self.incumbent.cost]
        self.last_feasible_iteration = 0
        executed = 0

        for it in range(self.config.iterations):
            self.iteration = it

            # Time-based stopping
            if time_limit is not None:
                elapsed = time.perf_counter() - start_time
                if elapsed >= time_limit:
                    self._log(f"Stopping Tabu due to time limit ({elapsed:.2f}s >= {time_limit:.2f}s)")
                    break

            if self.intensificator is not None and self.intensificator.should_start(self.consecutive_failures):
                self.consecutive_failures = 0
                self.start_intensification()
                self._log(f"Intensification started at: {it} (fixed {len(self.fixed)} variables)")

            if self.penalty is not None:
                self.evaluator.set_penalty(self.penalty.adjust(it, self.last_feasible_iteration))

            self.neighborhood_move()
            executed += 1

            feasible = self.is_solution_feasible(self.current)
            if feasible:
                self.last_feasible_iteration = it

            if feasible and self.current.cost < self.incumbent.cost:
                self.consecutive_failures = 0
                self.incumbent = self.current.copy()
                self._log(f"(Iter. {it}) BestSol = {self.incumbent}")
            else:
                self.consecutive_failures += 1

            if self.intensificator is not None:
                update_recency(self.recency, self.current)
                if self.intensificator.running and self.intensificator.tick():
                    self.end_intensification()
                    self._log(f"Intensification ended at: {it}")

            cost_log.append(self.incumbent.cost)

            if self.config.verbose and (it + 1) % 1000 == 0:
                penalty = f", penalty={self.penalty.value:g}" if self.penalty is not None else ""
                print(
                    f"Iteration {it+1}/{self.config.iterations}: best_cost={self.incumbent.cost:.2f}, "
                    f"current_cost={self.current.cost:.2f}{penalty}"
                )

        runtime = time.perf_counter() - start_time
        return SearchResult(
            best=self.incumbent.copy(),
            cost=self.incumbent.cost,
            runtime=runtime,
            iterations=executed,
            cost_log=cost_log,
            intensifications=self.intensifications,
            final_penalty=self.penalty.value if self.penalty is not None else None,
        )


def tabu_search(
    instance: QBFInstance,
    tenure: int = 20,
    max_iters: int = 10000,
    strategy: str = 'best',
    oscillation: bool = False,
    intensificator: Optional[Intensificator] = None,
    time_limit: Optional[float] = None,
    seed: int = 0,
    use_triples: bool = True,
    verbose: bool = False,
) -> Tuple[float, Solution, List[float]]:
    """
    Tabu Search over binary assignments (single-start, time-limited).

    Stops when either `time_limit` (if provided) or `max_iters` is reached.

    Args:
        instance: Problem instance
        tenure: Tabu tenure (the tabu list holds 2 * tenure entries)
        max_iters: Iteration budget
        strategy: 'best' (best-improving) or 'first' (first-improving)
        oscillation: Strategic oscillation with an adaptive penalty instead of
            pruning candidates that would complete a prohibited triple
        intensificator: Intensification parameters (None disables it)
        time_limit: Wall-clock budget in seconds
        seed: Random seed for the construction
        use_triples: Whether to generate the prohibited triples
        verbose: Print progress

    Returns:
        Tuple of (best_cost, best_solution, cost_log), costs in the
        minimization framing (-x^T A x)
    """
    config = TabuConfig(
        tenure=tenure,
        iterations=max_iters,
        strategy=strategy,
        oscillation=oscillation,
        intensificator=intensificator,
        time_limit=time_limit,
        seed=seed,
        use_triples=use_triples,
        verbose=verbose,
    )
    result = TabuSearch(instance, config).solve()
    return result.cost, result.best, result.cost_log
