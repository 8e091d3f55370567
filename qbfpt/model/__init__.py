"""Model components: instance data, solutions, evaluators, triples and exact solver"""

from .instance import QBFInstance
from .solution import Solution, empty_solution
from .result import SearchResult
from .evaluator import QBFEvaluator, PenalizedQBFEvaluator
from .triples import generate_triples, is_solution_feasible
from .instance_generator import generate_instance, save_instance, load_instance, generate_instance_set

__all__ = ['QBFInstance', 'Solution', 'empty_solution', 'SearchResult',
           'QBFEvaluator', 'PenalizedQBFEvaluator',
           'generate_triples', 'is_solution_feasible',
           'generate_instance', 'save_instance', 'load_instance', 'generate_instance_set']
