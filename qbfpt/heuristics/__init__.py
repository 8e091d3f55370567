"""Heuristic algorithms: Tabu Search, semi-greedy construction, and search components"""

from .tabu import tabu_search, TabuSearch, TabuConfig
from .construction import grasp_constructor
from .candidates import update_candidate_list, CandidateList
from .intensification import Intensificator, update_recency, select_fixed_variables
from .neighborhoods import best_improving_move, first_improving_move, apply_move, make_tabu_list, Move, FAKE
from .penalty import PenaltySchedule

__all__ = [
    'tabu_search', 'TabuSearch', 'TabuConfig',
    'grasp_constructor',
    'update_candidate_list', 'CandidateList',
    'Intensificator', 'update_recency', 'select_fixed_variables',
    'best_improving_move', 'first_improving_move', 'apply_move', 'make_tabu_list', 'Move', 'FAKE',
    'PenaltySchedule',
]
