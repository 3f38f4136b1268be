from adaptevo.evolution.mutation.operators import clone, crossover, mutate
from adaptevo.evolution.mutation.parent_selector import (
    ParentSelector,
    TournamentParentSelector,
    select_parents,
    tournament_select,
)

__all__ = [
    "ParentSelector",
    "TournamentParentSelector",
    "clone",
    "crossover",
    "mutate",
    "select_parents",
    "tournament_select",
]
