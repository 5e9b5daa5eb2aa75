from .fastforward import FastForward, Outcome, resolve_target
from .fastforward import select_branches, classify, apply_update
from .repository import Repository, open_repository

__all__ = [
    'FastForward',
    'Outcome',
    'resolve_target',
    'select_branches',
    'classify',
    'apply_update',
    'Repository',
    'open_repository',
]
