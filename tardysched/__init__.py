"""Constrained single-machine tardiness scheduling.

Exports the job model, instance parsing and both search engines.
"""

from tardysched.evaluation import evaluate  # noqa: F401
from tardysched.exact import solve_exact  # noqa: F401
from tardysched.heuristic import solve_heuristic  # noqa: F401
from tardysched.models import INFEASIBLE, Job, JobSet, SolveResult  # noqa: F401
from tardysched.parser import MalformedInputError, parse_instance  # noqa: F401

__all__ = [
    "INFEASIBLE",
    "Job",
    "JobSet",
    "MalformedInputError",
    "SolveResult",
    "evaluate",
    "parse_instance",
    "solve_exact",
    "solve_heuristic",
]
