"""
Reproducible task execution.

Every task receives its own ``numpy.random.Generator`` spawned from
``SeedSequence(seed)`` at the task's index, so the draws a task sees
depend only on ``(seed, number of tasks, task index)``. Running with one
core or many therefore gives identical results, and the global numpy
random state is never touched.
"""

from __future__ import annotations

# =====================
# Standard library
# =====================
import logging
from typing import Any, Callable, List, Optional, Sequence, Union

# =====================
# Third-party
# =====================
import numpy as np
from joblib import Parallel, delayed

# =====================
# Custom classes and functions
# =====================
from mlchains.utils.errors import MLChainsError, TrainingFailure, ValidationError

logger = logging.getLogger(__name__)

Task = Callable[[np.random.Generator], Any]
SeedLike = Union[int, np.random.SeedSequence, None]


def spawn_generators(seed: SeedLike, n_tasks: int) -> List[np.random.Generator]:
    """One independent generator per task, or unseeded ones when ``seed`` is None."""
    if seed is None:
        return [np.random.default_rng() for _ in range(n_tasks)]

    if not isinstance(seed, np.random.SeedSequence):
        seed = int(seed)
        # SeedSequence only takes non-negative entropy; the sign goes in a second word
        seed = np.random.SeedSequence([abs(seed), int(seed < 0)])
    return [np.random.default_rng(child) for child in seed.spawn(n_tasks)]


def draw_seed(rng: np.random.Generator) -> int:
    """Integer seed for a nested executor call, drawn from the caller's stream."""
    return int(rng.integers(0, 2**32 - 1))


def _run_one(task: Task, rng: np.random.Generator, index: int) -> Any:
    try:
        return task(rng)
    except MLChainsError:
        raise
    except Exception as exc:
        raise TrainingFailure(f"Task {index} failed: {exc!r}", task_index=index) from exc


def run_tasks(tasks: Sequence[Task], cores: int = 1, seed: SeedLike = None) -> List[Any]:
    """
    Run ``tasks`` and return their results in task order.

    ``cores == 1`` runs on the calling thread; more cores dispatch to a
    joblib process pool. The first failure aborts the call and no partial
    results are returned.
    """
    if cores < 1:
        raise ValidationError("Cores must be a positive value")

    tasks = list(tasks)
    generators = spawn_generators(seed, len(tasks))

    if cores == 1 or len(tasks) <= 1:
        logger.debug("Running %d tasks sequentially", len(tasks))
        return [_run_one(task, rng, i) for i, (task, rng) in enumerate(zip(tasks, generators))]

    n_jobs = min(cores, len(tasks))
    logger.debug("Running %d tasks on %d workers", len(tasks), n_jobs)
    return Parallel(n_jobs=n_jobs)(
        delayed(_run_one)(task, rng, i) for i, (task, rng) in enumerate(zip(tasks, generators))
    )
