"""Priority score recomputation hook.

No formula combines importance and urgency yet; the default scorer keeps
whatever score a task already has. Callers may pass their own scorer.
"""

from typing import Callable, Iterable, List, Optional

from mlotasks.models.task import Task

Scorer = Callable[[Task], float]


def keep_score(task: Task) -> float:
    """Default scorer: leaves `computed_score` unchanged."""
    return task.computed_score


def recompute_scores(tasks: Iterable[Task], scorer: Optional[Scorer] = None) -> List[Task]:
    """Return the tasks with `computed_score` set from `scorer`.

    Tasks whose score does not change are returned as the same objects.
    """
    scorer = scorer or keep_score
    result: List[Task] = []
    for task in tasks:
        score = scorer(task)
        if score == task.computed_score:
            result.append(task)
        else:
            result.append(task.model_copy(update={"computed_score": score}))
    return result
