import pytest

from knapsack_planner.models import Task


def make_task(task_id, importance, time, **kwargs) -> Task:
    """Build a task with a generated name"""
    kwargs.setdefault("name", f"Task {task_id}")
    return Task(id=task_id, importance=importance, time=time, **kwargs)


@pytest.fixture
def example_tasks():
    """Three tasks where the two shorter ones beat the long one"""
    return [
        make_task(1, 10, 60),
        make_task(2, 20, 30),
        make_task(3, 30, 30),
    ]
