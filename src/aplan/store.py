"""
Tasks - the flat store holding every node of a work breakdown structure.

Tasks are keyed by their TaskId; the root (empty id) always exists and
carries the project name. Parent/child relations are never stored as
references, they are derived from the ids.
"""
from typing import Any, Dict, Iterator, List

from .errors import NoNextSibling, NoPrevSibling, TaskNotFound
from .models import Task, TaskId, TaskStatus

class Tasks:
    """Associative store of Task records keyed by TaskId."""

    def __init__(self, store: Dict[TaskId, Task] = None):
        self._store: Dict[TaskId, Task] = store if store is not None else {}

    @classmethod
    def new(cls, name: str) -> 'Tasks':
        root_id = TaskId.root()
        return cls({root_id: Task(id=root_id, name=name)})

    @property
    def root(self) -> Task:
        # the root is inserted on creation and can never be removed
        return self._store[TaskId.root()]

    @property
    def name(self) -> str:
        return self.root.name

    def get(self, task_id: TaskId) -> Task:
        try:
            return self._store[task_id]
        except KeyError:
            raise TaskNotFound(task_id) from None

    def get_mut(self, task_id: TaskId) -> Task:
        """Same record as `get`; kept separate so call sites read as writes."""
        return self.get(task_id)

    def insert(self, task_id: TaskId, task: Task):
        self._store[task_id] = task

    def remove(self, task_id: TaskId) -> Task:
        try:
            return self._store.pop(task_id)
        except KeyError:
            raise TaskNotFound(task_id) from None

    def contains(self, task_id: TaskId) -> bool:
        return task_id in self._store

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._store.values()))

    def ids(self) -> List[TaskId]:
        return sorted(self._store)

    def next_sibling(self, task_id: TaskId) -> Task:
        sibling_id = task_id.next_sibling()
        if sibling_id not in self._store:
            raise NoNextSibling(task_id)
        return self._store[sibling_id]

    def prev_sibling(self, task_id: TaskId) -> Task:
        sibling_id = task_id.prev_sibling()
        if sibling_id not in self._store:
            raise NoPrevSibling(task_id)
        return self._store[sibling_id]

    # --- Leaf views ---

    def leaf_tasks(self) -> List[Task]:
        """Leaves of the tree; the root is the project itself and never counts."""
        return [task for task in self._store.values() if task.is_leaf and not task.id.is_root]

    def todo_tasks(self) -> List[Task]:
        return [task for task in self.leaf_tasks() if task.status != TaskStatus.DONE]

    def in_progress_tasks(self) -> List[Task]:
        return [task for task in self.leaf_tasks() if task.status == TaskStatus.IN_PROGRESS]

    def done_tasks(self) -> List[Task]:
        return [task for task in self.leaf_tasks() if task.status == TaskStatus.DONE]

    # --- Snapshots ---

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot keyed by the textual task id, in tree order."""
        return {str(task_id): self._store[task_id].model_dump(mode='json') for task_id in self.ids()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> 'Tasks':
        store = {}
        for key, record in data.items():
            task_id = TaskId.parse(key)
            task = Task.model_validate(record)
            if task.id != task_id:
                raise ValueError(f"Task stored under '{key}' claims id '{task.id}'")
            store[task_id] = task
        if TaskId.root() not in store:
            raise ValueError("Task store has no root task")
        return cls(store)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tasks):
            return NotImplemented
        return self._store == other._store

    def __repr__(self) -> str:
        return f"Tasks(name={self.name!r}, size={len(self)})"
