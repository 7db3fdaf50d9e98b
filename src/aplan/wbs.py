"""
WBS - the hierarchy engine of a work breakdown structure.

Every mutation validates first and writes afterwards, so a failing call
leaves the store untouched. Between calls the following always hold:

* a trunk's planned value and actual cost equal the sums over its children
* a trunk is done exactly when all of its children are done
* the children of a task are numbered 1..num_children without gaps
"""
from typing import Callable, Iterable, Tuple, Union

from .errors import (
    CannotRemoveAssignedTask,
    CannotRemoveMemberFromTask,
    NoParent,
    TrunkCannotAddMember,
    TrunkCannotBeRemoved,
    TrunkCannotChangeCost,
    TrunkCannotChangeValue,
    TrunkCannotRemoveMember,
)
from .logs import get_logger
from .models import Task, TaskId, TaskStatus
from .store import Tasks

log = get_logger("wbs")

IdLike = Union[TaskId, str]

def as_task_id(task_id: IdLike) -> TaskId:
    """Accept either a TaskId or its dotted text form."""
    if isinstance(task_id, TaskId):
        return task_id
    return TaskId.parse(task_id)

class WBS:
    """Mutation and aggregation operations over a Tasks store."""

    def __init__(self, tasks: Tasks):
        self.tasks = tasks

    @classmethod
    def new(cls, name: str) -> 'WBS':
        return cls(Tasks.new(name))

    @property
    def name(self) -> str:
        return self.tasks.name

    def get(self, task_id: IdLike) -> Task:
        return self.tasks.get(as_task_id(task_id))

    def _apply_along_path(self, task_id: TaskId, func: Callable[[Task], None]):
        for path_id in task_id.ancestors_inclusive():
            func(self.tasks.get_mut(path_id))

    def _children_are_done(self, task: Task) -> bool:
        return all(self.tasks.get(child_id).status == TaskStatus.DONE for child_id in task.child_ids())

    def _refresh_status(self, task_id: TaskId):
        """Recompute done-ness bottom-up from `task_id` to the root."""
        for path_id in reversed(task_id.ancestors_inclusive()):
            task = self.tasks.get_mut(path_id)
            task.status = TaskStatus.DONE if self._children_are_done(task) else TaskStatus.IN_PROGRESS

    # --- Structure ---

    def add(self, parent_id: IdLike, name: str) -> Task:
        """
        Add a new leaf under `parent_id`, numbered after its last sibling.

        The new task starts in progress, so every ancestor is reopened. When
        the parent was a leaf, its figures and members move down to the new
        child so the parent keeps equalling the sum of its children.
        """
        parent_id = as_task_id(parent_id)
        parent = self.tasks.get_mut(parent_id)

        task_id = parent_id.new_child_id(parent.num_children + 1)
        task = Task(id=task_id, name=name)
        if parent.is_leaf:
            task.planned_value = parent.planned_value
            task.actual_cost = parent.actual_cost
            task.members = set(parent.members)

        parent.num_children += 1
        self.tasks.insert(task_id, task)

        def reopen(path_task: Task):
            path_task.status = TaskStatus.IN_PROGRESS

        self._apply_along_path(task_id, reopen)
        log.debug(f"Added task {task_id} '{name}'")
        return task

    def expand(self, pairs: Iterable[Tuple[IdLike, str]]) -> 'WBS':
        """Add several `(parent_id, name)` pairs in order."""
        for parent_id, name in pairs:
            self.add(parent_id, name)
        return self

    def remove(self, task_id: IdLike) -> Task:
        """
        Remove a leaf task and renumber its later siblings.

        Args:
            task_id: Id of the leaf to remove

        Returns:
            The removed record, with the figures it had before removal

        Raises:
            TaskNotFound, TrunkCannotBeRemoved, NoParent (root),
            CannotRemoveAssignedTask (members still assigned)
        """
        task_id = as_task_id(task_id)
        task = self.tasks.get(task_id)
        if task.is_trunk:
            log.warning(f"Refusing to remove trunk task {task_id}")
            raise TrunkCannotBeRemoved(task_id)
        if task_id.is_root:
            raise NoParent(task_id)
        if task.members:
            log.warning(f"Refusing to remove task {task_id} assigned to {task.members_str()}")
            raise CannotRemoveAssignedTask(task_id)

        removed = task.model_copy(deep=True)

        # take the task's contribution out of every ancestor
        self.set_actual_cost(task_id, 0.0)
        self.set_planned_value(task_id, 0.0)

        parent_id = task_id.parent()
        parent = self.tasks.get_mut(parent_id)
        sibling_ids = parent.child_ids()
        parent.num_children -= 1

        self.tasks.remove(task_id)

        # ascending order: each shifted id was vacated by the previous step
        layer = task_id.depth - 1
        for sibling_id in sibling_ids[task_id.child_index():]:
            self._shift_subtree(sibling_id, layer)

        log.info(f"Removed task {task_id} '{removed.name}'")
        return removed

    def _shift_subtree(self, task_id: TaskId, layer: int):
        """Move a task and all of its descendants one index down at `layer`."""
        task = self.tasks.remove(task_id)
        old_child_ids = task.child_ids()
        task.id = task_id.with_layer_shifted(layer, -1)
        self.tasks.insert(task.id, task)
        log.debug(f"Renumbered {task_id} -> {task.id}")

        for child_id in old_child_ids:
            self._shift_subtree(child_id, layer)

    # --- Figures ---

    def _leaf_for_update(self, task_id: TaskId, trunk_error) -> Tuple[Task, TaskId]:
        task = self.tasks.get_mut(task_id)
        if task.is_trunk:
            log.warning(f"Refusing to set figures directly on trunk task {task_id}")
            raise trunk_error(task_id)
        return task, task_id.parent()

    def set_actual_cost(self, task_id: IdLike, actual_cost: float):
        """Record the actual cost of a leaf; this is what marks work as done."""
        task_id = as_task_id(task_id)
        task, parent_id = self._leaf_for_update(task_id, TrunkCannotChangeCost)

        diff = actual_cost - task.actual_cost
        task.actual_cost = actual_cost

        def add_cost(path_task: Task):
            path_task.actual_cost += diff

        self._apply_along_path(parent_id, add_cost)
        self._refresh_status(task_id)
        log.debug(f"Set actual cost of {task_id} to {actual_cost}")

    def set_planned_value(self, task_id: IdLike, planned_value: float):
        task_id = as_task_id(task_id)
        task, parent_id = self._leaf_for_update(task_id, TrunkCannotChangeValue)

        diff = planned_value - task.planned_value
        task.planned_value = planned_value

        def add_value(path_task: Task):
            path_task.planned_value += diff

        self._apply_along_path(parent_id, add_value)
        log.debug(f"Set planned value of {task_id} to {planned_value}")

    # --- Members ---

    def assign_member(self, task_id: IdLike, name: str):
        """Assign a member to a leaf; ancestors list everyone working beneath them."""
        task_id = as_task_id(task_id)
        if self.tasks.get(task_id).is_trunk:
            raise TrunkCannotAddMember(task_id)

        def add_member(path_task: Task):
            path_task.members.add(name)

        self._apply_along_path(task_id, add_member)
        log.debug(f"Assigned {name} to {task_id}")

    def unassign_member(self, task_id: IdLike, name: str):
        task_id = as_task_id(task_id)
        task = self.tasks.get(task_id)
        if task.is_trunk:
            raise TrunkCannotRemoveMember(task_id)
        if name not in task.members:
            raise CannotRemoveMemberFromTask(task_id, name)

        task.members.discard(name)
        # an ancestor keeps the name while another child still carries it
        for path_id in reversed(task_id.ancestors_inclusive()[:-1]):
            ancestor = self.tasks.get_mut(path_id)
            if any(name in self.tasks.get(child_id).members for child_id in ancestor.child_ids()):
                break
            ancestor.members.discard(name)
        log.debug(f"Unassigned {name} from {task_id}")
