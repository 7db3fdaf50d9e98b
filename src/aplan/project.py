from pydantic import ConfigDict, Field, field_serializer, field_validator
from typing import Any, Dict, List

from .errors import MemberNotFound
from .logs import get_logger
from .models import BaseYAMLModel, Member
from .store import Tasks
from .wbs import WBS, IdLike

log = get_logger("project")

class Project(BaseYAMLModel):
    """A project document: the task store plus the members working on it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tasks: Tasks = Field(description="Every task of the work breakdown structure, keyed by task id")
    members: Dict[str, Member] = Field(
        default_factory=dict,
        description="Members of the project keyed by name"
    )

    @field_validator('tasks', mode='before')
    @classmethod
    def load_tasks(cls, v: Any):
        if isinstance(v, dict):
            return Tasks.from_dict(v)
        return v

    @field_serializer('tasks')
    def dump_tasks(self, v: Tasks) -> Dict[str, Dict[str, Any]]:
        return v.to_dict()

    @classmethod
    def new(cls, name: str) -> 'Project':
        return cls(tasks=Tasks.new(name))

    @property
    def name(self) -> str:
        return self.tasks.name

    @property
    def wbs(self) -> WBS:
        return WBS(self.tasks)

    # --- Members ---

    def list_members(self) -> List[Member]:
        return [self.members[name] for name in sorted(self.members)]

    def get_member(self, name: str) -> Member:
        try:
            return self.members[name]
        except KeyError:
            raise MemberNotFound(name) from None

    def add_member(self, name: str) -> Member:
        member = self.members.setdefault(name, Member(name=name))
        log.debug(f"Added member {name}")
        return member

    def remove_member(self, name: str) -> Member:
        """Remove a member, unassigning them from every task first."""
        member = self.get_member(name)
        wbs = self.wbs
        for task in self.tasks:
            if task.is_leaf and name in task.members:
                wbs.unassign_member(task.id, name)
        del self.members[name]
        log.info(f"Removed member {name}")
        return member

    def assign(self, task_id: IdLike, name: str):
        self.get_member(name)
        self.wbs.assign_member(task_id, name)

    def unassign(self, task_id: IdLike, name: str):
        self.get_member(name)
        self.wbs.unassign_member(task_id, name)
