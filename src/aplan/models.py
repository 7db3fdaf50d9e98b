from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from enum import Enum
from functools import total_ordering
from typing import Iterable, List, Set, Tuple, Type, TypeVar, Union
import re
import json
import yaml

from .errors import BadTaskIdString, NoChildIndex, NoNextSibling, NoParent, NoPrevSibling

MAX_INDEX = 2 ** 32 - 1

M = TypeVar('M', bound='BaseYAMLModel')

class BaseYAMLModel(BaseModel):
    """Pydantic model that can be written to and read from YAML or JSON documents."""

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.model_dump(mode='json'), default_flow_style=False,
                              sort_keys=False, indent=2, allow_unicode=True)

    @classmethod
    def from_yaml(cls: Type[M], text: str) -> M:
        return cls.model_validate(yaml.safe_load(text) or {})

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls: Type[M], text: str) -> M:
        # python-mode validation: the custom id types cannot be checked from raw JSON
        return cls.model_validate(json.loads(text))

class TaskStatus(Enum):
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @property
    def icon(self) -> str:
        return "✔" if self is TaskStatus.DONE else "✗"

@total_ordering
class TaskId:
    """A path from the root of the tree, written as dotted child indices ("1.2.3").

    The empty path is the root. Ids are plain values: every relation between
    tasks (parent, children, siblings) is derived from the shape of the id.
    """

    ID_PATTERN = re.compile(r'[0-9]+(?:\.[0-9]+)*')

    __slots__ = ('_parts',)

    def __init__(self, parts: Iterable[int] = ()):
        self._parts: Tuple[int, ...] = tuple(parts)

    @classmethod
    def root(cls) -> 'TaskId':
        return cls()

    @classmethod
    def parse(cls, text: str) -> 'TaskId':
        """Parse the dotted form; the empty string is the root."""
        if text == "":
            return cls.root()
        if not cls.ID_PATTERN.fullmatch(text):
            raise BadTaskIdString(text)
        parts = [int(segment) for segment in text.split('.')]
        if any(part < 1 or part > MAX_INDEX for part in parts):
            raise BadTaskIdString(text)
        return cls(parts)

    @classmethod
    def validate_id(cls, text: str) -> bool:
        """Validate if an id string is properly formatted."""
        try:
            cls.parse(text)
            return True
        except BadTaskIdString:
            return False

    @property
    def parts(self) -> Tuple[int, ...]:
        return self._parts

    @property
    def is_root(self) -> bool:
        return not self._parts

    @property
    def depth(self) -> int:
        return len(self._parts)

    def parent(self) -> 'TaskId':
        if self.is_root:
            raise NoParent(self)
        return TaskId(self._parts[:-1])

    def child_index(self) -> int:
        if self.is_root:
            raise NoChildIndex(self)
        return self._parts[-1]

    def new_child_id(self, child_num: int) -> 'TaskId':
        return TaskId(self._parts + (child_num,))

    def children(self, count: int) -> List['TaskId']:
        return [self.new_child_id(index) for index in range(1, count + 1)]

    def ancestors_inclusive(self) -> List['TaskId']:
        """Every id from the root down to this one, both included."""
        return [TaskId(self._parts[:layer]) for layer in range(len(self._parts) + 1)]

    def next_sibling(self) -> 'TaskId':
        if self.is_root:
            raise NoNextSibling(self)
        return TaskId(self._parts[:-1] + (self._parts[-1] + 1,))

    def prev_sibling(self) -> 'TaskId':
        if self.is_root or self._parts[-1] <= 1:
            raise NoPrevSibling(self)
        return TaskId(self._parts[:-1] + (self._parts[-1] - 1,))

    def with_layer_shifted(self, layer: int, delta: int) -> 'TaskId':
        """Copy of this id with the component at `layer` moved by `delta`."""
        parts = list(self._parts)
        parts[layer] += delta
        return TaskId(parts)

    # immutable, so copies can share the instance
    def __copy__(self) -> 'TaskId':
        return self

    def __deepcopy__(self, memo) -> 'TaskId':
        return self

    def __len__(self) -> int:
        return len(self._parts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TaskId):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other: 'TaskId') -> bool:
        if not isinstance(other, TaskId):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self._parts)

    def __repr__(self) -> str:
        return f"TaskId('{self}')"

class Task(BaseModel):
    """A node of the work breakdown structure."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: TaskId = Field(description="Dotted path of the task from the root")
    name: str = Field(description="The human readable name of the task")
    planned_value: float = Field(default=0.0, description="Budgeted cost of the work (rolled up for trunks)")
    actual_cost: float = Field(default=0.0, description="Cost actually incurred (rolled up for trunks)")
    num_children: int = Field(default=0, ge=0, description="Number of direct children")
    status: TaskStatus = Field(default=TaskStatus.IN_PROGRESS, description="Completion status")
    members: Set[str] = Field(default_factory=set, description="Names of members working on or beneath this task")

    @field_validator('id', mode='before')
    @classmethod
    def parse_id(cls, v: Union[str, TaskId]):
        if isinstance(v, str):
            return TaskId.parse(v)
        return v

    @field_serializer('id')
    def serialize_id(self, v: TaskId) -> str:
        return str(v)

    @field_serializer('members')
    def serialize_members(self, v: Set[str]) -> List[str]:
        return sorted(v)

    @property
    def is_leaf(self) -> bool:
        return self.num_children == 0

    @property
    def is_trunk(self) -> bool:
        return self.num_children > 0

    def child_ids(self) -> List[TaskId]:
        return self.id.children(self.num_children)

    def label(self) -> str:
        """Id and name, or just the name for the root."""
        if self.id.is_root:
            return self.name
        return f"{self.id} - {self.name}"

    def members_str(self) -> str:
        return " ".join(sorted(self.members))

    def __str__(self) -> str:
        if self.id.is_root:
            return f"{self.name} {self.status.icon}"
        return f"{self.label()} {self.status.icon} - [{self.members_str()}]"

class Member(BaseModel):
    """A person who can be assigned to leaf tasks."""

    name: str = Field(description="Unique name of the member")
