"""
aplan - work breakdown structures with earned value tracking.

Tasks are addressed by dotted ids (1, 1.2, 1.2.3). Planned value and actual
cost roll up from leaves to the root, and a trunk task is done once all of
its children are.
"""

from .version import VERSION
from .errors import AplanError
from .models import TaskStatus, TaskId, Task, Member
from .store import Tasks
from .wbs import WBS
from .metrics import EarnedValueReport
from .render import to_dot_str, to_tree_str
from .project import Project
from .data import DataCore

__version__ = VERSION

__all__ = [
    "VERSION",
    "AplanError",
    "TaskStatus",
    "TaskId",
    "Task",
    "Member",
    "Tasks",
    "WBS",
    "EarnedValueReport",
    "to_dot_str",
    "to_tree_str",
    "Project",
    "DataCore",
]
