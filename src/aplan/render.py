"""Read-only text views of a task tree: Graphviz DOT and an indented tree."""
from typing import List

from .errors import NoNextSibling
from .metrics import EarnedValueReport
from .models import Task, TaskId
from .store import Tasks

def _dot_escape(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')

def dot_node(task: Task) -> str:
    """Quoted DOT node name of a task, including its figures and members."""
    if task.id.is_root:
        return f'"{_dot_escape(task.name)}"'
    text = (f"{_dot_escape(task.label())} {task.status.icon}"
            f"\\npv: {task.planned_value} ac: {task.actual_cost}"
            f"\\n[{_dot_escape(task.members_str())}]")
    return f'"{text}"'

def _dot_edges(tasks: Tasks, parent_id: TaskId, lines: List[str]):
    parent = tasks.get(parent_id)
    parent_node = dot_node(parent)
    for child_id in parent.child_ids():
        child = tasks.get(child_id)
        lines.append(f"\t{parent_node} -> {dot_node(child)}")
        _dot_edges(tasks, child_id, lines)

def to_dot_str(tasks: Tasks) -> str:
    """Render the tree as a DOT digraph labelled with the earned value figures."""
    stats = EarnedValueReport.from_tasks(tasks).summary()
    lines = ["digraph G {", f'label="{stats}"']
    _dot_edges(tasks, TaskId.root(), lines)
    lines.append("}")
    return "\n".join(lines) + "\n"

def _has_next_sibling(tasks: Tasks, task_id: TaskId) -> bool:
    try:
        tasks.next_sibling(task_id)
        return True
    except NoNextSibling:
        return False

def _tree_lines(tasks: Tasks, parent_id: TaskId, prefix: str, lines: List[str]):
    for child_id in tasks.get(parent_id).child_ids():
        child = tasks.get(child_id)
        if _has_next_sibling(tasks, child_id):
            lines.append(f"{prefix}├─ {child}")
            _tree_lines(tasks, child_id, prefix + "│  ", lines)
        else:
            lines.append(f"{prefix}└─ {child}")
            _tree_lines(tasks, child_id, prefix + "   ", lines)

def to_tree_str(tasks: Tasks) -> str:
    """Render the tree as indented text with box-drawing connectors."""
    lines = [str(tasks.root)]
    _tree_lines(tasks, TaskId.root(), "", lines)
    return "\n".join(lines) + "\n"
