"""Unit tests for the DOT and tree renderers."""

import pytest
from aplan.render import dot_node, to_dot_str, to_tree_str
from aplan.wbs import WBS


@pytest.fixture
def wbs():
    wbs = WBS.new("Project")
    wbs.expand([("", "A"), ("1", "A1"), ("1", "A2"), ("", "B")])
    return wbs


class TestTree:
    """Test the indented tree view."""

    def test_tree(self, wbs):
        """Test connectors for middle and last children."""
        wbs.set_actual_cost("1.1", 2.0)
        wbs.assign_member("1.2", "alice")
        assert to_tree_str(wbs.tasks) == (
            "Project ✗\n"
            "├─ 1 - A ✗ - [alice]\n"
            "│  ├─ 1.1 - A1 ✔ - []\n"
            "│  └─ 1.2 - A2 ✗ - [alice]\n"
            "└─ 2 - B ✗ - []\n"
        )

    def test_last_branch_indent(self):
        """Test that children of a last child are indented with spaces."""
        wbs = WBS.new("Project")
        wbs.expand([("", "A"), ("1", "A1")])
        assert to_tree_str(wbs.tasks) == (
            "Project ✗\n"
            "└─ 1 - A ✗ - []\n"
            "   └─ 1.1 - A1 ✗ - []\n"
        )

    def test_empty_tree(self):
        """Test rendering a project without tasks."""
        assert to_tree_str(WBS.new("Project").tasks) == "Project ✗\n"


class TestDot:
    """Test the DOT digraph view."""

    def test_dot(self, wbs):
        """Test header, stats label and one edge per parent/child pair."""
        wbs.set_planned_value("2", 4.0)
        dot = to_dot_str(wbs.tasks)
        lines = dot.splitlines()

        assert lines[0] == "digraph G {"
        assert lines[1] == 'label="earned value: 0.0, spi: 0.0, sv: -4.0, cpi: 0.0, cv: 0.0"'
        assert lines[-1] == "}"
        edges = [line for line in lines if "->" in line]
        assert len(edges) == 4
        assert '\t"Project" -> "1 - A ✗\\npv: 0.0 ac: 0.0\\n[]"' in edges
        assert '\t"Project" -> "2 - B ✗\\npv: 4.0 ac: 0.0\\n[]"' in edges
        assert '\t"1 - A ✗\\npv: 0.0 ac: 0.0\\n[]" -> "1.1 - A1 ✗\\npv: 0.0 ac: 0.0\\n[]"' in edges

    def test_depth_first_order(self, wbs):
        """Test that a subtree is emitted before the next sibling."""
        edges = [line for line in to_dot_str(wbs.tasks).splitlines() if "->" in line]
        assert [edge.split(" -> ")[1].split(" ")[0] for edge in edges] == ['"1', '"1.1', '"1.2', '"2']

    def test_quotes_escaped(self):
        """Test that names cannot break out of the quoted node name."""
        wbs = WBS.new('The "big" one')
        task = wbs.add("", 'Say "hi"')
        assert dot_node(wbs.tasks.root) == '"The \\"big\\" one"'
        assert dot_node(task).startswith('"1 - Say \\"hi\\" ✗')
