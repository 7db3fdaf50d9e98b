"""
Command Line Interface for aplan.
"""

import click
from contextlib import contextmanager
from pathlib import Path
from .version import VERSION
from .data import DataCore
from .errors import AplanError
from .metrics import EarnedValueReport
from .render import to_dot_str, to_tree_str
from .logs import get_logger

log = get_logger("cli")


@contextmanager
def _project(ctx: click.Context):
    """Open the selected project file, save on success, report domain errors."""
    try:
        with DataCore.get_context(ctx.obj['file']) as context:
            yield context.project
    except AplanError as e:
        log.debug(f"Command failed: {e}")
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=VERSION, prog_name="aplan")
@click.option('-f', '--file', 'file', type=click.Path(dir_okay=False, path_type=Path),
              envvar='APLAN_FILE', default=None, help='Project file to operate on (default: .aplan.ap)')
@click.pass_context
def main(ctx, file):
    """
    aplan - work breakdown structures with earned value tracking.
    """
    ctx.ensure_object(dict)
    ctx.obj['file'] = file if file is not None else DataCore.project_file()


@main.command()
@click.argument('name')
@click.pass_context
def init(ctx, name):
    """Create a new project file named NAME."""
    path = ctx.obj['file']
    try:
        DataCore.create(path, name)
    except AplanError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"✅ Created project '{name}' in {path}")


# --- Work breakdown structure ---

@main.group()
def wbs():
    """Manage the task tree."""
    pass


@wbs.command()
@click.argument('parent')
@click.argument('name')
@click.pass_context
def add(ctx, parent, name):
    """Add task NAME under PARENT ("" for the top level)."""
    with _project(ctx) as project:
        task = project.wbs.add(parent, name)
    click.echo(f"📝 Added {task.label()}")


@wbs.command()
@click.argument('task_id')
@click.pass_context
def remove(ctx, task_id):
    """Remove a leaf task; later siblings are renumbered."""
    with _project(ctx) as project:
        task = project.wbs.remove(task_id)
    click.echo(f"🗑️  Removed {task.label()}")


@wbs.command()
@click.argument('task_id')
@click.argument('cost', type=float)
@click.pass_context
def done(ctx, task_id, cost):
    """Finish a leaf task with its actual COST."""
    with _project(ctx) as project:
        project.wbs.set_actual_cost(task_id, cost)
        task = project.wbs.get(task_id)
    click.echo(f"✅ {task.label()} done, actual cost {task.actual_cost}")


@wbs.command()
@click.argument('task_id')
@click.argument('value', type=float)
@click.pass_context
def pv(ctx, task_id, value):
    """Set the planned VALUE of a leaf task."""
    with _project(ctx) as project:
        project.wbs.set_planned_value(task_id, value)
        task = project.wbs.get(task_id)
    click.echo(f"📊 {task.label()} planned value {task.planned_value}")


@wbs.command()
@click.argument('task_id')
@click.pass_context
def show(ctx, task_id):
    """Show one task."""
    with _project(ctx) as project:
        task = project.wbs.get(task_id)
    click.echo(str(task))
    click.echo(f"   pv: {task.planned_value} ac: {task.actual_cost} children: {task.num_children}")


@wbs.command('list')
@click.option('--todo', 'view', flag_value='todo', help='Only leaves that are not done')
@click.option('--done', 'view', flag_value='done', help='Only leaves that are done')
@click.pass_context
def list_tasks(ctx, view):
    """List leaf tasks."""
    with _project(ctx) as project:
        if view == 'todo':
            tasks = project.tasks.todo_tasks()
        elif view == 'done':
            tasks = project.tasks.done_tasks()
        else:
            tasks = project.tasks.leaf_tasks()
    for task in sorted(tasks, key=lambda t: t.id):
        click.echo(str(task))


@wbs.command()
@click.option('-o', '--output', type=click.File('w', encoding='utf-8'), default='-', help='Output file ("-" for stdout)')
@click.pass_context
def dot(ctx, output):
    """Render the tree in Graphviz DOT format."""
    with _project(ctx) as project:
        output.write(to_dot_str(project.tasks))


@wbs.command()
@click.option('-o', '--output', type=click.File('w', encoding='utf-8'), default='-', help='Output file ("-" for stdout)')
@click.pass_context
def tree(ctx, output):
    """Render the tree as indented text."""
    with _project(ctx) as project:
        output.write(to_tree_str(project.tasks))


@wbs.command()
@click.pass_context
def stats(ctx):
    """Show the earned value figures of the project."""
    with _project(ctx) as project:
        report = EarnedValueReport.from_tasks(project.tasks)
    click.echo(f"📋 {project.name}")
    click.echo(f"   planned value: {report.planned_value}")
    click.echo(f"   actual cost: {report.actual_cost}")
    click.echo(f"   completion: {report.completion_percentage:.0%}")
    click.echo(f"   earned value: {report.earned_value}")
    click.echo(f"   spi: {report.spi}  sv: {report.sv}")
    click.echo(f"   cpi: {report.cpi}  cv: {report.cv}")


# --- Members ---

@main.group()
def member():
    """Manage project members and their task assignments."""
    pass


@member.command('add')
@click.argument('name')
@click.pass_context
def member_add(ctx, name):
    """Add a member to the project."""
    with _project(ctx) as project:
        project.add_member(name)
    click.echo(f"👤 Added member {name}")


@member.command('remove')
@click.argument('name')
@click.pass_context
def member_remove(ctx, name):
    """Remove a member, unassigning them from every task."""
    with _project(ctx) as project:
        project.remove_member(name)
    click.echo(f"👤 Removed member {name}")


@member.command('list')
@click.pass_context
def member_list(ctx):
    """List project members."""
    with _project(ctx) as project:
        members = project.list_members()
    if not members:
        click.echo("📭 No members")
        return
    for m in members:
        click.echo(m.name)


@member.command()
@click.argument('task_id')
@click.argument('name')
@click.pass_context
def assign(ctx, task_id, name):
    """Assign member NAME to leaf task TASK_ID."""
    with _project(ctx) as project:
        project.assign(task_id, name)
    click.echo(f"📌 Assigned {name} to {task_id}")


@member.command()
@click.argument('task_id')
@click.argument('name')
@click.pass_context
def unassign(ctx, task_id, name):
    """Remove member NAME from leaf task TASK_ID."""
    with _project(ctx) as project:
        project.unassign(task_id, name)
    click.echo(f"📌 Unassigned {name} from {task_id}")


if __name__ == "__main__":
    main()
