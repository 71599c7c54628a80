"""Command-line interface entry point for IdeaVault."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .config import get_settings
from .display import (
    format_idea_detail,
    format_idea_summary,
    format_linked_idea,
    format_project_detail,
    format_project_summary,
    format_tag,
    format_tag_rows,
    format_task_detail,
    format_task_summary,
)
from .documents import parse_document, render_idea, render_task
from .editor import launch_editor
from .errors import IdeaVaultError, ValidationError
from .ideas import (
    IdeaUpdate,
    apply_idea_document,
    create_idea,
    delete_idea,
    find_idea,
    get_idea,
    list_ideas,
    replace_idea_tags,
    set_idea_status,
    update_idea,
)
from .models import IdeaStatus, ProjectStatus, TaskPriority, TaskStatus, parse_id
from .projects import (
    create_project,
    delete_project,
    find_project,
    get_project,
    link_idea,
    list_projects,
    project_ideas,
    set_project_status,
    unlink_idea,
)
from .search import EntityType, SearchEngine, SearchFilters, format_results, parse_date
from .storage import Storage
from .tags import set_tag_color, tag_usage
from .tasks import (
    apply_task_document,
    create_task,
    delete_task,
    get_task,
    link_task_idea,
    link_task_project,
    list_tasks,
    set_task_due,
    set_task_priority,
    set_task_status,
    unlink_task_idea,
    unlink_task_project,
)


VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level = getattr(logging, get_settings().log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _storage() -> Storage:
    return Storage()


def _extract_flag(args: Sequence[str], *flags: str) -> Tuple[bool, list[str]]:
    args_list = list(args)
    found = False
    for flag in flags:
        while flag in args_list:
            args_list.remove(flag)
            found = True
    return found, args_list


def _extract_options(args: Sequence[str], *names: str) -> Tuple[list[str], list[str]]:
    """Pull every ``--name value`` / ``--name=value`` occurrence out of ``args``."""

    values: list[str] = []
    remaining: list[str] = []
    tokens = list(args)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token in names:
            if index + 1 >= len(tokens):
                raise ValidationError(f"Option {token} expects a value")
            values.append(tokens[index + 1])
            index += 2
            continue
        name, sep, value = token.partition("=")
        if sep and name in names:
            values.append(value)
        else:
            remaining.append(token)
        index += 1
    return values, remaining


def _extract_terms(args: Sequence[str], name: str) -> Tuple[list[str], list[str]]:
    """Pull ``name`` and every following token up to the next option."""

    terms: list[str] = []
    remaining: list[str] = []
    tokens = list(args)
    index = 0
    while index < len(tokens):
        token = tokens[index]
        option, sep, value = token.partition("=")
        if token != name and not (sep and option == name):
            remaining.append(token)
            index += 1
            continue
        if sep:
            terms.append(value)
        index += 1
        start = len(terms)
        while index < len(tokens) and not tokens[index].startswith("-"):
            terms.append(tokens[index])
            index += 1
        if not sep and len(terms) == start:
            raise ValidationError(f"Option {name} expects a value")
    return terms, remaining


def _extract_option(args: Sequence[str], *names: str) -> Tuple[Optional[str], list[str]]:
    values, remaining = _extract_options(args, *names)
    return (values[-1] if values else None), remaining


def _split_csv(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _confirm(prompt: str) -> bool:
    try:
        answer = input(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _limit(items: list) -> list:
    limit = get_settings().max_list_items
    return items[:limit] if limit else items


def _print_lines(lines: Sequence[str]) -> None:
    for line in lines:
        print(line)


# ---------------------------------------------------------------------------
# Ideas
# ---------------------------------------------------------------------------


def _idea_usage() -> None:
    print("Idea commands:")
    print("  idea new <title> [-d DESC] [-t tag1,tag2]")
    print("  idea list [-s STATUS] [-t TAG]")
    print("  idea show <id>")
    print("  idea tag <id> <tag>...            - Replace tags")
    print("  idea status <id> <status>")
    print("  idea edit <id>                    - Edit in $EDITOR")
    print("  idea delete <id> [-f]")
    print("  idea update <id> [-t TITLE] [-d DESC] [-s STATUS] [--clear FIELD]")


def _handle_idea_new(args: Sequence[str]) -> int:
    description, remaining = _extract_option(args, "-d", "--description")
    tags, remaining = _extract_options(remaining, "-t", "--tags")
    if not remaining:
        print("Usage: ideavault idea new <title> [-d DESC] [-t tag1,tag2]")
        return 1

    idea = create_idea(
        _storage(),
        " ".join(remaining),
        description=description,
        tags=[tag for raw in tags for tag in _split_csv(raw)],
    )
    print("✅ Created new idea:")
    _print_lines(format_idea_summary(idea))
    return 0


def _handle_idea_list(args: Sequence[str]) -> int:
    status_raw, remaining = _extract_option(args, "-s", "--status")
    tag, remaining = _extract_option(remaining, "-t", "--tag")
    status = IdeaStatus.parse(status_raw) if status_raw else None

    ideas = list_ideas(_storage(), status=status, tag=tag)
    if not ideas:
        print("📝 No ideas found")
        return 0

    print(f"📝 Found {len(ideas)} idea(s):")
    print()
    for idea in _limit(ideas):
        _print_lines(format_idea_summary(idea))
        print()
    return 0


def _handle_idea_show(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault idea show <id>")
        return 1
    _print_lines(format_idea_detail(get_idea(_storage(), parse_id(args[0]))))
    return 0


def _handle_idea_tag(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault idea tag <id> <tag>...")
        return 1
    idea_id = parse_id(args[0])
    tags = [tag for raw in args[1:] for tag in _split_csv(raw)]
    idea = replace_idea_tags(_storage(), idea_id, tags)
    print(f"✅ Updated tags for idea {idea_id}:")
    print(f"   Tags: {', '.join(idea.tags)}")
    return 0


def _handle_idea_status(args: Sequence[str]) -> int:
    if len(args) < 2:
        print("Usage: ideavault idea status <id> <status>")
        return 1
    idea_id = parse_id(args[0])
    status = IdeaStatus.parse(args[1])
    _, previous = set_idea_status(_storage(), idea_id, status)
    print(f"✅ Updated status for idea {idea_id}:")
    print(f"   {previous} → {status}")
    return 0


def _handle_idea_edit(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault idea edit <id>")
        return 1
    idea_id = parse_id(args[0])
    storage = _storage()
    idea = get_idea(storage, idea_id)

    edited = launch_editor(render_idea(idea))
    updated = apply_idea_document(storage, idea_id, parse_document(edited))
    print(f"✅ Updated idea {idea_id}:")
    _print_lines(format_idea_summary(updated))
    return 0


def _handle_idea_delete(args: Sequence[str]) -> int:
    force, remaining = _extract_flag(args, "-f", "--force")
    if not remaining:
        print("Usage: ideavault idea delete <id> [-f]")
        return 1
    idea_id = parse_id(remaining[0])
    storage = _storage()
    idea = get_idea(storage, idea_id)

    if not force and not _confirm(
        f"Are you sure you want to delete the idea '{idea.title}'? [y/N]: "
    ):
        print("❌ Deletion cancelled")
        return 0

    removed = delete_idea(storage, idea_id)
    print(f"✅ Deleted idea: {removed.title}")
    return 0


def _handle_idea_update(args: Sequence[str]) -> int:
    title, remaining = _extract_option(args, "-t", "--title")
    description, remaining = _extract_option(remaining, "-d", "--description")
    status_raw, remaining = _extract_option(remaining, "-s", "--status")
    clear, remaining = _extract_options(remaining, "--clear")
    if not remaining:
        print("Usage: ideavault idea update <id> [-t TITLE] [-d DESC] [-s STATUS] [--clear FIELD]")
        return 1

    idea_id = parse_id(remaining[0])
    update = IdeaUpdate(
        title=title,
        description=description,
        status=IdeaStatus.parse(status_raw) if status_raw else None,
        clear=clear,
    )
    _, changes = update_idea(_storage(), idea_id, update)
    if not changes:
        print(f"No changes specified for idea {idea_id}")
        print("Use 'ideavault idea help' to see available options.")
        return 0

    print(f"✅ Updated idea {idea_id}:")
    for change in changes:
        print(f"   {change}")
    return 0


def _handle_idea(args: Sequence[str]) -> int:
    if not args:
        _idea_usage()
        return 1

    subcommand, *rest = args
    if subcommand in {"help", "-h", "--help"}:
        _idea_usage()
        return 0
    if subcommand == "new":
        return _handle_idea_new(rest)
    if subcommand == "list":
        return _handle_idea_list(rest)
    if subcommand == "show":
        return _handle_idea_show(rest)
    if subcommand == "tag":
        return _handle_idea_tag(rest)
    if subcommand == "status":
        return _handle_idea_status(rest)
    if subcommand == "edit":
        return _handle_idea_edit(rest)
    if subcommand == "delete":
        return _handle_idea_delete(rest)
    if subcommand == "update":
        return _handle_idea_update(rest)

    print(f"Unknown idea subcommand: {subcommand}")
    _idea_usage()
    return 1


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def _project_usage() -> None:
    print("Project commands:")
    print("  project new <title> [-d DESC] [-m MILESTONE] [--url URL] [--repo REPO]")
    print("  project list [-s STATUS]")
    print("  project show <id>")
    print("  project link <project-id> <idea-id>")
    print("  project unlink <project-id> <idea-id>")
    print("  project ideas <project-id>")
    print("  project status <project-id> <status>")
    print("  project delete <project-id> [-f]")


def _handle_project_new(args: Sequence[str]) -> int:
    description, remaining = _extract_option(args, "-d", "--description")
    milestone, remaining = _extract_option(remaining, "-m", "--milestone")
    url, remaining = _extract_option(remaining, "--url")
    repository, remaining = _extract_option(remaining, "--repo", "--repository")
    if not remaining:
        print("Usage: ideavault project new <title> [-d DESC] [-m MILESTONE] [--url URL] [--repo REPO]")
        return 1

    project = create_project(
        _storage(),
        " ".join(remaining),
        description=description,
        milestone=milestone,
        url=url,
        repository=repository,
    )
    print("✅ Created new project:")
    _print_lines(format_project_summary(project))
    return 0


def _handle_project_list(args: Sequence[str]) -> int:
    status_raw, _ = _extract_option(args, "-s", "--status")
    status = ProjectStatus.parse(status_raw) if status_raw else None

    projects = list_projects(_storage(), status=status)
    if not projects:
        print("📋 No projects found")
        return 0

    print(f"📋 Found {len(projects)} project(s):")
    print()
    for project in _limit(projects):
        _print_lines(format_project_summary(project))
        print()
    return 0


def _handle_project_show(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault project show <id>")
        return 1
    project, linked = project_ideas(_storage(), parse_id(args[0]))
    _print_lines(format_project_detail(project, linked))
    return 0


def _handle_project_link(args: Sequence[str], *, unlink: bool) -> int:
    if len(args) < 2:
        action = "unlink" if unlink else "link"
        print(f"Usage: ideavault project {action} <project-id> <idea-id>")
        return 1
    project_id = parse_id(args[0])
    idea_id = parse_id(args[1])
    storage = _storage()

    if unlink:
        if not unlink_idea(storage, project_id, idea_id):
            print(f"⚠️  Idea {idea_id} is not linked to project {project_id}")
            return 0
        print(f"✅ Unlinked idea {idea_id} from project {project_id}")
        return 0

    if not link_idea(storage, project_id, idea_id):
        print(f"⚠️  Idea {idea_id} is already linked to project {project_id}")
        return 0
    print(f"✅ Linked idea {idea_id} to project {project_id}")
    return 0


def _handle_project_ideas(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault project ideas <project-id>")
        return 1
    project, linked = project_ideas(_storage(), parse_id(args[0]))
    if not linked:
        print(f"📋 No ideas linked to project {project.id}")
        return 0

    print(f"💡 Ideas linked to project {project.title}:")
    print(f"   Total: {len(linked)} ideas")
    print()
    for idea_id, idea in linked:
        _print_lines(format_linked_idea(idea_id, idea))
        print()
    return 0


def _handle_project_status(args: Sequence[str]) -> int:
    if len(args) < 2:
        print("Usage: ideavault project status <project-id> <status>")
        return 1
    project_id = parse_id(args[0])
    status = ProjectStatus.parse(args[1])
    _, previous = set_project_status(_storage(), project_id, status)
    print(f"✅ Updated status for project {project_id}:")
    print(f"   {previous} → {status}")
    return 0


def _handle_project_delete(args: Sequence[str]) -> int:
    force, remaining = _extract_flag(args, "-f", "--force")
    if not remaining:
        print("Usage: ideavault project delete <project-id> [-f]")
        return 1
    project_id = parse_id(remaining[0])
    storage = _storage()
    project = get_project(storage, project_id)

    if not force:
        print("📋 Project to delete:")
        _print_lines(format_project_summary(project))
        if project.idea_ids:
            print(
                f"⚠️  This project has {project.idea_count} linked ideas. "
                "They will not be deleted."
            )
        if not _confirm("Are you sure you want to delete this project? [y/N]: "):
            print("❌ Deletion cancelled")
            return 0

    removed = delete_project(storage, project_id)
    print(f"✅ Deleted project: {removed.title}")
    return 0


def _handle_project(args: Sequence[str]) -> int:
    if not args:
        _project_usage()
        return 1

    subcommand, *rest = args
    if subcommand in {"help", "-h", "--help"}:
        _project_usage()
        return 0
    if subcommand == "new":
        return _handle_project_new(rest)
    if subcommand == "list":
        return _handle_project_list(rest)
    if subcommand == "show":
        return _handle_project_show(rest)
    if subcommand == "link":
        return _handle_project_link(rest, unlink=False)
    if subcommand == "unlink":
        return _handle_project_link(rest, unlink=True)
    if subcommand == "ideas":
        return _handle_project_ideas(rest)
    if subcommand == "status":
        return _handle_project_status(rest)
    if subcommand == "delete":
        return _handle_project_delete(rest)

    print(f"Unknown project subcommand: {subcommand}")
    _project_usage()
    return 1


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def _task_usage() -> None:
    print("Task commands:")
    print("  task new <title> [-d DESC] [-p PRIORITY] [-D YYYY-MM-DD] [-t tag1,tag2]")
    print("           [--project ID] [--idea ID]")
    print("  task list [-s STATUS] [-p PRIORITY] [-t TAG] [--project ID] [--idea ID] [--overdue]")
    print("  task show <id>")
    print("  task status <id> <status>")
    print("  task priority <id> <priority>")
    print("  task due <id> <YYYY-MM-DD|clear>")
    print("  task link-project <id> <project-id>")
    print("  task link-idea <id> <idea-id>")
    print("  task unlink-project <id>")
    print("  task unlink-idea <id>")
    print("  task edit <id>                    - Edit in $EDITOR")
    print("  task delete <id> [-f]")


def _parse_due(raw: str):
    try:
        return parse_date(raw)
    except ValidationError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD") from None


def _handle_task_new(args: Sequence[str]) -> int:
    description, remaining = _extract_option(args, "-d", "--description")
    priority_raw, remaining = _extract_option(remaining, "-p", "--priority")
    due_raw, remaining = _extract_option(remaining, "-D", "--due")
    tags, remaining = _extract_options(remaining, "-t", "--tags")
    project_raw, remaining = _extract_option(remaining, "--project")
    idea_raw, remaining = _extract_option(remaining, "--idea")
    if not remaining:
        print("Usage: ideavault task new <title> [-d DESC] [-p PRIORITY] [-D YYYY-MM-DD] [-t tags]")
        return 1

    task = create_task(
        _storage(),
        " ".join(remaining),
        description=description,
        priority=TaskPriority.parse(priority_raw) if priority_raw else None,
        due_date=_parse_due(due_raw) if due_raw else None,
        tags=[tag for raw in tags for tag in _split_csv(raw)],
        project_id=parse_id(project_raw) if project_raw else None,
        idea_id=parse_id(idea_raw) if idea_raw else None,
    )
    print("✅ Created new task:")
    _print_lines(format_task_summary(task))
    return 0


def _handle_task_list(args: Sequence[str]) -> int:
    overdue, remaining = _extract_flag(args, "--overdue")
    status_raw, remaining = _extract_option(remaining, "-s", "--status")
    priority_raw, remaining = _extract_option(remaining, "-p", "--priority")
    tag, remaining = _extract_option(remaining, "-t", "--tag")
    project_raw, remaining = _extract_option(remaining, "--project")
    idea_raw, remaining = _extract_option(remaining, "--idea")

    tasks = list_tasks(
        _storage(),
        status=TaskStatus.parse(status_raw) if status_raw else None,
        priority=TaskPriority.parse(priority_raw) if priority_raw else None,
        tag=tag,
        project_id=parse_id(project_raw) if project_raw else None,
        idea_id=parse_id(idea_raw) if idea_raw else None,
        overdue=overdue,
    )
    if not tasks:
        print("📋 No tasks found")
        return 0

    print(f"📋 Found {len(tasks)} task(s):")
    print()
    for task in _limit(tasks):
        _print_lines(format_task_summary(task))
        print()
    return 0


def _handle_task_show(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault task show <id>")
        return 1
    storage = _storage()
    task = get_task(storage, parse_id(args[0]))
    project = find_project(storage.load_projects(), task.project_id) if task.project_id else None
    idea = find_idea(storage.load_ideas(), task.idea_id) if task.idea_id else None
    _print_lines(format_task_detail(task, project, idea))
    return 0


def _handle_task_status(args: Sequence[str]) -> int:
    if len(args) < 2:
        print("Usage: ideavault task status <id> <status>")
        return 1
    task_id = parse_id(args[0])
    status = TaskStatus.parse(args[1])
    _, previous = set_task_status(_storage(), task_id, status)
    print(f"✅ Updated status for task {task_id}:")
    print(f"   {previous} → {status}")
    return 0


def _handle_task_priority(args: Sequence[str]) -> int:
    if len(args) < 2:
        print("Usage: ideavault task priority <id> <priority>")
        return 1
    task_id = parse_id(args[0])
    priority = TaskPriority.parse(args[1])
    _, previous = set_task_priority(_storage(), task_id, priority)
    print(f"✅ Updated priority for task {task_id}:")
    print(f"   {previous} → {priority}")
    return 0


def _handle_task_due(args: Sequence[str]) -> int:
    if len(args) < 2:
        print("Usage: ideavault task due <id> <YYYY-MM-DD|clear>")
        return 1
    task_id = parse_id(args[0])
    if args[1].lower() == "clear":
        set_task_due(_storage(), task_id, None)
        print(f"✅ Cleared due date for task {task_id}")
        return 0

    due = _parse_due(args[1])
    set_task_due(_storage(), task_id, due)
    print(f"✅ Set due date for task {task_id} to {due.strftime('%Y-%m-%d')}")
    return 0


def _handle_task_link(args: Sequence[str], target: str) -> int:
    if len(args) < 2:
        print(f"Usage: ideavault task link-{target} <id> <{target}-id>")
        return 1
    task_id = parse_id(args[0])
    target_id = parse_id(args[1])
    if target == "project":
        link_task_project(_storage(), task_id, target_id)
    else:
        link_task_idea(_storage(), task_id, target_id)
    print(f"✅ Linked task {task_id} to {target} {target_id}")
    return 0


def _handle_task_unlink(args: Sequence[str], target: str) -> int:
    if not args:
        print(f"Usage: ideavault task unlink-{target} <id>")
        return 1
    task_id = parse_id(args[0])
    if target == "project":
        changed = unlink_task_project(_storage(), task_id)
    else:
        changed = unlink_task_idea(_storage(), task_id)
    if not changed:
        print(f"⚠️  Task {task_id} is not linked to any {target}")
        return 0
    print(f"✅ Unlinked task {task_id} from {target}")
    return 0


def _handle_task_edit(args: Sequence[str]) -> int:
    if not args:
        print("Usage: ideavault task edit <id>")
        return 1
    task_id = parse_id(args[0])
    storage = _storage()
    task = get_task(storage, task_id)

    edited = launch_editor(render_task(task))
    updated = apply_task_document(storage, task_id, parse_document(edited))
    print(f"✅ Updated task {task_id}:")
    _print_lines(format_task_summary(updated))
    return 0


def _handle_task_delete(args: Sequence[str]) -> int:
    force, remaining = _extract_flag(args, "-f", "--force")
    if not remaining:
        print("Usage: ideavault task delete <id> [-f]")
        return 1
    task_id = parse_id(remaining[0])
    storage = _storage()
    task = get_task(storage, task_id)

    if not force:
        _print_lines(format_task_summary(task))
        print()
        if not _confirm("Are you sure you want to delete this task? [y/N]: "):
            print("❌ Deletion cancelled")
            return 0

    removed = delete_task(storage, task_id)
    print(f"✅ Deleted task: {removed.title}")
    return 0


def _handle_task(args: Sequence[str]) -> int:
    if not args:
        _task_usage()
        return 1

    subcommand, *rest = args
    if subcommand in {"help", "-h", "--help"}:
        _task_usage()
        return 0
    if subcommand == "new":
        return _handle_task_new(rest)
    if subcommand == "list":
        return _handle_task_list(rest)
    if subcommand == "show":
        return _handle_task_show(rest)
    if subcommand == "status":
        return _handle_task_status(rest)
    if subcommand == "priority":
        return _handle_task_priority(rest)
    if subcommand == "due":
        return _handle_task_due(rest)
    if subcommand == "link-project":
        return _handle_task_link(rest, "project")
    if subcommand == "link-idea":
        return _handle_task_link(rest, "idea")
    if subcommand == "unlink-project":
        return _handle_task_unlink(rest, "project")
    if subcommand == "unlink-idea":
        return _handle_task_unlink(rest, "idea")
    if subcommand == "edit":
        return _handle_task_edit(rest)
    if subcommand == "delete":
        return _handle_task_delete(rest)

    print(f"Unknown task subcommand: {subcommand}")
    _task_usage()
    return 1


# ---------------------------------------------------------------------------
# Search, tags and misc
# ---------------------------------------------------------------------------


def _handle_search(args: Sequence[str]) -> int:
    ideas_only, remaining = _extract_flag(args, "-i", "--ideas")
    projects_only, remaining = _extract_flag(remaining, "-p", "--projects")
    tags_only, remaining = _extract_flag(remaining, "-t", "--tags")
    tasks_only, remaining = _extract_flag(remaining, "-k", "--tasks")
    status, remaining = _extract_option(remaining, "-s", "--status")
    with_tags, remaining = _extract_terms(remaining, "--with-tags")
    date_from, remaining = _extract_option(remaining, "--from")
    date_to, remaining = _extract_option(remaining, "--to")

    if not remaining:
        print('Usage: ideavault search "query" [-i|-p|-t|-k] [--status S] [--with-tags T...] [--from DATE] [--to DATE]')
        return 1

    filters = SearchFilters()
    if ideas_only:
        filters.entity_types = [EntityType.IDEA]
    elif projects_only:
        filters.entity_types = [EntityType.PROJECT]
    elif tags_only:
        filters.entity_types = [EntityType.TAG]
    elif tasks_only:
        filters.entity_types = [EntityType.TASK]

    filters.status_filter = status
    filters.tags_filter = [term for raw in with_tags for term in raw.split()]
    if date_from:
        filters.date_from = parse_date(date_from)
    if date_to:
        filters.date_to = parse_date(date_to)

    results = SearchEngine(_storage()).search(" ".join(remaining), filters)
    _print_lines(format_results(results))
    return 0


def _handle_tags(args: Sequence[str]) -> int:
    if args and args[0] == "color":
        if len(args) < 3:
            print("Usage: ideavault tags color <name> <color|clear>")
            return 1
        color = None if args[2].lower() == "clear" else args[2]
        tag = set_tag_color(_storage(), args[1], color)
        print(f"✅ Updated tag: {format_tag(tag)}")
        return 0

    if args and args[0] != "list":
        print("Usage: ideavault tags [list] | tags color <name> <color|clear>")
        return 1

    rows = tag_usage(_storage())
    if not rows:
        print("No tags recorded yet.")
        return 0

    print("🏷️ Tags")
    print("=" * 40)
    _print_lines(format_tag_rows(_limit(rows)))
    return 0


def _print_help() -> None:
    print("💡 ideavault - Track ideas, projects and tasks")
    print("\nCommands:")
    print("  idea <subcommand>    - Manage ideas (new, list, show, tag, status, edit, delete, update)")
    print("  project <subcommand> - Manage projects (new, list, show, link, unlink, ideas, status, delete)")
    print("  task <subcommand>    - Manage tasks (new, list, show, status, priority, due, link-*, unlink-*, edit, delete)")
    print('  search "query"       - Search ideas, projects and tags')
    print("  tags                 - List known tags with usage counts")
    print("  version              - Show version")
    print("  help                 - Show this help message")


def _dispatch(command: str, rest: List[str]) -> int:
    if command == "idea":
        return _handle_idea(rest)
    if command == "project":
        return _handle_project(rest)
    if command == "task":
        return _handle_task(rest)
    if command == "search":
        return _handle_search(rest)
    if command == "tags":
        return _handle_tags(rest)
    if command in {"version", "--version", "-V"}:
        print(f"IdeaVault v{VERSION}")
        return 0
    if command in {"help", "-h", "--help"}:
        _print_help()
        return 0

    print(f"Unknown command: {command}")
    print("Use 'ideavault help' to see available commands")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]

    if not args:
        _print_help()
        return 1

    _configure_logging()
    command, *rest = args

    try:
        return _dispatch(command, rest)
    except IdeaVaultError as exc:
        logger.debug("Command %s failed", command, exc_info=True)
        print(f"❌ {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
