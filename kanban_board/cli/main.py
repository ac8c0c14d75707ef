import argparse
import os
import socket
import sys
from typing import Any, Dict, List, Optional

from kanban_board.cli.api import ApiClient, ApiError
from kanban_board.cli.config import ConfigError, GlobalConfig, load_global_config, save_global_config

DEFAULT_SOURCE_TAG = "manual"
NOT_LINKED = "Current directory is not linked. Run: rk link <project-id>"


class CliError(RuntimeError):
    pass


def current_path() -> str:
    return os.getcwd()


def current_hostname() -> Optional[str]:
    try:
        return socket.gethostname() or None
    except OSError:
        return None


def require_lookup(client: ApiClient) -> Dict[str, Any]:
    lookup = client.lookup_linked_path(current_path(), current_hostname())
    if lookup is None:
        raise CliError(NOT_LINKED)
    return lookup


def find_task_by_title(tasks: List[Dict[str, Any]], title: str) -> Dict[str, Any]:
    """Exactly one task whose trimmed title matches case-insensitively"""
    wanted = title.strip().lower()
    matching = [task for task in tasks if task["title"].strip().lower() == wanted]

    if not matching:
        raise CliError(f"No task found with title '{title}'")
    if len(matching) > 1:
        print(f"Multiple tasks found with title '{title}':")
        for task in matching:
            print(f"  [{task['id']}] {task['title']} (column: {task['column_id']})")
        raise CliError("Ambiguous task title - please use a more specific title")
    return matching[0]


def find_column_by_name_or_id(columns: List[Dict[str, Any]], column_arg: str) -> Dict[str, Any]:
    """Column by numeric id, otherwise by case-insensitive name"""
    try:
        column_id = int(column_arg)
    except ValueError:
        column_id = None

    if column_id is not None:
        for column in columns:
            if column["id"] == column_id:
                return column
        raise CliError(f"Column with ID {column_id} not found")

    for column in columns:
        if column["name"].lower() == column_arg.lower():
            return column
    raise CliError(f"Column '{column_arg}' not found. Run 'rk columns' to see available columns.")


def cmd_init(args: argparse.Namespace) -> int:
    if args.set_url or args.set_key:
        config = load_global_config()
        if args.set_url:
            config.api_url = args.set_url
        if args.set_key:
            config.api_key = args.set_key
        save_global_config(config)
        if args.set_url:
            print(f"API URL updated: {args.set_url}")
        if args.set_key:
            print("API key updated")
        return 0

    if not (args.url and args.api_key):
        raise CliError("Usage: rk init <URL> <API_KEY> or rk init --url <URL> or rk init --key <API_KEY>")

    save_global_config(GlobalConfig(api_url=args.url, api_key=args.api_key))
    print(f"Configuration saved. API URL: {args.url}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    config = load_global_config()
    if not config.is_configured:
        print("not configured")
        return 1
    try:
        ApiClient.from_config(config).list_projects()
    except ApiError:
        print("cannot connect")
        return 1
    print("ok")
    return 0


def cmd_link(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    project = next((p for p in client.list_projects() if p["id"] == args.project_id), None)
    if project is None:
        raise CliError(f"Project with ID {args.project_id} not found")

    path = current_path()
    client.create_linked_path(
        project_id=args.project_id,
        path=path,
        hostname=current_hostname(),
        default_column_id=args.column,
    )
    print(f"Linked '{path}' to project '{project['name']}' (ID: {args.project_id})")
    return 0


def cmd_unlink(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    path = current_path()
    try:
        client.delete_linked_path_by_path(path)
    except ApiError as exc:
        if exc.status == 404:
            raise CliError(f"'{path}' is not linked") from exc
        raise
    print(f"Unlinked '{path}'")
    return 0


def cmd_projects(args: argparse.Namespace) -> int:
    projects = ApiClient.from_config().list_projects()
    if not projects:
        print("No projects found.")
        return 0

    print("Available projects:")
    for project in projects:
        print(f"  [{project['id']}] {project['name']}")
    return 0


def cmd_columns(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)
    linked_path = lookup["linked_path"]

    columns = client.get_project_columns(linked_path["project_id"])
    if not columns:
        print(f"No columns found in project '{lookup['project_name']}'.")
        return 0

    print(f"Columns in '{lookup['project_name']}':")
    for column in columns:
        marker = " (default)" if column["id"] == linked_path.get("default_column_id") else ""
        print(f"  [{column['id']}] {column['name']}{marker}")
    return 0


def cmd_tasks(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)
    project_id = lookup["linked_path"]["project_id"]

    columns = client.get_project_columns(project_id)
    tasks = client.list_tasks(project_id)
    if not tasks:
        print(f"No tasks in project '{lookup['project_name']}'.")
        return 0

    print(f"Tasks in '{lookup['project_name']}':")
    for column in columns:
        column_tasks = [task for task in tasks if task["column_id"] == column["id"]]
        if column_tasks:
            print(f"\n  {column['name']}:")
            for task in column_tasks:
                print(f"    [{task['id']}] {task['title']}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    config = load_global_config()
    print("Global config:")
    print(f"  API URL: {config.api_url or '(not configured)'}")
    print(f"  API Key: {'(set)' if config.api_key else '(not set)'}")
    print()

    client = ApiClient.from_config(config)
    lookup = client.lookup_linked_path(current_path(), current_hostname())
    if lookup is None:
        print("Current directory is not linked to any project.")
        print("Run: rk link <project-id>")
        return 0

    linked_path = lookup["linked_path"]
    print("Current directory is linked to:")
    print(f"  Project: {lookup['project_name']} (ID: {linked_path['project_id']})")
    print(f"  Linked path: {linked_path['path']}")
    if linked_path.get("default_column_id") is not None:
        print(f"  Default column: {linked_path['default_column_id']}")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)
    linked_path = lookup["linked_path"]
    project_id = linked_path["project_id"]

    if args.column:
        columns = client.get_project_columns(project_id)
        column_id = find_column_by_name_or_id(columns, args.column)["id"]
    else:
        # None lets the server fall back to the project's first column
        column_id = linked_path.get("default_column_id")

    task = client.create_task(
        project_id=project_id,
        title=args.title,
        column_id=column_id,
        description=args.description,
        source_tag=args.tag or DEFAULT_SOURCE_TAG,
    )
    print(f"Created task '{task['title']}' (ID: {task['id']}) in project '{lookup['project_name']}'")
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)

    task = find_task_by_title(client.list_tasks(lookup["linked_path"]["project_id"]), args.title)
    client.delete_task(task["id"])
    print(f"Deleted task '{task['title']}' (ID: {task['id']})")
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)
    project_id = lookup["linked_path"]["project_id"]

    task = find_task_by_title(client.list_tasks(project_id), args.title)
    target = find_column_by_name_or_id(client.get_project_columns(project_id), args.column)
    client.move_task(task["id"], target["id"])
    print(f"Moved task '{task['title']}' to '{target['name']}'")
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)
    project_id = lookup["linked_path"]["project_id"]

    task = find_task_by_title(client.list_tasks(project_id), args.title)
    columns = client.get_project_columns(project_id)
    if not columns:
        raise CliError("Project has no columns")

    # Columns come back in sort-key order, so the last one is the done column
    done_column = columns[-1]
    client.move_task(task["id"], done_column["id"])
    print(f"Marked task '{task['title']}' as done (moved to '{done_column['name']}')")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    client = ApiClient.from_config()
    lookup = require_lookup(client)

    task = find_task_by_title(client.list_tasks(lookup["linked_path"]["project_id"]), args.title)
    existing = client.get_task(task["id"]).get("description")
    description = f"{existing}\n\n{args.text}" if existing else args.text

    client.update_task(task["id"], description=description)
    print(f"Updated description for task '{task['title']}'")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rk", description="Real Kanban CLI - Create tasks from anywhere")
    parser.set_defaults(func=None)
    sub = parser.add_subparsers(dest="command")

    p_init = sub.add_parser("init", help="initialize global config with API URL and key")
    p_init.add_argument("url", nargs="?", help="backend API URL, e.g. http://localhost:30100")
    p_init.add_argument("api_key", nargs="?", help="API key for authentication")
    p_init.add_argument("--url", dest="set_url", help="set only the API URL")
    p_init.add_argument("--key", dest="set_key", help="set only the API key")
    p_init.set_defaults(func=cmd_init)

    p_check = sub.add_parser("check", help="check that rk is configured and the backend answers")
    p_check.set_defaults(func=cmd_check)

    p_link = sub.add_parser("link", help="link the current directory to a project")
    p_link.add_argument("project_id", type=int)
    p_link.add_argument("-c", "--column", type=int, help="default column ID for new tasks")
    p_link.set_defaults(func=cmd_link)

    p_unlink = sub.add_parser("unlink", help="unlink the current directory")
    p_unlink.set_defaults(func=cmd_unlink)

    p_projects = sub.add_parser("projects", help="list available projects")
    p_projects.set_defaults(func=cmd_projects)

    p_columns = sub.add_parser("columns", help="list columns of the linked project")
    p_columns.set_defaults(func=cmd_columns)

    p_tasks = sub.add_parser("tasks", help="list tasks of the linked project")
    p_tasks.set_defaults(func=cmd_tasks)

    p_status = sub.add_parser("status", help="show config and the current directory's project")
    p_status.set_defaults(func=cmd_status)

    p_add = sub.add_parser("add", help="add a task to the linked project")
    p_add.add_argument("title")
    p_add.add_argument("-c", "--column", help="column name or ID, e.g. 'In Progress' or '3'")
    p_add.add_argument("-d", "--description")
    p_add.add_argument("-t", "--tag", help=f"source tag (default: '{DEFAULT_SOURCE_TAG}')")
    p_add.set_defaults(func=cmd_add)

    p_remove = sub.add_parser("remove", help="remove a task by title")
    p_remove.add_argument("title")
    p_remove.set_defaults(func=cmd_remove)

    p_move = sub.add_parser("move", help="move a task to another column")
    p_move.add_argument("title")
    p_move.add_argument("-c", "--column", required=True, help="target column name or ID")
    p_move.set_defaults(func=cmd_move)

    p_done = sub.add_parser("done", help="mark a task done (move it to the last column)")
    p_done.add_argument("title")
    p_done.set_defaults(func=cmd_done)

    p_describe = sub.add_parser("describe", help="append text to a task's description")
    p_describe.add_argument("title")
    p_describe.add_argument("text")
    p_describe.set_defaults(func=cmd_describe)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.func:
        parser.print_help()
        return 1
    try:
        return int(args.func(args) or 0)
    except (CliError, ApiError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
