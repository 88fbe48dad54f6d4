"""SVCS command line interface.

Commands: config, add, log, commit, checkout, status. Running without a
command (or with --help) prints the command list.
"""

from __future__ import annotations

import argparse
import os
import sys

from .. import __version__
from ..config import ConfigScope
from ..core.controller import SvcsController
from ..core.errors import StorageError
from ..utils.env import get_project_root
from ..utils.log import log_debug


COMMANDS: dict[str, str] = {
    "config": "Get and set a username.",
    "add": "Add a file to the index.",
    "log": "Show commit logs.",
    "commit": "Save changes.",
    "checkout": "Restore a file.",
    "status": "Show repository status.",
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svcs",
        description="SVCS - a minimal snapshot-based version control system",
        add_help=False,
    )
    parser.add_argument(
        "--help",
        "-h",
        action="store_true",
        help="Show the command list",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )

    subparsers = parser.add_subparsers(dest="command")

    config = subparsers.add_parser("config", help=COMMANDS["config"])
    config.add_argument("username", nargs="?", help="Username to store")
    config.add_argument(
        "--global",
        dest="global_scope",
        action="store_true",
        help="Store the username in ~/.svcs instead of the repository",
    )

    add = subparsers.add_parser("add", help=COMMANDS["add"])
    add.add_argument("file", nargs="?", help="File to track")

    subparsers.add_parser("log", help=COMMANDS["log"])

    commit = subparsers.add_parser("commit", help=COMMANDS["commit"])
    commit.add_argument("message", nargs="?", help="Commit message")

    checkout = subparsers.add_parser("checkout", help=COMMANDS["checkout"])
    checkout.add_argument("commit_id", nargs="?", help="Commit to restore")

    subparsers.add_parser("status", help=COMMANDS["status"])

    return parser


# Options each single-argument command accepts before its positional value
POSITIONAL_COMMANDS: dict[str, set[str]] = {
    "config": {"-h", "--help", "--global"},
    "add": {"-h", "--help"},
    "commit": {"-h", "--help"},
    "checkout": {"-h", "--help"},
}


def _guard_positional(argv: list[str], command: str | None) -> list[str]:
    """Pass a dash-prefixed value after the command through as its argument."""
    if command not in POSITIONAL_COMMANDS:
        return argv
    pos = argv.index(command) + 1
    if pos < len(argv):
        token = argv[pos]
        if token.startswith("-") and token != "--" and token not in POSITIONAL_COMMANDS[command]:
            return argv[:pos] + ["--"] + argv[pos:]
    return argv


def main(args: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if args is None else args)

    first = next((a for a in argv if not a.startswith("-")), None)
    if first is not None and first not in COMMANDS:
        print(f"'{first}' is not a SVCS command.")
        return 1

    parser = create_parser()
    parsed = parser.parse_args(_guard_positional(argv, first))

    if parsed.debug:
        os.environ["SVCS_DEBUG"] = "1"

    if parsed.help or not parsed.command:
        print_help()
        return 0

    controller = SvcsController(project_root=get_project_root())
    log_debug(f"Running {parsed.command} in {controller.project_root}")

    try:
        if parsed.command == "config":
            return cmd_config(parsed, controller)
        if parsed.command == "add":
            return cmd_add(parsed, controller)
        if parsed.command == "log":
            return cmd_log(controller)
        if parsed.command == "commit":
            return cmd_commit(parsed, controller)
        if parsed.command == "checkout":
            return cmd_checkout(parsed, controller)
        if parsed.command == "status":
            return cmd_status(controller)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_help()
    return 1


def print_help() -> None:
    print("These are SVCS commands:")
    for name, description in COMMANDS.items():
        print(f"{name:<10} {description}")


def cmd_config(args: argparse.Namespace, controller: SvcsController) -> int:
    if args.username:
        scope = ConfigScope.GLOBAL if args.global_scope else ConfigScope.PROJECT
        result = controller.set_username(args.username, scope=scope)
        if not result.get("success"):
            print(f"Error: {result.get('error')}", file=sys.stderr)
            return 1
        print(f"The username is {result['username']}.")
        return 0

    name = controller.get_username()
    if not name:
        print("Please, tell me who you are.")
    else:
        print(f"The username is {name}.")
    return 0


def cmd_add(args: argparse.Namespace, controller: SvcsController) -> int:
    if args.file:
        result = controller.track(args.file)
        if not result.get("success"):
            print(result.get("error"))
            return 1
        if result.get("tracked"):
            print(f"The file '{args.file}' is tracked.")
        return 0

    tracked = controller.list_tracked()
    if not tracked:
        print("Add a file to the index.")
        return 0

    print("Tracked files:")
    for path in tracked:
        print(path)
    return 0


def cmd_log(controller: SvcsController) -> int:
    commits = controller.list_commits()
    if not commits:
        print("No commits yet.")
        return 0

    print("\n\n".join(entry.render() for entry in commits))
    return 0


def cmd_commit(args: argparse.Namespace, controller: SvcsController) -> int:
    result = controller.commit(args.message)
    if not result.get("success"):
        print(result.get("error"))
        return 1

    if result["status"] == "nothing_to_commit":
        print("Nothing to commit.")
    else:
        print("Changes are committed.")
    return 0


def cmd_checkout(args: argparse.Namespace, controller: SvcsController) -> int:
    result = controller.checkout(args.commit_id)
    if not result.get("success"):
        print(result.get("error"))
        return 1

    print(f"Switched to commit {result['fingerprint']}.")
    return 0


def cmd_status(controller: SvcsController) -> int:
    status = controller.get_status()

    print(f"Repository:    {status.vcs_dir}")
    print(f"Author:        {status.author or '(not set)'}")
    print(f"Tracked files: {status.tracked_count}")
    print(f"Commits:       {status.commit_count}")
    if status.latest_commit:
        print(f"Latest commit: {status.latest_commit}")
    if status.tracked_count:
        state = "committed" if status.clean else "uncommitted changes"
        print(f"Working tree:  {state}")

    validation = controller.validate_system()
    if not validation["valid"]:
        print("\nIssues:")
        for issue in validation["issues"]:
            print(f"  - {issue}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
