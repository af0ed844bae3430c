"""Argument parsing, task selection and help output for the launcher."""

from __future__ import annotations

import argparse
import enum
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, TextIO

from godelkit.version import APP_NAME, version_output


class LauncherError(Exception):
    """Raised for invalid launcher input or task configuration."""


@dataclass
class GlobalConfig:
    """Configuration provided to the initial invocation of the launcher."""

    executable: str = ""
    wrapper: str = ""
    debug: bool = False
    version: bool = False
    help: bool = False
    task: str = ""
    task_args: list[str] = field(default_factory=list)

    def project_dir(self) -> str:
        """Return the directory that holds the wrapper script."""
        if not self.wrapper:
            raise LauncherError("wrapper must be specified to determine project directory")
        return os.path.normpath(os.path.dirname(self.wrapper) or ".")


class FlagType(enum.Enum):
    STRING = 0
    BOOL = 1


_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


@dataclass
class VerifyFlag:
    name: str
    description: str = ""
    type: FlagType = FlagType.STRING

    def add_to_parser(self, parser: argparse.ArgumentParser) -> str:
        """Add this flag to the parser and return the attribute name that holds its value."""
        dest = self.name.replace("-", "_")
        if self.type is FlagType.STRING:
            parser.add_argument(f"--{self.name}", dest=dest, default="", help=self.description)
        elif self.type is FlagType.BOOL:
            parser.add_argument(
                f"--{self.name}",
                dest=dest,
                nargs="?",
                const=True,
                default=False,
                type=_parse_bool,
                help=self.description,
            )
        else:
            raise LauncherError(f"unrecognized flag type: {self.type}")
        return dest

    def to_flag_args(self, value: Any) -> list[str]:
        """Rebuild the command-line arguments that give this flag the value."""
        if self.type is FlagType.STRING:
            if not value:
                return []
            return [f"--{self.name}", str(value)]
        if self.type is FlagType.BOOL:
            if value is None:
                return []
            return [f"--{self.name}={'true' if value else 'false'}"]
        raise LauncherError(f"unrecognized flag type: {self.type}")


@dataclass
class VerifyOptions:
    verify_task_flags: list[VerifyFlag] = field(default_factory=list)
    ordering: int = 0
    apply_true_args: list[str] = field(default_factory=list)
    apply_false_args: list[str] = field(default_factory=list)


@dataclass
class GlobalFlagOptions:
    """Flags (with leading hyphens) through which global settings are passed to a plugin."""

    debug_flag: str = ""
    project_dir_flag: str = ""
    godel_config_flag: str = ""
    config_flag: str = ""


@dataclass
class Task:
    name: str
    description: str
    run_impl: Callable[["Task", GlobalConfig, TextIO], None]
    config_file: str = ""
    global_flag_opts: GlobalFlagOptions = field(default_factory=GlobalFlagOptions)
    verify: Optional[VerifyOptions] = None

    def run(self, global_config: GlobalConfig, stdout: TextIO) -> None:
        self.run_impl(self, global_config, stdout)


@dataclass
class UpgradeConfigTask:
    id: str
    config_file: str
    run_impl: Callable[["UpgradeConfigTask", GlobalConfig, bytes, TextIO], bytes]
    legacy_config_file: str = ""
    global_flag_opts: GlobalFlagOptions = field(default_factory=GlobalFlagOptions)

    def run(self, config_bytes: bytes, global_config: GlobalConfig, stdout: TextIO) -> bytes:
        return self.run_impl(self, global_config, config_bytes, stdout)


def parse_app_args(args: Sequence[str]) -> GlobalConfig:
    """Parse ``[executable] [global flags] [task] [task args...]`` into a GlobalConfig.

    Global flags must be given exactly as --version, --help, -h, --debug or --wrapper <path>.
    """
    if not args:
        raise LauncherError("args cannot be empty")
    cfg = GlobalConfig(executable=args[0])
    remaining = list(args[1:])
    if not remaining:
        cfg.help = True
        return cfg

    while remaining:
        arg = remaining.pop(0)
        if arg == "--":
            continue
        if arg.startswith("-"):
            if arg == "--version":
                cfg.version = True
            elif arg in ("--help", "-h"):
                cfg.help = True
            elif arg == "--debug":
                cfg.debug = True
            elif arg == "--wrapper":
                if not remaining:
                    raise LauncherError("flag '--wrapper' must specify a value")
                cfg.wrapper = remaining.pop(0)
            else:
                raise LauncherError(f"unknown flag: {arg}")
            continue
        cfg.task = arg
        cfg.task_args = remaining
        break
    return cfg


def _version_flag_task() -> Task:
    def _run(task: Task, global_config: GlobalConfig, stdout: TextIO) -> None:
        stdout.write(version_output() + "\n")

    return Task(name="version", description=f"print {APP_NAME} version", run_impl=_run)


def _help_flag_task(tasks: Sequence[Task]) -> Task:
    tasks = list(tasks)

    def _run(task: Task, global_config: GlobalConfig, stdout: TextIO) -> None:
        if tasks:
            stdout.write(_usage(tasks, with_completion=True) + "\n")

    return Task(name="help", description=f"help for {APP_NAME}", run_impl=_run)


def task_for_input(global_config: GlobalConfig, tasks: Sequence[Task]) -> Task:
    """Return the task selected by the global configuration."""
    if not global_config.task:
        if not global_config.help and global_config.version:
            return _version_flag_task()
        return _help_flag_task(tasks)

    by_name: dict[str, Task] = {}
    for task in tasks:
        if task.name in by_name:
            raise LauncherError(f'command "{task.name}" defined multiple times')
        by_name[task.name] = task
    try:
        return by_name[global_config.task]
    except KeyError:
        raise LauncherError(
            f'unknown command "{global_config.task}" for "{APP_NAME}"'
        ) from None


_MIN_NAME_PADDING = 11
_COMPLETION_SHORT = "Generate the autocompletion script for the specified shell"


def _command_name(use: str) -> str:
    words = use.split()
    return words[0] if words else ""


def _flag_lines() -> list[str]:
    version_task = _version_flag_task()
    flags = [
        ("debug", "", "", "run in debug mode (print full stack traces on failures and include "
                          "other debugging output)"),
        ("help", "h", "", f"help for {APP_NAME}"),
        (version_task.name, "", "", version_task.description),
        ("wrapper", "", "string", "path to the wrapper script for this invocation"),
    ]
    entries = []
    for name, shorthand, varname, usage in sorted(flags):
        prefix = f"  -{shorthand}, --{name}" if shorthand else f"      --{name}"
        if varname:
            prefix += f" {varname}"
        entries.append((prefix, usage))
    width = max(len(prefix) for prefix, _ in entries) + 1
    return [f"{prefix} {' ' * (width - len(prefix))} {usage}" for prefix, usage in entries]


def _usage(tasks: Sequence[Task], with_completion: bool) -> str:
    commands = [(_command_name(t.name), t.description) for t in tasks]
    if with_completion and commands:
        commands.append(("completion", _COMPLETION_SHORT))
    commands.sort(key=lambda item: item[0])

    lines = ["Usage:"]
    if commands:
        lines.append(f"  {APP_NAME} [command]")
        padding = max([_MIN_NAME_PADDING, *(len(name) for name, _ in commands)])
        lines += ["", "Available Commands:"]
        lines += [f"  {name.ljust(padding)} {short}" for name, short in commands]
    lines += ["", "Flags:", *_flag_lines()]
    if commands:
        lines += ["", f'Use "{APP_NAME} [command] --help" for more information about a command.']
    return "\n".join(lines)


def usage_string(tasks: Sequence[Task]) -> str:
    """Return the launcher usage text for the tasks, without a trailing newline."""
    return _usage(tasks, with_completion=False)