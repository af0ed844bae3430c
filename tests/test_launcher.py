import argparse
import io

import pytest

from godelkit.launcher import (
    FlagType,
    GlobalConfig,
    LauncherError,
    Task,
    UpgradeConfigTask,
    VerifyFlag,
    parse_app_args,
    task_for_input,
    usage_string,
)
from godelkit.version import version_output


def _noop(task, global_config, stdout):
    stdout.write(f"ran {task.name}")


def _task(name, description=""):
    return Task(name=name, description=description, run_impl=_noop)


def test_parse_empty_args_raises():
    with pytest.raises(LauncherError, match="args cannot be empty"):
        parse_app_args([])


def test_parse_only_executable_sets_help():
    cfg = parse_app_args(["godelw"])
    assert cfg == GlobalConfig(executable="godelw", help=True)


def test_parse_global_flags_and_task():
    cfg = parse_app_args(
        ["exe", "--debug", "--wrapper", "/p/godelw", "--", "build", "--flag", "x"]
    )
    assert cfg.executable == "exe"
    assert cfg.debug is True
    assert cfg.wrapper == "/p/godelw"
    assert cfg.task == "build"
    assert cfg.task_args == ["--flag", "x"]
    assert cfg.help is False and cfg.version is False


def test_parse_version_and_help_flags():
    cfg = parse_app_args(["exe", "--version", "-h"])
    assert cfg.version is True
    assert cfg.help is True
    assert cfg.task == ""


def test_parse_wrapper_without_value():
    with pytest.raises(LauncherError, match="flag '--wrapper' must specify a value"):
        parse_app_args(["exe", "--wrapper"])


@pytest.mark.parametrize("flag", ["--version=true", "--foo", "-x"])
def test_parse_unknown_flag(flag):
    with pytest.raises(LauncherError) as info:
        parse_app_args(["exe", flag])
    assert str(info.value) == f"unknown flag: {flag}"


def test_project_dir():
    assert GlobalConfig(wrapper="/tmp/project/godelw").project_dir() == "/tmp/project"
    assert GlobalConfig(wrapper="godelw").project_dir() == "."


def test_project_dir_requires_wrapper():
    with pytest.raises(LauncherError, match="wrapper must be specified"):
        GlobalConfig().project_dir()


def test_task_for_input_selects_named_task():
    tasks = [_task("build"), _task("test")]
    chosen = task_for_input(GlobalConfig(task="test"), tasks)
    assert chosen is tasks[1]


def test_task_for_input_unknown_command():
    with pytest.raises(LauncherError) as info:
        task_for_input(GlobalConfig(task="nope"), [_task("build")])
    assert str(info.value) == 'unknown command "nope" for "godel"'


def test_task_for_input_duplicate_names():
    with pytest.raises(LauncherError) as info:
        task_for_input(GlobalConfig(task="build"), [_task("build"), _task("build")])
    assert str(info.value) == 'command "build" defined multiple times'


def test_version_task_prints_version():
    task = task_for_input(GlobalConfig(version=True), [])
    out = io.StringIO()
    task.run(GlobalConfig(version=True), out)
    assert task.name == "version"
    assert out.getvalue() == version_output() + "\n"


def test_help_preferred_over_version():
    task = task_for_input(GlobalConfig(version=True, help=True), [_task("build")])
    assert task.name == "help"


def test_help_task_prints_usage_with_completion():
    tasks = [_task("build", "build things")]
    task = task_for_input(GlobalConfig(), tasks)
    out = io.StringIO()
    task.run(GlobalConfig(), out)
    text = out.getvalue()
    assert text.endswith("\n")
    assert "  completion " in text
    assert "  build " in text
    assert "completion" not in usage_string(tasks)


def test_help_task_without_tasks_prints_nothing():
    out = io.StringIO()
    task_for_input(GlobalConfig(help=True), []).run(GlobalConfig(help=True), out)
    assert out.getvalue() == ""


def test_usage_string_pinned():
    tasks = [_task("verify", "run verify"), _task("build", "build things")]
    expected = "\n".join(
        [
            "Usage:",
            "  godel [command]",
            "",
            "Available Commands:",
            "  build" + " " * 7 + "build things",
            "  verify" + " " * 6 + "run verify",
            "",
            "Flags:",
            "      --debug" + " " * 12 + "run in debug mode (print full stack traces on "
            "failures and include other debugging output)",
            "  -h, --help" + " " * 13 + "help for godel",
            "      --version" + " " * 10 + "print godel version",
            "      --wrapper string   path to the wrapper script for this invocation",
            "",
            'Use "godel [command] --help" for more information about a command.',
        ]
    )
    assert usage_string(tasks) == expected


def test_usage_string_has_no_trailing_newline_and_no_commands_section_when_empty():
    text = usage_string([])
    assert not text.endswith("\n")
    assert "Available Commands:" not in text
    assert "Flags:" in text


def test_task_run_passes_task_and_stdout():
    out = io.StringIO()
    _task("lint").run(GlobalConfig(), out)
    assert out.getvalue() == "ran lint"


def test_upgrade_config_task_run_argument_order():
    seen = {}

    def _impl(task, global_config, config_bytes, stdout):
        seen["task"] = task
        seen["global"] = global_config
        return config_bytes.upper()

    task = UpgradeConfigTask(id="com.palantir.godel:godel", config_file="godel.yml", run_impl=_impl)
    cfg = GlobalConfig(executable="exe")
    assert task.run(b"abc", cfg, io.StringIO()) == b"ABC"
    assert seen["task"] is task
    assert seen["global"] is cfg


def test_string_verify_flag_round_trip():
    flag = VerifyFlag(name="skip-dir", description="dir", type=FlagType.STRING)
    parser = argparse.ArgumentParser()
    dest = flag.add_to_parser(parser)
    ns = parser.parse_args(["--skip-dir", "vendor"])
    assert flag.to_flag_args(getattr(ns, dest)) == ["--skip-dir", "vendor"]
    empty = parser.parse_args([])
    assert flag.to_flag_args(getattr(empty, dest)) == []


def test_bool_verify_flag_round_trip():
    flag = VerifyFlag(name="apply", description="apply", type=FlagType.BOOL)
    parser = argparse.ArgumentParser()
    dest = flag.add_to_parser(parser)
    assert flag.to_flag_args(getattr(parser.parse_args(["--apply"]), dest)) == ["--apply=true"]
    assert flag.to_flag_args(getattr(parser.parse_args(["--apply=false"]), dest)) == [
        "--apply=false"
    ]
    assert flag.to_flag_args(getattr(parser.parse_args([]), dest)) == ["--apply=false"]
    assert flag.to_flag_args(None) == []


def test_unrecognized_flag_type():
    flag = VerifyFlag(name="x", type="other")
    with pytest.raises(LauncherError, match="unrecognized flag type"):
        flag.to_flag_args("v")
    with pytest.raises(LauncherError, match="unrecognized flag type"):
        flag.add_to_parser(argparse.ArgumentParser())