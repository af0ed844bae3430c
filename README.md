# godelkit

The core of a plugin-driven project build tool, as a library:

- **Launcher** (`godelkit.launcher`): parses the tool's global command line
  (`--version`, `--help`/`-h`, `--debug`, `--wrapper <path>`), picks the task to
  run, and renders usage text.
- **Configuration** (`godelkit.config`, `godelkit.models`): loads, validates and
  writes `godel.yml`, merges task configurations, and reads the project's
  exclude rules.
- **Default tasks** (`godelkit.defaulttasks`): the built-in plugin set with its
  pinned versions and checksums, plus user overrides of locators, resolvers and
  assets.
- **Project paths** (`godelkit.projectpaths`): lists the files of a project that
  match include and exclude matchers.

## Parsing the command line

```python
import sys
from godelkit.launcher import Task, parse_app_args, task_for_input, usage_string

def run_build(task, global_config, stdout):
    stdout.write(f"building with {global_config.task_args}\n")

tasks = [Task(name="build", description="build the project", run_impl=run_build)]

cfg = parse_app_args(["./godelw", "--debug", "build", "--verbose"])
# cfg.debug is True, cfg.task == "build", cfg.task_args == ["--verbose"]

task = task_for_input(cfg, tasks)
task.run(cfg, sys.stdout)

print(usage_string(tasks))
```

Flags are accepted only in exactly the forms listed above; anything else (for
example `--debug=true` or `--wrapper=path`) raises `LauncherError`. `--` is
skipped, and the first non-flag argument is the task; everything after it is
passed to the task. With only the executable given, help is assumed.

With no task given, `task_for_input` returns a help task (which writes the usage
text) or, when `--version` was passed without `--help`, a version task that
writes `godel version <version>`. Duplicate task names and unknown tasks raise
`LauncherError`. `GlobalConfig.project_dir()` gives the directory holding the
wrapper script and raises `LauncherError` if no wrapper was given.

`VerifyFlag` describes a string or boolean flag of a verify task:
`add_to_parser` adds it to an `argparse.ArgumentParser`, and `to_flag_args`
turns a value back into command-line arguments. `UpgradeConfigTask` wraps a
function that upgrades a configuration file's bytes.

## Reading configuration

```python
from godelkit.config import (
    combine_tasks_config,
    dump_godel_config,
    load_godel_config,
    read_godel_config_excludes_from_file,
    read_godel_config_from_file,
    upgrade_config,
)

cfg = read_godel_config_from_file("godel/config/godel.yml")
excludes = read_godel_config_excludes_from_file("godel/config/godel.yml")
print(dump_godel_config(cfg))
```

A missing file yields an empty configuration rather than an error. Unknown
top-level keys are ignored; values of the wrong shape raise
`godelkit.models.ConfigError`. The excludes reader looks only at the `exclude`
section, so problems elsewhere in the file do not affect it.

`upgrade_config` accepts configuration with no version or version `"0"`, checks
that it parses, and returns it unchanged; any other version raises
`ConfigError`.

`combine_tasks_config(base, *others)` returns a merged copy: resolver lists are
joined without duplicates, later default-task entries win, and plugins from the
other configurations are appended after the base plugins, dropping base plugins
whose group and product match a plugin marked `override`.

`PluginsConfig.validate()` checks every plugin and asset locator; a locator ID
that is not `group:product:version` raises `ConfigError` (for example
`invalid locator: locator ID must consist of 3 colon-delimited components ...`).

## Default tasks

```python
from godelkit.defaulttasks import (
    builtin_plugins_config,
    builtin_upgrade_config_tasks,
    plugins_config,
)

resolved = plugins_config(cfg.tasks.default_tasks, builtin_plugins_config())
```

User resolvers are placed before the built-in resolver. Each built-in plugin,
keyed by `group:product`, can have its locator or resolver replaced, its default
assets dropped entirely (`exclude-all-default-assets`) or one by one
(`exclude-default-assets`), and extra assets added. Keys that do not name a
built-in plugin raise `ConfigError` listing the invalid and the valid keys.
`builtin_upgrade_config_tasks()` returns the upgrade task for `godel.yml`.

## Listing project files

```python
from godelkit.projectpaths import NameMatcher, PathMatcher, list_project_paths

paths = list_project_paths("path/to/project", NameMatcher(r".+"), PathMatcher("vendor"))
```

`NameMatcher` matches a path when any component fully matches one of its
regular expressions; `PathMatcher` matches a path at or below one of its glob
paths. Paths are returned relative to the current working directory, in a
directory walk that visits entries in sorted order. No include matcher means no
paths.

## What this package does not do

It has no command-line program of its own. It does not download, unpack,
checksum-verify or run plugins and assets, and it does not locate a project's
configuration directory from its layout; callers pass file paths and tasks in
directly.