"""Loading, dumping, upgrading and combining godel.yml configuration."""

from __future__ import annotations

import copy
import os
from typing import Any, AnyStr

import yaml

from godelkit.models import (
    ConfigError,
    GodelConfig,
    PluginsConfig,
    SinglePluginConfig,
    TasksConfig,
)
from godelkit.plugins import uniquify
from godelkit.projectpaths import NamesPathsCfg


def _parse_yaml(text: str | bytes, what: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ConfigError(f"failed to unmarshal {what} YAML: {err}") from err


def _override_keys(plugins: list[SinglePluginConfig]) -> set[str]:
    keys = set()
    for plugin in plugins:
        if not plugin.override:
            continue
        try:
            keys.add(plugin.locator.locator().group_and_product())
        except ConfigError:
            # an unparsable locator is not treated as an override; it fails later anyway
            continue
    return keys


def combine_tasks_config(base: TasksConfig, *args: TasksConfig) -> TasksConfig:
    """Return base combined with the given configurations; later values win on conflicts.

    Resolvers are appended and made unique, default task entries are overwritten by key,
    and plugins from the inputs are appended after the base plugins, dropping base plugins
    whose group and product are overridden by an input plugin marked ``override``.
    """
    result = copy.deepcopy(base)
    from_configs: list[SinglePluginConfig] = []
    for cfg in args:
        result.default_tasks.default_resolvers = uniquify(
            [*result.default_tasks.default_resolvers, *cfg.default_tasks.default_resolvers]
        )
        result.default_tasks.tasks.update(copy.deepcopy(cfg.default_tasks.tasks))
        result.plugins.default_resolvers = uniquify(
            [*result.plugins.default_resolvers, *cfg.plugins.default_resolvers]
        )
        from_configs.extend(copy.deepcopy(cfg.plugins.plugins))

    overridden = _override_keys(from_configs)

    def _kept(plugin: SinglePluginConfig) -> bool:
        try:
            return plugin.locator.locator().group_and_product() not in overridden
        except ConfigError:
            return True

    result.plugins.plugins = [p for p in result.plugins.plugins if _kept(p)] + from_configs
    return result


def load_godel_config(text: str | bytes) -> GodelConfig:
    """Parse godel.yml content into a GodelConfig. Unknown keys are ignored."""
    return GodelConfig.from_dict(_parse_yaml(text, "gödel config"))


def dump_godel_config(cfg: GodelConfig) -> str:
    """Serialise the configuration as YAML, omitting empty values."""
    return yaml.safe_dump(
        cfg.to_dict(), sort_keys=False, default_flow_style=False, allow_unicode=True
    )


def load_plugins_config(text: str | bytes) -> PluginsConfig:
    """Parse the YAML of a plugins section into a PluginsConfig."""
    return PluginsConfig.from_dict(_parse_yaml(text, "plugins config"))


def _config_version(data: str | bytes) -> str:
    doc = _parse_yaml(data, "versioned config")
    if doc is None:
        return ""
    if not isinstance(doc, dict):
        raise ConfigError("configuration must be a mapping")
    version = doc.get("version")
    if version is None:
        return ""
    return str(version)


def upgrade_config(data: AnyStr) -> AnyStr:
    """Check that the configuration is valid for its version and return it unchanged.

    Only version "0" (or no version) is supported; any other version raises ConfigError.
    """
    version = _config_version(data)
    if version not in ("", "0"):
        raise ConfigError(f"unsupported version: {version}")
    try:
        GodelConfig.from_dict(_parse_yaml(data, "godel v0"))
    except ConfigError as err:
        raise ConfigError(f"failed to unmarshal godel v0 configuration: {err}") from err
    return data


def read_godel_config_from_file(path: str | os.PathLike) -> GodelConfig:
    """Read configuration from the file; an absent file gives an empty configuration."""
    if not os.path.exists(path):
        return GodelConfig()
    with open(path, "rb") as handle:
        content = handle.read()
    try:
        upgraded = upgrade_config(content)
    except ConfigError as err:
        raise ConfigError(f"failed to upgrade configuration: {err}") from err
    return load_godel_config(upgraded)


def read_godel_config_excludes_from_file(path: str | os.PathLike) -> NamesPathsCfg:
    """Read only the "exclude" section of the configuration file.

    Other keys are not examined, so unrecognised content elsewhere is tolerated.
    An absent file gives an empty configuration.
    """
    if not os.path.exists(path):
        return NamesPathsCfg()
    with open(path, "rb") as handle:
        doc = _parse_yaml(handle.read(), "exclude config")
    if doc is None:
        return NamesPathsCfg()
    if not isinstance(doc, dict):
        raise ConfigError("configuration must be a mapping")
    try:
        return NamesPathsCfg.from_dict(doc.get("exclude"))
    except ValueError as err:
        raise ConfigError(f"exclude: {err}") from err