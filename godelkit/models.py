"""Configuration model of the godel.yml file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from godelkit.projectpaths import NamesPathsCfg


class ConfigError(ValueError):
    """Raised when configuration is malformed or invalid."""


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _scalar_str(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"{what} must be a string, got {type(value).__name__}")


def _str_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list, got {type(value).__name__}")
    return [_scalar_str(item, what) for item in value]


def _str_map(value: Any, what: str) -> dict[str, str]:
    return {
        _scalar_str(key, what): _scalar_str(item, what)
        for key, item in _mapping(value, what).items()
    }


def _bool(value: Any, what: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigError(f"{what} must be a boolean, got {type(value).__name__}")


def _list_of(value: Any, what: str, cls: Any) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list, got {type(value).__name__}")
    return [cls.from_dict(item) for item in value]


def _compact(items: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in items.items() if value}


def _sorted_map(values: Mapping[str, Any]) -> dict[str, Any]:
    return dict(sorted(values.items()))


def _check_os_arch(key: str, locator_id: str) -> None:
    parts = key.split("-")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(
            f"invalid OSArch specified in checksum key for {locator_id}: "
            f"invalid OSArch: {key}"
        )


@dataclass(frozen=True, order=True)
class Locator:
    """Identifies an artifact by group, product and version."""

    group: str
    product: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.product}:{self.version}"

    def group_and_product(self) -> str:
        return f"{self.group}:{self.product}"


@dataclass
class LocatorConfig:
    id: str = ""
    checksums: dict[str, str] = field(default_factory=dict)

    def locator(self) -> Locator:
        """Parse the ID into a Locator, checking the checksum keys."""
        parts = self.id.split(":")
        if len(parts) != 3:
            raise ConfigError(
                "locator ID must consist of 3 colon-delimited components "
                f"([group]:[product]:[version]), but had {len(parts)}: {json.dumps(self.id)}"
            )
        for key in self.checksums:
            _check_os_arch(key, self.id)
        return Locator(*parts)

    @classmethod
    def from_dict(cls, data: Any) -> "LocatorConfig":
        data = _mapping(data, "locator")
        return cls(
            id=_scalar_str(data.get("id"), "id"),
            checksums=_str_map(data.get("checksums"), "checksums"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({"id": self.id, "checksums": _sorted_map(self.checksums)})


@dataclass
class ConfigProviderLocatorConfig:
    """Locator for a configuration provider, which carries a single checksum."""

    id: str = ""
    checksum: str = ""

    def to_locator_config(self, os_arch: str) -> LocatorConfig:
        """Return a LocatorConfig whose checksum, if any, is keyed by the given OS/arch."""
        checksums = {os_arch: self.checksum} if self.checksum else {}
        return LocatorConfig(id=self.id, checksums=checksums)

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigProviderLocatorConfig":
        data = _mapping(data, "locator")
        return cls(
            id=_scalar_str(data.get("id"), "id"),
            checksum=_scalar_str(data.get("checksum"), "checksum"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({"id": self.id, "checksum": self.checksum})


@dataclass
class LocatorWithResolverConfig:
    locator: LocatorConfig = field(default_factory=LocatorConfig)
    resolver: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "LocatorWithResolverConfig":
        data = _mapping(data, "locator with resolver")
        return cls(
            locator=LocatorConfig.from_dict(data.get("locator")),
            resolver=_scalar_str(data.get("resolver"), "resolver"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({"locator": self.locator.to_dict(), "resolver": self.resolver})


@dataclass
class ConfigProviderLocatorWithResolverConfig:
    locator: ConfigProviderLocatorConfig = field(default_factory=ConfigProviderLocatorConfig)
    resolver: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigProviderLocatorWithResolverConfig":
        data = _mapping(data, "config provider")
        return cls(
            locator=ConfigProviderLocatorConfig.from_dict(data.get("locator")),
            resolver=_scalar_str(data.get("resolver"), "resolver"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact({"locator": self.locator.to_dict(), "resolver": self.resolver})


def _resolved_locator(cfg: Any) -> Locator:
    try:
        return cfg.locator.locator()
    except ConfigError as err:
        raise ConfigError(f"invalid locator: {err}") from err


@dataclass
class SingleDefaultTaskConfig:
    """Overrides for one default task; locator and resolver replace the defaults when set."""

    locator: LocatorConfig = field(default_factory=LocatorConfig)
    resolver: str = ""
    exclude_all_default_assets: bool = False
    default_assets_to_exclude: list[str] = field(default_factory=list)
    assets: list[LocatorWithResolverConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SingleDefaultTaskConfig":
        data = _mapping(data, "default task")
        return cls(
            locator=LocatorConfig.from_dict(data.get("locator")),
            resolver=_scalar_str(data.get("resolver"), "resolver"),
            exclude_all_default_assets=_bool(
                data.get("exclude-all-default-assets"), "exclude-all-default-assets"
            ),
            default_assets_to_exclude=_str_list(
                data.get("exclude-default-assets"), "exclude-default-assets"
            ),
            assets=_list_of(data.get("assets"), "assets", LocatorWithResolverConfig),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "locator": self.locator.to_dict(),
                "resolver": self.resolver,
                "exclude-all-default-assets": self.exclude_all_default_assets,
                "exclude-default-assets": list(self.default_assets_to_exclude),
                "assets": [asset.to_dict() for asset in self.assets],
            }
        )


@dataclass
class DefaultTasksConfig:
    default_resolvers: list[str] = field(default_factory=list)
    tasks: dict[str, SingleDefaultTaskConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "DefaultTasksConfig":
        data = _mapping(data, "default-tasks")
        tasks = {
            _scalar_str(key, "task key"): SingleDefaultTaskConfig.from_dict(value)
            for key, value in _mapping(data.get("tasks"), "tasks").items()
        }
        return cls(
            default_resolvers=_str_list(data.get("resolvers"), "resolvers"),
            tasks=tasks,
        )

    def to_dict(self) -> dict[str, Any]:
        tasks = {key: task.to_dict() for key, task in sorted(self.tasks.items())}
        return _compact({"resolvers": list(self.default_resolvers), "tasks": tasks})


@dataclass
class SinglePluginConfig:
    locator: LocatorConfig = field(default_factory=LocatorConfig)
    resolver: str = ""
    override: bool = False
    assets: list[LocatorWithResolverConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SinglePluginConfig":
        data = _mapping(data, "plugin")
        return cls(
            locator=LocatorConfig.from_dict(data.get("locator")),
            resolver=_scalar_str(data.get("resolver"), "resolver"),
            override=_bool(data.get("override"), "override"),
            assets=_list_of(data.get("assets"), "assets", LocatorWithResolverConfig),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "locator": self.locator.to_dict(),
                "resolver": self.resolver,
                "override": self.override,
                "assets": [asset.to_dict() for asset in self.assets],
            }
        )


@dataclass
class PluginsConfig:
    default_resolvers: list[str] = field(default_factory=list)
    plugins: list[SinglePluginConfig] = field(default_factory=list)

    def validate(self) -> list[Locator]:
        """Check every plugin and asset locator; return the plugin locators in order."""
        locators = []
        for plugin in self.plugins:
            locators.append(_resolved_locator(plugin))
            for asset in plugin.assets:
                _resolved_locator(asset)
        return locators

    @classmethod
    def from_dict(cls, data: Any) -> "PluginsConfig":
        data = _mapping(data, "plugins")
        return cls(
            default_resolvers=_str_list(data.get("resolvers"), "resolvers"),
            plugins=_list_of(data.get("plugins"), "plugins", SinglePluginConfig),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "resolvers": list(self.default_resolvers),
                "plugins": [plugin.to_dict() for plugin in self.plugins],
            }
        )


@dataclass
class TasksConfigProvidersConfig:
    default_resolvers: list[str] = field(default_factory=list)
    config_providers: list[ConfigProviderLocatorWithResolverConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "TasksConfigProvidersConfig":
        data = _mapping(data, "tasks-config-providers")
        return cls(
            default_resolvers=_str_list(data.get("resolvers"), "resolvers"),
            config_providers=_list_of(
                data.get("providers"), "providers", ConfigProviderLocatorWithResolverConfig
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "resolvers": list(self.default_resolvers),
                "providers": [provider.to_dict() for provider in self.config_providers],
            }
        )


@dataclass
class TasksConfig:
    default_tasks: DefaultTasksConfig = field(default_factory=DefaultTasksConfig)
    plugins: PluginsConfig = field(default_factory=PluginsConfig)

    @classmethod
    def from_dict(cls, data: Any) -> "TasksConfig":
        data = _mapping(data, "tasks configuration")
        return cls(
            default_tasks=DefaultTasksConfig.from_dict(data.get("default-tasks")),
            plugins=PluginsConfig.from_dict(data.get("plugins")),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"default-tasks": self.default_tasks.to_dict(), "plugins": self.plugins.to_dict()}
        )


@dataclass
class GodelConfig:
    """Top-level configuration; the task fields sit at the top level of the document."""

    version: str = ""
    tasks_config_providers: TasksConfigProvidersConfig = field(
        default_factory=TasksConfigProvidersConfig
    )
    environment: dict[str, str] = field(default_factory=dict)
    tasks: TasksConfig = field(default_factory=TasksConfig)
    exclude: NamesPathsCfg = field(default_factory=NamesPathsCfg)

    @classmethod
    def from_dict(cls, data: Any) -> "GodelConfig":
        data = _mapping(data, "godel configuration")
        try:
            exclude = NamesPathsCfg.from_dict(data.get("exclude"))
        except ValueError as err:
            raise ConfigError(f"exclude: {err}") from err
        return cls(
            version=_scalar_str(data.get("version"), "version"),
            tasks_config_providers=TasksConfigProvidersConfig.from_dict(
                data.get("tasks-config-providers")
            ),
            environment=_str_map(data.get("environment"), "environment"),
            tasks=TasksConfig.from_dict(data),
            exclude=exclude,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": self.version,
            "tasks-config-providers": self.tasks_config_providers.to_dict(),
            "environment": _sorted_map(self.environment),
        }
        out.update(self.tasks.to_dict())
        out["exclude"] = self.exclude.to_dict()
        return _compact(out)