import io

import pytest

from godelkit.defaulttasks import (
    DEFAULT_RESOLVER,
    builtin_plugins_config,
    builtin_upgrade_config_tasks,
    plugins_config,
)
from godelkit.launcher import GlobalConfig
from godelkit.models import (
    ConfigError,
    DefaultTasksConfig,
    LocatorConfig,
    LocatorWithResolverConfig,
    PluginsConfig,
    SingleDefaultTaskConfig,
    SinglePluginConfig,
)

CUSTOM_DEFAULT_RESOLVER = (
    "default/repo/{{GroupPath}}/{{Product}}/{{Version}}/"
    "{{Product}}-{{OS}}-{{Arch}}-{{Version}}.tgz"
)


def _lwr(locator_id, resolver=""):
    return LocatorWithResolverConfig(locator=LocatorConfig(id=locator_id), resolver=resolver)


def _test_builtin():
    return PluginsConfig(
        default_resolvers=[DEFAULT_RESOLVER],
        plugins=[
            SinglePluginConfig(
                locator=LocatorConfig(id="com.palantir.test:test-plugin:1.2.3"),
                assets=[
                    _lwr("com.palantir.test:test-asset-1:2.3.4"),
                    _lwr("com.palantir.test:test-asset-2:3.4.5"),
                ],
            )
        ],
    )


def _expected(locator_id="com.palantir.test:test-plugin:1.2.3", resolver="", assets=None,
              resolvers=None):
    if assets is None:
        assets = ["com.palantir.test:test-asset-1:2.3.4", "com.palantir.test:test-asset-2:3.4.5"]
    return PluginsConfig(
        default_resolvers=resolvers if resolvers is not None else [DEFAULT_RESOLVER],
        plugins=[
            SinglePluginConfig(
                locator=LocatorConfig(id=locator_id),
                resolver=resolver,
                assets=[_lwr(asset) for asset in assets],
            )
        ],
    )


CASES = [
    (
        "empty task param results in default configuration",
        DefaultTasksConfig(),
        _expected(),
    ),
    (
        "specifying custom resolver overrides resolver",
        DefaultTasksConfig(
            tasks={"com.palantir.test:test-plugin": SingleDefaultTaskConfig(resolver="custom-resolver")}
        ),
        _expected(resolver="custom-resolver"),
    ),
    (
        "specifying custom locator overrides locator",
        DefaultTasksConfig(
            tasks={
                "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                    locator=LocatorConfig(id="com.palantir.godel:override:1.2.3")
                )
            }
        ),
        _expected(locator_id="com.palantir.godel:override:1.2.3"),
    ),
    (
        "specifying default resolver appends default resolver",
        DefaultTasksConfig(
            default_resolvers=[CUSTOM_DEFAULT_RESOLVER],
            tasks={
                "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                    locator=LocatorConfig(id="com.palantir.godel:override:1.2.3")
                )
            },
        ),
        _expected(
            locator_id="com.palantir.godel:override:1.2.3",
            resolvers=[CUSTOM_DEFAULT_RESOLVER, DEFAULT_RESOLVER],
        ),
    ),
    (
        "specifying custom asset adds only that asset",
        DefaultTasksConfig(
            tasks={
                "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                    assets=[_lwr("com.palantir.godel:custom-asset:1.2.3")]
                )
            }
        ),
        _expected(
            assets=[
                "com.palantir.test:test-asset-1:2.3.4",
                "com.palantir.test:test-asset-2:3.4.5",
                "com.palantir.godel:custom-asset:1.2.3",
            ]
        ),
    ),
    (
        "setting exclude all and specifying custom asset adds asset to default",
        DefaultTasksConfig(
            tasks={
                "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                    exclude_all_default_assets=True,
                    assets=[_lwr("com.palantir.godel:custom-asset:1.2.3")],
                )
            }
        ),
        _expected(assets=["com.palantir.godel:custom-asset:1.2.3"]),
    ),
    (
        "specifying default asset with exclude and custom asset adds asset",
        DefaultTasksConfig(
            tasks={
                "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                    default_assets_to_exclude=["com.palantir.test:test-asset-2"],
                    assets=[_lwr("com.palantir.godel:custom-asset:1.2.3")],
                )
            }
        ),
        _expected(
            assets=["com.palantir.test:test-asset-1:2.3.4", "com.palantir.godel:custom-asset:1.2.3"]
        ),
    ),
]


@pytest.mark.parametrize("name,given,want", CASES, ids=[case[0] for case in CASES])
def test_plugins_config(name, given, want):
    assert plugins_config(given, _test_builtin()) == want


def test_plugins_config_invalid_key():
    given = DefaultTasksConfig(
        tasks={
            "com.palantir.test:test": SingleDefaultTaskConfig(
                locator=LocatorConfig(id="com.palantir.godel:override:1.2.3")
            )
        }
    )
    with pytest.raises(ConfigError) as info:
        plugins_config(given, _test_builtin())
    assert str(info.value) == (
        "default-task key(s) specified but are not valid: [com.palantir.test:test]. "
        "Valid values: [com.palantir.test:test-plugin]"
    )


def test_plugins_config_does_not_modify_builtin():
    builtin = _test_builtin()
    given = DefaultTasksConfig(
        tasks={
            "com.palantir.test:test-plugin": SingleDefaultTaskConfig(
                exclude_all_default_assets=True,
                locator=LocatorConfig(id="com.palantir.godel:override:1.2.3"),
            )
        }
    )
    plugins_config(given, builtin)
    assert builtin == _test_builtin()


def test_plugins_config_defaults_to_builtin():
    got = plugins_config(DefaultTasksConfig())
    assert got == builtin_plugins_config()
    assert [p.locator.id for p in got.plugins] == [
        "com.palantir.distgo:dist-plugin:1.45.0",
        "com.palantir.godel-format-plugin:format-plugin:1.23.0",
        "com.palantir.godel-goland-plugin:goland-plugin:1.19.0",
        "com.palantir.okgo:check-plugin:1.28.0",
        "com.palantir.godel-license-plugin:license-plugin:1.21.0",
        "com.palantir.godel-test-plugin:test-plugin:1.21.0",
    ]


def test_builtin_plugins_config_is_valid():
    cfg = builtin_plugins_config()
    assert cfg.default_resolvers == [DEFAULT_RESOLVER]
    locators = cfg.validate()
    assert [loc.group_and_product() for loc in locators][3] == "com.palantir.okgo:check-plugin"
    assert len(cfg.plugins[3].assets) == 9
    assert cfg.plugins[0].locator.checksums["linux-amd64"] == (
        "84d27586b00cee4ea4c00ef85fa64d69baec00aecfc13c486d9a471460408ae6"
    )


def test_builtin_plugins_config_returns_fresh_copy():
    first = builtin_plugins_config()
    first.plugins.clear()
    assert len(builtin_plugins_config().plugins) == 6


def test_builtin_plugins_config_with_unknown_key_lists_all_valid_keys():
    given = DefaultTasksConfig(tasks={"b:x": SingleDefaultTaskConfig(), "a:y": SingleDefaultTaskConfig()})
    with pytest.raises(ConfigError, match=r"not valid: \[a:y b:x\]\. Valid values: \[com\.palantir\.distgo:dist-plugin "):
        plugins_config(given)


def test_builtin_upgrade_config_tasks_leave_config_unchanged():
    tasks = builtin_upgrade_config_tasks()
    assert [(t.id, t.config_file, t.legacy_config_file) for t in tasks] == [
        ("com.palantir.godel:godel", "godel.yml", "")
    ]
    content = b"exclude:\n  # comment\n  names:\n    - vendor\n"
    assert tasks[0].run(content, GlobalConfig(), io.StringIO()) == content


def test_builtin_upgrade_config_task_rejects_unknown_version():
    task = builtin_upgrade_config_tasks()[0]
    with pytest.raises(ConfigError, match="unsupported version: 2"):
        task.run(b"version: 2\n", GlobalConfig(), io.StringIO())