"""Built-in default plugins and the configuration upgrade tasks built into the launcher."""

from __future__ import annotations

import copy
from typing import Optional, TextIO

from godelkit.config import upgrade_config
from godelkit.launcher import GlobalConfig, UpgradeConfigTask
from godelkit.models import (
    ConfigError,
    DefaultTasksConfig,
    LocatorConfig,
    LocatorWithResolverConfig,
    PluginsConfig,
    SingleDefaultTaskConfig,
    SinglePluginConfig,
)
from godelkit.plugins import uniquify

DEFAULT_RESOLVER = (
    "https://github.com/{{index GroupParts 1}}/{{index GroupParts 2}}/releases/download/"
    "v{{Version}}/{{Product}}-{{Version}}-{{OS}}-{{Arch}}.tgz"
)


def _locator(
    locator_id: str, darwin_amd64: str, darwin_arm64: str, linux_amd64: str, linux_arm64: str
) -> LocatorConfig:
    return LocatorConfig(
        id=locator_id,
        checksums={
            "darwin-amd64": darwin_amd64,
            "darwin-arm64": darwin_arm64,
            "linux-amd64": linux_amd64,
            "linux-arm64": linux_arm64,
        },
    )


def _asset(locator: LocatorConfig) -> LocatorWithResolverConfig:
    return LocatorWithResolverConfig(locator=locator)


def _default_plugins_config() -> PluginsConfig:
    return PluginsConfig(
        default_resolvers=[DEFAULT_RESOLVER],
        plugins=[
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.distgo:dist-plugin:1.45.0",
                    "f1a75a7158248c7136fff97629cce389f8c639cfcd9ced6feb3a4c73d1845d0c",
                    "72e75636029f60d64ac8029792c92082c10d8c12fd04a823d58de9f9b871870d",
                    "84d27586b00cee4ea4c00ef85fa64d69baec00aecfc13c486d9a471460408ae6",
                    "750bffa429654c15ad9802c669d729fc0e2a6331861b15508ee3e7fa24e11d63",
                ),
            ),
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.godel-format-plugin:format-plugin:1.23.0",
                    "454676ce35e77307485869f5db14be8306ba158fb18c620e6ec61ef65e58e34e",
                    "e8357905248973b555239678b87b84b0152c0f449f0443790b5b4133d46f8e5a",
                    "b945673eee1bf311429afb7d12205ed485841d5c94c3521eb2240846a89a5794",
                    "259fb3d10f3b0a698625307c2f21e87e5f4796561e88cc213532bd5bddf1d679",
                ),
                assets=[
                    _asset(
                        _locator(
                            "com.palantir.godel-format-asset-ptimports:ptimports-asset:1.22.0",
                            "af2e1b4b9a1a96e247767d40485c66796bd6040e6571cc35db23a65bcb2c4bac",
                            "aa5275988bd9407609e8788eda5a462f9e2f3c11fb95d15da2faae1063f526dd",
                            "7bda7b26d32d8cabd5c040ef6040a486d5cd447c105d1f24c22ba00764cfea8c",
                            "434f30d81951ebf08f6eea1036621f37534ddc0a4df15718c20d6043785e3da5",
                        )
                    ),
                ],
            ),
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.godel-goland-plugin:goland-plugin:1.19.0",
                    "fdde289cdad15007fb4cb23e4adf870e0148ce1c7d5839d395d5e4f78ce0dfd4",
                    "27acd2fb7c44128e275f1e10e78fdb912e67e3a74ce00a0de61fe96d19a9a4e7",
                    "4f72b8066121fb5c238af08c3eba48097a2b406be94dc3cccc90a6c0845f5854",
                    "9da571ea244502624376cd210b88edff6db8e224d3c7467391ed6bd35785f6b7",
                ),
            ),
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.okgo:check-plugin:1.28.0",
                    "9180fd080deae0e0a3a9e5a93b302086436ebbba7780f35816e5eec02ceb4c16",
                    "68dbcf4cab49b52cef444d3ecdb6be908186c1b6c76dd9fc2be6a21c6370bf16",
                    "c615f530308d2aa502afdb3ff6608f899daa6c1e83e345cb1b9cb0509a1a9ab6",
                    "0fa1b12e36751064b9c5000a8b3cb196db36352efb8612cc4673268f86ccdb98",
                ),
                assets=[
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-compiles:compiles-asset:1.26.0",
                            "52866a61b4bbda13fbea2302a2d1b80dc1ba037f61c149c4106005d508b1d936",
                            "0e5a452dc5abd0d200b897894022a6f2c47dce7a10cdd35d02c0dd20a784dea8",
                            "d1a5223144ec8a371db5b69bff66c5b08505f7fdecd56499e59e57743ce06ae5",
                            "cf6a5bd92fc57a4d268c3287cd0aab25c1daba7fc56c14efaff1435bcdff8e9f",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-deadcode:deadcode-asset:1.24.0",
                            "967ef0a2e3b010690afbc2fdc3ee2d0aaec31a191ac3e3ea7d5c99e41a843ddc",
                            "025ac7142ff811cde8fb5910e1b388dc12a483506b680f3a1ce5f842bcac1d38",
                            "aa58a89243ebf3c8d3d8487314668b1ed70b7cc55f44d5529e2fd9b1d7fcae8a",
                            "9f24cc7607b06703efaff9dd587608a1ceb590993d1c5bbb2c36649215b631a9",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-errcheck:errcheck-asset:1.25.0",
                            "c28a356728eb9e369e8923d91326747ae25a51dee2ca9880b458ffc07bc8983b",
                            "0b0a2a690aece465f595d11bd13816bd7e57962f996965e653f1dc36eb0342c6",
                            "13bb2785ef5ef1ec687122a38645a87eba8af2be48ab2c1c28dbe2d33a4e2cf5",
                            "bb1e1f91f960da7c2cf787eec2b45cbe3c86c31decf0ecc3a6617602071f723d",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-golint:golint-asset:1.16.0",
                            "8a562f7ff158def91800fe615eaf08fe5bbf8636fe04b97062d127657d774d5a",
                            "44f007302ac3da832c4fe52a14cd88c46e1e5c2c589a557910bac3a3e506173a",
                            "6f5885157ca0bfbb7147ffbf6783519ef860f157d72ca9a5f08667f0f9530b29",
                            "1c6276b3c5f7b77d6eb089e7f878f29680e79c33a192671e3195865b27293ed5",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-govet:govet-asset:1.20.0",
                            "6d9f17f46f764ab87e3ddf8f0b8b8b1417eeb38f342b8a14ed47865825f66fd4",
                            "aa2ffc81fe9a2bc33fdd0aa160b11abcca01ba4dc7fd191895b1705332b8f9d8",
                            "614fa0d4450c74fb4d6d83b272f2e0d64d022cdbbe5f85e67ebcce5e2565d20a",
                            "8595f4ac59b78ea982e262ee1324cbf50127f4067fdf43b62f6a5eec715555c2",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-importalias:importalias-asset:1.20.0",
                            "bd52b96c52ac108559c6ae2092e931b8b3683987f17bddc50689993f9223bde2",
                            "4976cae57c4b7e981896d6d11969a5da28c8b5b62d0672d52a2342705a36a478",
                            "cda4f52c475abec727a39bd438c5daeae35dc6f8e8a529ad33ca26c2d6fad88d",
                            "45090820ed3f3802d049313fd559985e5eb985b081aed2d4b3c08971414659eb",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-ineffassign:ineffassign-asset:1.22.0",
                            "2bebfe874d6b557754b9ea60f2701005f01a79584c6922f84a36ee1f460438c7",
                            "f0df8f6d269ca8d94bda85117959d270fb0a74fbef802ece62ab8e386608235f",
                            "b405c94ff5cc0a455eb089f858e42387880aefbd4ca7af910aaea672d34bdbe0",
                            "b666ff16f64508788f2e090127713200df5d96d75eb214354942993d8e3821ec",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-outparamcheck:outparamcheck-asset:1.23.0",
                            "7d26732ec6064471588a36f3d1040b1253cb583aff68481258bd7f4311c7b013",
                            "6700f339f2cab04ce25e640e20ea3714614f950868e6e8f0c13a8b8317411889",
                            "338a9167bc825f6c39a9361f148614c41420933db99d8276c813645ad165f60d",
                            "d94f7308d9bb2326b5e98686ce9c6362a741c2edae30cac65b1323858e252920",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-unconvert:unconvert-asset:1.24.0",
                            "215c9af2344201a4d0fb43f69e8f1287637fb10a23e6ec2d6e73d64c0bfb28e3",
                            "a833a76abd1b7b50c11c83aa68130f2743b2b90060104f2eda63c5e114a19a0e",
                            "582b8b65cb621048575384056dfdca8d5af34776f5a6774f8f997fd1f2cc464e",
                            "793613985fd9e0fbcfad3414887b637f959df3849809016fee47f78ee76f6803",
                        )
                    ),
                    _asset(
                        _locator(
                            "com.palantir.godel-okgo-asset-varcheck:varcheck-asset:1.24.0",
                            "ee9054270e5e78f6e1fb9ccb4177809b3b202488b5441adc9c2807a0aa266014",
                            "9ae74befe6a787706778d9c9af362ba92593328dd2bf7264a6d8aba482975f75",
                            "03f3486e81a0adc8389d0e4f52bf184f3928344e453589f141dacf7a5363c012",
                            "392fc620c3b30479124a61c8b14915954d88ac4e8255c7bcb29473db5ede1e3d",
                        )
                    ),
                ],
            ),
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.godel-license-plugin:license-plugin:1.21.0",
                    "cfd24be3a44545f87de0cb205e5facc869f8601930da60e4d319bb6ababed76d",
                    "49aaf7aed3ef65433506841737ab9d41ce59667f37426ca9a98a33db6cd19774",
                    "b473fbae0d410a7dc93501280366c7d144d5d38dfe2a5e848fcec2d38e99792a",
                    "1ea467bd02bd8e0abc06b729087b1b8808520b1685ea692663321ef26e8b1898",
                ),
            ),
            SinglePluginConfig(
                locator=_locator(
                    "com.palantir.godel-test-plugin:test-plugin:1.21.0",
                    "e8f8e7b34242bedf975740a41e2906184ba747c89d779116b4f04da5a1b11313",
                    "9e593c6151c7f397f6801d02deb413e349ecdb01454a40641902834653767957",
                    "f04b99d71cfa68ac10ef3de88ddf04026d01da1ef29199e15a1010cecfe34ef8",
                    "f4928c65da86ebb805ac720d9a9378b12cf8de4e33062d14f66e332a06c8e77d",
                ),
            ),
        ],
    )


_DEFAULT_PLUGINS_CONFIG = _default_plugins_config()


def builtin_plugins_config() -> PluginsConfig:
    """Return a fresh copy of the configuration of the built-in default plugins."""
    return copy.deepcopy(_DEFAULT_PLUGINS_CONFIG)


def _locator_id_without_version(locator_id: str) -> str:
    return ":".join(locator_id.split(":")[:2])


def _assets_from_default(
    base: list[LocatorWithResolverConfig], task_cfg: SingleDefaultTaskConfig
) -> list[LocatorWithResolverConfig]:
    if task_cfg.exclude_all_default_assets:
        return []
    excluded = set(task_cfg.default_assets_to_exclude)
    return [
        copy.deepcopy(asset)
        for asset in base
        if _locator_id_without_version(asset.locator.id) not in excluded
    ]


def _go_list(values: list[str]) -> str:
    return "[" + " ".join(values) + "]"


def plugins_config(
    cfg: DefaultTasksConfig, builtin: Optional[PluginsConfig] = None
) -> PluginsConfig:
    """Combine the default plugins with the user's default-task overrides.

    Resolvers given by the user come before the built-in ones. A task entry keyed by
    "group:product" of a default plugin may replace its locator or resolver, drop some or
    all of its default assets and add assets of its own. Keys that name no default plugin
    raise ConfigError.
    """
    base = builtin if builtin is not None else _DEFAULT_PLUGINS_CONFIG
    result = PluginsConfig(
        default_resolvers=uniquify([*cfg.default_resolvers, *base.default_resolvers]) or []
    )

    default_keys: set[str] = set()
    for plugin in base.plugins:
        key = _locator_id_without_version(plugin.locator.id)
        default_keys.add(key)

        task_cfg = cfg.tasks.get(key)
        if task_cfg is None:
            result.plugins.append(copy.deepcopy(plugin))
            continue

        locator = task_cfg.locator if task_cfg.locator.id else plugin.locator
        result.plugins.append(
            SinglePluginConfig(
                locator=copy.deepcopy(locator),
                resolver=task_cfg.resolver or plugin.resolver,
                assets=[
                    *_assets_from_default(plugin.assets, task_cfg),
                    *copy.deepcopy(task_cfg.assets),
                ],
            )
        )

    invalid = sorted(key for key in cfg.tasks if key not in default_keys)
    if invalid:
        raise ConfigError(
            f"default-task key(s) specified but are not valid: {_go_list(invalid)}. "
            f"Valid values: {_go_list(sorted(default_keys))}"
        )
    return result


def _upgrade_godel_config_task() -> UpgradeConfigTask:
    def _run(
        task: UpgradeConfigTask, global_config: GlobalConfig, config_bytes: bytes, stdout: TextIO
    ) -> bytes:
        return upgrade_config(config_bytes)

    # No legacy file: legacy godel.yml content is already compatible with the current format.
    return UpgradeConfigTask(id="com.palantir.godel:godel", config_file="godel.yml", run_impl=_run)


def builtin_upgrade_config_tasks() -> list[UpgradeConfigTask]:
    """Return the configuration upgrade tasks built into the launcher."""
    return [_upgrade_godel_config_task()]