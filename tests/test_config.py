from __future__ import annotations

import pytest

from dart_tr.config import (
    PACKAGES,
    ConfigError,
    DartTrConfig,
    init_config,
    load_config,
    override_config,
    parse_config_dict,
    rewrite_rules,
)


def test_missing_config_uses_defaults(tmp_path):
    cfg = load_config(tmp_path / "dart_tr.yaml")
    assert cfg == DartTrConfig(root_dir=tmp_path.resolve())
    assert cfg.required_import == PACKAGES["localize_and_translate"]
    assert cfg.output_path == tmp_path.resolve() / "en.json"
    assert cfg.search_path == tmp_path.resolve() / "lib"


def test_init_template_round_trips_to_defaults(tmp_path, capsys):
    path = tmp_path / "dart_tr.yaml"
    init_config(path)
    assert path.exists()
    assert "已生成配置文件" in capsys.readouterr().out
    assert load_config(path) == DartTrConfig(root_dir=tmp_path.resolve())

    # 已存在：只校验，不覆盖
    path.write_text(path.read_text(encoding="utf-8") + "\n# mine\n", encoding="utf-8")
    init_config(path)
    assert path.read_text(encoding="utf-8").endswith("# mine\n")


def test_parse_full_config(tmp_path):
    path = tmp_path / "dart_tr.yaml"
    path.write_text(
        "searchDir: lib\n"
        "includeDirs: [screens, core/widgets]\n"
        "package: easy_localization\n"
        "output: assets/translations/en.json\n"
        "options:\n"
        "  scanner: lexer\n"
        "  call_sites: []\n"
        "  terminator: \";\"\n"
        "  escape_quotes: true\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.include_dirs == ("screens", "core/widgets")
    assert cfg.required_import == PACKAGES["easy_localization"]
    assert cfg.output_path == tmp_path.resolve() / "assets" / "translations" / "en.json"

    rules = rewrite_rules(cfg)
    assert rules.scanner == "lexer"
    assert rules.call_sites == ()
    assert rules.terminator == ";"
    assert rules.escape_quotes is True


def test_required_import_override(tmp_path):
    cfg = parse_config_dict(root_dir=tmp_path, raw={"requiredImport": "import 'package:my/tr.dart';"})
    assert cfg.required_import == "import 'package:my/tr.dart';"
    # --package 覆盖自定义 import
    cfg = override_config(cfg, package="2")
    assert cfg.required_import == PACKAGES["easy_localization"]


@pytest.mark.parametrize(
    "raw",
    [
        {"package": "intl"},
        {"includeDirs": {"a": 1}},
        {"options": []},
        {"options": {"scanner": "ast"}},
        {"options": {"terminator": ","}},
        {"options": {"escape_quotes": True}},
    ],
)
def test_invalid_config_raises(tmp_path, raw):
    with pytest.raises(ConfigError):
        parse_config_dict(root_dir=tmp_path, raw=raw)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "dart_tr.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_override_precedence(tmp_path):
    cfg = parse_config_dict(root_dir=tmp_path, raw={"includeDirs": ["screens"], "output": "a.json"})
    cfg = override_config(cfg, include_dirs=["widgets"], output="b.json", scanner="lexer")
    assert cfg.include_dirs == ("widgets",)
    assert cfg.output == "b.json"
    assert cfg.options.scanner == "lexer"
    unchanged = override_config(cfg)
    assert unchanged == cfg


def test_escape_quotes_requires_lexer(tmp_path):
    cfg = parse_config_dict(root_dir=tmp_path, raw={"options": {"scanner": "lexer", "escape_quotes": True}})
    assert rewrite_rules(cfg).escape_quotes is True
    with pytest.raises(ConfigError):
        override_config(cfg, scanner="regex")
