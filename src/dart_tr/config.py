from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from .classifier import DEFAULT_CALL_SITES
from .fs import SEARCH_DIR
from .models import RewriteRules
from .scanner import SCANNERS


CONFIG_FILE = "dart_tr.yaml"
DEFAULT_OUTPUT = "en.json"

# package name -> import 语句（两个受支持的本地化包）
PACKAGES: Dict[str, str] = {
    "localize_and_translate": "import 'package:localize_and_translate/localize_and_translate.dart';",
    "easy_localization": "import 'package:easy_localization/easy_localization.dart';",
}
DEFAULT_PACKAGE = "localize_and_translate"
# 交互菜单里的序号
_PACKAGE_ALIASES = {"1": "localize_and_translate", "2": "easy_localization"}


# =========================
# Errors
# =========================

class ConfigError(RuntimeError):
    pass


# =========================
# Models
# =========================

@dataclass(frozen=True)
class Options:
    """Rewrite behavior flags."""
    scanner: str = "regex"
    call_sites: Tuple[str, ...] = DEFAULT_CALL_SITES
    terminator: str = ""
    escape_quotes: bool = False


@dataclass(frozen=True)
class DartTrConfig:
    """Normalized config loaded from dart_tr.yaml."""
    root_dir: Path
    search_dir: str = SEARCH_DIR
    include_dirs: Tuple[str, ...] = field(default_factory=tuple)
    package: str = DEFAULT_PACKAGE
    required_import_override: str = ""
    output: str = DEFAULT_OUTPUT
    options: Options = field(default_factory=Options)

    @property
    def required_import(self) -> str:
        return self.required_import_override or PACKAGES[self.package]

    @property
    def search_path(self) -> Path:
        return (self.root_dir / self.search_dir).resolve()

    @property
    def output_path(self) -> Path:
        p = Path(self.output)
        return p if p.is_absolute() else (self.root_dir / p).resolve()


# =========================
# Helpers
# =========================

def _as_str(x: object, default: str = "") -> str:
    if x is None:
        return default
    s = str(x).strip()
    return s if s else default


def _as_str_list(x: object, key: str) -> List[str]:
    if x is None:
        return []
    if isinstance(x, str):
        x = [x]
    if not isinstance(x, list):
        raise ConfigError(f"{key} 必须是数组 list")
    out: List[str] = []
    for i, item in enumerate(x):
        s = _as_str(item)
        if not s:
            raise ConfigError(f"{key}[{i}] 不能为空")
        if s not in out:
            out.append(s)
    return out


def resolve_package(name: str) -> str:
    n = _as_str(name).lower()
    n = _PACKAGE_ALIASES.get(n, n)
    if n not in PACKAGES:
        raise ConfigError(f"package 不合法：{name!r}，可选：{', '.join(PACKAGES)}")
    return n


# =========================
# YAML load / parse
# =========================

def load_config_yaml(path: Path) -> Dict[str, object]:
    if not path.exists():
        raise ConfigError(f"配置文件不存在：{path}")
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"YAML 解析失败：{e}")
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ConfigError("配置文件格式错误：顶层必须是 mapping/object")
    return obj


def parse_config_dict(*, root_dir: Path, raw: Dict[str, object]) -> DartTrConfig:
    search_dir = _as_str(raw.get("searchDir"), SEARCH_DIR)
    include_dirs = _as_str_list(raw.get("includeDirs"), "includeDirs")
    package = resolve_package(_as_str(raw.get("package"), DEFAULT_PACKAGE))
    required_import = _as_str(raw.get("requiredImport"))
    output = _as_str(raw.get("output"), DEFAULT_OUTPUT)

    opt_raw = raw.get("options")
    if opt_raw is None:
        opt_raw = {}
    if not isinstance(opt_raw, dict):
        raise ConfigError("options 必须是 object")

    scanner = _as_str(opt_raw.get("scanner"), "regex")
    if scanner not in SCANNERS:
        raise ConfigError(f"options.scanner 不合法：{scanner!r}，可选：{', '.join(SCANNERS)}")

    if "call_sites" in opt_raw:
        call_sites = tuple(_as_str_list(opt_raw.get("call_sites"), "options.call_sites"))
    else:
        call_sites = DEFAULT_CALL_SITES

    terminator = opt_raw.get("terminator")
    terminator = "" if terminator is None else str(terminator)
    if terminator not in ("", ";"):
        raise ConfigError(f"options.terminator 只能是 \"\" 或 \";\"，实际：{terminator!r}")

    options = Options(
        scanner=scanner,
        call_sites=call_sites,
        terminator=terminator,
        escape_quotes=bool(opt_raw.get("escape_quotes", False)),
    )
    _check_options(options)

    return DartTrConfig(
        root_dir=root_dir.resolve(),
        search_dir=search_dir,
        include_dirs=tuple(include_dirs),
        package=package,
        required_import_override=required_import,
        output=output,
        options=options,
    )


def _check_options(options: Options) -> None:
    # regex 扫描不识别 \'，转义后的字面量第二次运行会被拆开重复改写
    if options.escape_quotes and options.scanner == "regex":
        raise ConfigError("options.escape_quotes 需要配合 scanner: lexer 使用（regex 不识别转义引号）")


def load_config(path: Path, root_dir: Optional[Path] = None) -> DartTrConfig:
    """配置文件不存在时返回默认配置（与旧脚本的内置常量一致）。"""
    root = (root_dir or path.parent).resolve()
    if not path.exists():
        return DartTrConfig(root_dir=root)
    return parse_config_dict(root_dir=root, raw=load_config_yaml(path))


def override_config(
        cfg: DartTrConfig,
        *,
        package: Optional[str] = None,
        include_dirs: Optional[Sequence[str]] = None,
        output: Optional[str] = None,
        scanner: Optional[str] = None,
) -> DartTrConfig:
    """命令行 > 配置文件 > 默认值。"""
    if package:
        cfg = replace(cfg, package=resolve_package(package), required_import_override="")
    if include_dirs:
        cfg = replace(cfg, include_dirs=tuple(include_dirs))
    if output:
        cfg = replace(cfg, output=output)
    if scanner:
        if scanner not in SCANNERS:
            raise ConfigError(f"scanner 不合法：{scanner!r}，可选：{', '.join(SCANNERS)}")
        cfg = replace(cfg, options=replace(cfg.options, scanner=scanner))
        _check_options(cfg.options)
    return cfg


def rewrite_rules(cfg: DartTrConfig) -> RewriteRules:
    return RewriteRules(
        required_import=cfg.required_import,
        scanner=cfg.options.scanner,
        call_sites=cfg.options.call_sites,
        terminator=cfg.options.terminator,
        escape_quotes=cfg.options.escape_quotes,
    )


# =========================
# init: commented YAML template
# =========================

def generate_commented_yaml_template(cfg: DartTrConfig) -> str:
    """
    手写 YAML 文本（而不是 yaml.dump），以便保留注释。
    """
    inc = "[" + ", ".join(cfg.include_dirs) + "]"
    calls = "[" + ", ".join(cfg.options.call_sites) + "]"
    return (
        "# dart_tr.yaml\n"
        "# ---------------------------------------------\n"
        "# Flutter 字符串抽取：把 .dart 中的字面量改写为 'xxx'.tr()，并生成 en.json\n"
        "# ---------------------------------------------\n\n"
        "# 扫描根目录（相对项目根目录）\n"
        f"searchDir: {cfg.search_dir}\n\n"
        "# 只处理 searchDir 下的这些子目录；为空则处理全部\n"
        "# 例如：[screens, core/widgets]\n"
        f"includeDirs: {inc}\n\n"
        "# 本地化包：localize_and_translate / easy_localization\n"
        f"package: {cfg.package}\n\n"
        "# 自定义 import 语句（可选，留空则按 package 生成）\n"
        f"requiredImport: \"{cfg.required_import_override}\"\n\n"
        "# 输出的翻译文件（key 与 value 相同，按 key 排序）\n"
        f"output: {cfg.output}\n\n"
        "options:\n"
        "  # regex：与旧脚本行为一致；lexer：识别注释与转义引号\n"
        f"  scanner: {cfg.options.scanner}\n"
        "  # 作为这些函数参数的字面量不改写；[] 关闭该规则\n"
        f"  call_sites: {calls}\n"
        "  # 生成的调用后面是否追加 ;（\"\" 或 \";\"）\n"
        f"  terminator: \"{cfg.options.terminator}\"\n"
        "  # 是否转义字面量中的单引号（需配合 scanner: lexer）\n"
        f"  escape_quotes: {str(cfg.options.escape_quotes).lower()}\n"
    )


def init_config(cfg_path: Path) -> Path:
    """
    不存在则生成带注释的配置；存在则只校验。
    """
    if cfg_path.exists():
        load_config(cfg_path)
        print(f"✅ {cfg_path.name} 已存在且校验通过")
        return cfg_path

    cfg = DartTrConfig(root_dir=cfg_path.parent.resolve())
    cfg_path.write_text(generate_commented_yaml_template(cfg), encoding="utf-8")
    print(f"➕ 已生成配置文件：{cfg_path}")
    return cfg_path
