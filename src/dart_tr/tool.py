#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    CONFIG_FILE,
    PACKAGES,
    ConfigError,
    DartTrConfig,
    init_config,
    load_config,
    override_config,
    rewrite_rules,
)
from .doctor import doctor
from .fs import iter_dart_files, missing_include_dirs
from .models import RunReport
from .pipeline import report_run, run
from .registry import StringRegistry
from .scanner import SCANNERS


BOX_TOOL = {
    "id": "flutter.dart_tr",
    "name": "dart_tr",
    "category": "flutter",
    "summary": "Flutter 字符串抽取：字面量改写为 'xxx'.tr() / 自动补 import / 生成排序后的 en.json（支持交互）",
    "usage": [
        "dart_tr",
        "dart_tr init",
        "dart_tr doctor",
        "dart_tr check",
        "dart_tr apply --yes",
        "dart_tr apply --package easy_localization --dir screens --out assets/translations/en.json",
    ],
    "options": [
        {"flag": "--config", "desc": f"配置文件路径（默认 {CONFIG_FILE}）"},
        {"flag": "--package", "desc": f"本地化包：{' / '.join(PACKAGES)}"},
        {"flag": "--dir", "desc": "只处理 lib/ 下的某个目录（可重复；覆盖 includeDirs）"},
        {"flag": "--out", "desc": "翻译文件输出路径（默认 en.json）"},
        {"flag": "--scanner", "desc": "字面量扫描方式：regex（默认）/ lexer"},
        {"flag": "--yes", "desc": "apply 时跳过确认"},
        {"flag": "--no-exitcode-3", "desc": "check 发现可改写字符串时仍返回 0（默认返回 3）"},
    ],
}

EXIT_OK = 0
EXIT_FAIL = 1
EXIT_BAD = 2
EXIT_CANDIDATES_FOUND = 3


def _read_choice(prompt: str, valid: List[str]) -> str:
    valid_set = {v.lower() for v in valid}
    while True:
        s = input(prompt).strip().lower()
        if s in valid_set:
            return s
        if s in ("q", "quit", "exit"):
            return "0"
        print(f"请输入 {' / '.join(sorted(valid_set))}（或 q 退出）")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dart_tr",
        description=BOX_TOOL["summary"],
    )
    p.add_argument(
        "action",
        nargs="?",
        choices=["init", "doctor", "check", "apply"],
        help="动作（不填则进入交互菜单）",
    )
    p.add_argument("--config", default=None, help=f"配置文件路径（默认 {CONFIG_FILE}）")
    p.add_argument("--package", default=None, help=f"本地化包：{' / '.join(PACKAGES)}")
    p.add_argument("--dir", action="append", default=None, dest="dirs", help="lib/ 下要处理的目录（可重复）")
    p.add_argument("--out", default=None, help="翻译文件输出路径（命令行优先；默认 en.json）")
    p.add_argument("--scanner", default=None, choices=sorted(SCANNERS), help="字面量扫描方式（默认 regex）")
    p.add_argument("--yes", action="store_true", help="apply 时跳过确认")
    p.add_argument("--no-exitcode-3", action="store_true", help="check 发现可改写字符串时仍返回 0（默认返回 3）")
    return p


def choose_action_interactive(cfg_path: Path) -> str:
    menu = [
        ("1", "check", "预览可改写的字符串（check，不写文件）"),
        ("2", "apply", "改写并生成翻译文件（apply）"),
        ("3", "doctor", "环境诊断（doctor）"),
        ("4", "init", "生成/校验配置（init）"),
        ("0", "exit", "退出"),
    ]
    aliases = {k: v for k, v, _ in menu}

    default_action = "check"
    while True:
        print("\n== dart_tr 交互模式 ==")
        print(f"[ctx] lib={'OK' if (Path.cwd() / 'lib').is_dir() else 'MISSING'}  "
              f"config={'OK' if cfg_path.exists() else 'MISSING'}")
        print("")
        for k, _v, label in menu:
            print(f"{k}. {label}")
        print("")

        s = input(f"请选择操作（默认 {default_action}，回车采用默认）: ").strip().lower()
        if not s:
            return default_action
        if s in ("q", "quit", "exit", "0"):
            return "exit"
        if s in aliases:
            return aliases[s]
        print("无效输入。")


def ask_package() -> Optional[str]:
    print("Which localization package are you using?")
    print("1. localize_and_translate")
    print("2. easy_localization")
    s = _read_choice("Enter number (1 or 2): ", valid=["1", "2"])
    if s == "0":
        return None
    return "localize_and_translate" if s == "1" else "easy_localization"


def ask_folder(search_dir: Path) -> Optional[str]:
    """
    询问 search_dir 下要处理的目录；不存在则重新输入，q 退出。
    """
    while True:
        s = input(f"\nEnter the name of the folder within \"{search_dir.name}\" to process "
                  "(e.g., 'screens', 'components'; q 退出): ").strip()
        if s.lower() in ("q", "quit", "exit"):
            return None
        if not s:
            print("Invalid input. Please enter a folder name.")
            continue
        if (search_dir / s).is_dir():
            return s
        print(f"Error: Directory \"{search_dir / s}\" not found. Please check the folder name.")


def _print_banner(cfg: DartTrConfig) -> None:
    scope = ", ".join(cfg.include_dirs) if cfg.include_dirs else "ALL"
    print(f"\nWARNING: This will modify .dart files in \"{cfg.search_dir}\" (scope: [{scope}])")
    print("by replacing string literals with themselves as localization keys (e.g., 'Some text'.tr()).")
    print(f"It will also add the import \"{cfg.required_import}\" to modified files if not present,")
    print(f"and save the extracted unique strings to \"{cfg.output}\".")
    print("Ensure you have a backup or are using version control before running this.")


def _report_candidates(report: RunReport, max_preview: int = 40) -> None:
    found = [f for f in report.files if f.ok and f.substitution_count]
    if not found:
        print("✅ 未发现需要改写的字符串")
    else:
        total = sum(f.substitution_count for f in found)
        print(f"⚠️ 发现可改写字符串：{len(found)} 个文件，合计 {total} 处（{report.unique_strings} 个唯一值）\n")
        for f in found:
            values = sorted(f.values)
            preview = values[:max_preview]
            print(f"- {f.path} ({f.substitution_count})")
            for v in preview:
                print(f"    • {v}")
            if len(values) > len(preview):
                print(f"    … and {len(values) - len(preview)} more")
            print("")
    for f in report.failed:
        print(f"❌ {f.path}: {f.error}")


def _warn_single_quotes(report: RunReport, escape_quotes: bool) -> bool:
    """
    escape_quotes 关闭时，含 ' 的值会生成非法 Dart（'Don't'.tr()），再次运行还会被拆开重复改写。
    """
    if escape_quotes:
        return False
    hits = [(f.path, v) for f in report.files if f.ok for v in sorted(f.values) if "'" in v]
    if not hits:
        return False
    print(f"⚠️ {len(hits)} 个字符串包含单引号，改写后的 Dart 代码会出错：")
    for path, v in hits:
        print(f"    • {path}: {v}")
    print("   建议在 dart_tr.yaml 中设置 options.scanner: lexer + options.escape_quotes: true")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)

    cfg_path = Path(args.config).expanduser() if args.config else Path.cwd() / CONFIG_FILE

    action = args.action
    interactive = False
    if not action:
        interactive = True
        action = choose_action_interactive(cfg_path)
        if action == "exit":
            return EXIT_OK

    if action == "init":
        try:
            init_config(cfg_path)
            return EXIT_OK
        except Exception as e:
            print(str(e))
            return EXIT_BAD

    if action == "doctor":
        try:
            doctor(cfg_path)
            return EXIT_OK
        except SystemExit as e:
            return int(getattr(e, "code", EXIT_BAD))
        except Exception as e:
            print(str(e))
            return EXIT_BAD

    # 以下 action 需要 cfg + lib/
    try:
        cfg = load_config(cfg_path, root_dir=Path.cwd())
        cfg = override_config(cfg, package=args.package, include_dirs=args.dirs, output=args.out, scanner=args.scanner)
    except ConfigError as e:
        print(f"❌ {e}")
        return EXIT_BAD

    search = cfg.search_path
    if not search.is_dir():
        print(f"❌ Directory \"{cfg.search_dir}\" not found. "
              "Make sure you are running this from your Flutter project's root directory.")
        return EXIT_BAD

    if interactive:
        if not args.package and not cfg_path.exists():
            package = ask_package()
            if package is None:
                return EXIT_OK
            cfg = override_config(cfg, package=package)
        if not cfg.include_dirs:
            folder = ask_folder(search)
            if folder is None:
                return EXIT_OK
            cfg = override_config(cfg, include_dirs=[folder])

    for d in missing_include_dirs(search, cfg.include_dirs):
        print(f"⚠️ Configured include directory \"{d}\" does not exist.")

    rules = rewrite_rules(cfg)
    files = list(iter_dart_files(search, cfg.include_dirs))

    if action == "check":
        report = run(files, rules, StringRegistry(), dry_run=True, verbose=False)
        _report_candidates(report)
        _warn_single_quotes(report, rules.escape_quotes)
        if report.failed:
            return EXIT_FAIL
        if report.substitutions and not args.no_exitcode_3:
            return EXIT_CANDIDATES_FOUND
        return EXIT_OK

    if action == "apply":
        _print_banner(cfg)
        preview = run(files, rules, StringRegistry(), dry_run=True, verbose=False)
        _warn_single_quotes(preview, rules.escape_quotes)
        if not args.yes:
            ans = _read_choice("确认改写以上目录中的文件？请输入 1 继续 / 0 取消: ", valid=["0", "1"])
            if ans != "1":
                print("🧊 已取消")
                return EXIT_OK

        print(f"Starting search and modification in directory: {search}")
        report = run(files, rules, StringRegistry(), output=cfg.output_path)
        report_run(report)
        return EXIT_OK if report.ok else EXIT_FAIL

    print("❌ 未知 action")
    return EXIT_BAD


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        print("\n已取消。")
        raise SystemExit(130)
