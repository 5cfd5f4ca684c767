from __future__ import annotations

from pathlib import Path

from .config import CONFIG_FILE, load_config
from .fs import iter_dart_files, missing_include_dirs


EXIT_BAD = 2


def doctor(cfg_path: Path) -> None:
    ok = True

    try:
        import yaml  # type: ignore
        _ = yaml
        print("✅ PyYAML OK")
    except Exception:
        ok = False
        print("❌ PyYAML 不可用：pip install pyyaml")

    cfg = None
    if not cfg_path.exists():
        print(f"⚠️ 未找到 {CONFIG_FILE}（使用默认配置；可先 dart_tr init）")
    try:
        cfg = load_config(cfg_path, root_dir=Path.cwd())
        if cfg_path.exists():
            print(f"✅ {CONFIG_FILE} OK (package={cfg.package} output={cfg.output} scanner={cfg.options.scanner})")
    except Exception as e:
        ok = False
        print(f"❌ {CONFIG_FILE} 解析失败：{e}")

    if cfg is not None:
        search = cfg.search_path
        if not search.is_dir():
            ok = False
            print(f"❌ 未找到 {cfg.search_dir}/（请在 Flutter 项目根目录执行）")
        else:
            for d in missing_include_dirs(search, cfg.include_dirs):
                print(f"⚠️ includeDirs 中的目录不存在：{d}")
            count = sum(1 for _ in iter_dart_files(search, cfg.include_dirs))
            scope = ", ".join(cfg.include_dirs) if cfg.include_dirs else "全部"
            print(f"✅ {cfg.search_dir}/ OK（范围：{scope}，.dart 文件 {count} 个）")

    if not ok:
        raise SystemExit(EXIT_BAD)
    print("✅ doctor 完成")
