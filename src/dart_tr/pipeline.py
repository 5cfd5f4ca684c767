from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .fs import read_text, write_text
from .models import FileResult, RewriteRules, RunReport
from .registry import StringRegistry
from .rewriter import rewrite_buffer
from .serializer import write_translation_document


def process_file(
        path: Path,
        rules: RewriteRules,
        registry: StringRegistry,
        *,
        dry_run: bool = False,
) -> FileResult:
    """
    读取 -> 改写 -> （有改动且非 dry_run 时）写回。
    任何异常都在文件边界捕获并记录到 FileResult.error；
    只有成功处理的文件，其字符串才会进入 registry。
    """
    try:
        content = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        return FileResult(path=path, error=f"读取失败：{e}")

    try:
        outcome = rewrite_buffer(content, rules)
    except Exception as e:
        return FileResult(path=path, new_text=content, error=f"处理异常：{e}")

    if outcome.was_modified and not dry_run:
        try:
            write_text(path, outcome.new_text)
        except OSError as e:
            return FileResult(path=path, new_text=outcome.new_text, error=f"写入失败：{e}")

    registry.update(outcome.values)
    return FileResult(
        path=path,
        new_text=outcome.new_text,
        was_modified=outcome.was_modified,
        import_added=outcome.import_added,
        substitution_count=outcome.substitutions,
        values=outcome.values,
    )


def report_file(result: FileResult, required_import: str = "") -> None:
    if not result.ok:
        print(f"❌ {result.path}: {result.error}")
        return
    if not result.was_modified:
        return
    print(f"✅ Processed file: {result.path}")
    print(f"  - Replaced {result.substitution_count} string(s) with themselves as keys and .tr().")
    if result.import_added:
        print(f"  - Added import: {required_import}" if required_import else "  - Added import")


def run(
        paths: Iterable[Path],
        rules: RewriteRules,
        registry: Optional[StringRegistry] = None,
        *,
        output: Optional[Path] = None,
        dry_run: bool = False,
        verbose: bool = True,
) -> RunReport:
    """
    逐个处理文件（单个文件失败不影响后续），最后写出翻译文档。
    翻译文档写入失败不会回滚已改写的源文件。
    """
    registry = registry if registry is not None else StringRegistry()
    results: List[FileResult] = []

    for p in paths:
        r = process_file(p, rules, registry, dry_run=dry_run)
        results.append(r)
        if verbose:
            report_file(r, rules.required_import)

    output_path: Optional[Path] = None
    output_error: Optional[str] = None
    if output is not None and not dry_run:
        try:
            output_path = write_translation_document(registry, output)
        except OSError as e:
            output_error = f"写入 {output} 失败：{e}"

    return RunReport(
        files=tuple(results),
        unique_strings=len(registry),
        output_path=output_path,
        output_error=output_error,
        dry_run=dry_run,
    )


def report_run(report: RunReport) -> None:
    print("")
    print(
        f"📊 files={len(report.files)} changed={report.files_changed} "
        f"replaced={report.substitutions} failed={len(report.failed)}"
    )
    if report.output_error:
        print(f"❌ {report.output_error}")
        return
    if report.unique_strings == 0:
        print("⚠️ No eligible strings were found to process.")
        return
    if report.dry_run:
        print(f"🧊 dry-run：发现 {report.unique_strings} 个唯一字符串，未写入任何文件")
        return
    print(f"✅ Successfully extracted {report.unique_strings} unique strings and wrote them as keys/values.")
    if report.output_path:
        print(f"   English localization data saved to {report.output_path}")
