from __future__ import annotations

try:
    from importlib.metadata import version as _version

    # distribution 名与 import 名相同；读取失败兜底，不影响功能
    __version__ = _version("dart_tr")
except Exception:
    __version__ = "0.0.0"

from .registry import StringRegistry  # noqa: F401
from .rewriter import rewrite_buffer  # noqa: F401
