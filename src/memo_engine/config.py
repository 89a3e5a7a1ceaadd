"""Editor configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "MEMO_ENGINE_"

STORAGE_KEY = "markdown-memo-content"
EXPORT_FILENAME = "memo.md"

DEFAULT_DOCUMENT = "\n".join(
    [
        "# Markdown Memo",
        "",
        "Cloudflare Pagesで公開できる、シンプルなメモ帳です。",
        "",
        "- 左で編集",
        "- 右でプレビュー",
        "- 自動保存(localStorage)",
    ]
)


@dataclass(frozen=True)
class EditorConfig:
    """Knobs shared by the session, the services and the Textual app."""

    storage_key: str = STORAGE_KEY
    export_filename: str = EXPORT_FILENAME
    inline_placeholder: str = "text"
    code_placeholder: str = "code"
    indent_unit: str = "  "
    default_document: str = DEFAULT_DOCUMENT
    data_dir: Optional[str] = None
    export_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.storage_key:
            raise ValueError("storage_key cannot be empty")
        if not self.export_filename:
            raise ValueError("export_filename cannot be empty")
        if not self.indent_unit or self.indent_unit.strip(" "):
            raise ValueError("indent_unit must be one or more spaces")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        env = os.environ if environ is None else environ
        config = cls()
        overrides = {}
        for name in (
            "storage_key",
            "export_filename",
            "inline_placeholder",
            "code_placeholder",
            "data_dir",
            "export_dir",
        ):
            value = env.get(f"{ENV_PREFIX}{name.upper()}")
            if value:
                overrides[name] = value
        width = env.get(f"{ENV_PREFIX}INDENT_WIDTH")
        if width:
            overrides["indent_unit"] = " " * int(width)
        return replace(config, **overrides) if overrides else config


__all__ = [
    "EditorConfig",
    "DEFAULT_DOCUMENT",
    "STORAGE_KEY",
    "EXPORT_FILENAME",
]
