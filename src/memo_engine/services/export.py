"""Save-as export of the memo to a markdown file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from memo_engine.runtime import telemetry


class FileExporter:
    """Writes the memo as UTF-8 bytes into ``directory``.

    An existing file with the suggested name is overwritten, the same way a
    browser download to a fixed name would be.
    """

    def __init__(self, directory: Optional[Path | str] = None) -> None:
        self.directory = Path(directory) if directory is not None else Path.cwd()

    def export(self, text: str, suggested_filename: str) -> Optional[Path]:
        name = Path(suggested_filename).name
        if not name:
            raise ValueError("suggested_filename must name a file")
        target = self.directory / name
        with telemetry.span(
            "export::file", component="exporter", metadata={"path": str(target)}
        ) as handle:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                target.write_bytes(text.encode("utf-8"))
            except OSError as exc:
                handle.warn(str(exc))
                return None
        return target


__all__ = ["FileExporter"]
