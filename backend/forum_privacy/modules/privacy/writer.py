"""
Export writer that lays exported documents out as a directory tree.

Layout under the export root:

    preferences/<component>.json
    <container label>/data.json
    <container label>/metadata.json
    <container label>/Discussions/<discussion>/data.json
    <container label>/Discussions/<discussion>/Posts/<post>/data.json
    <container label>/Discussions/<discussion>/Posts/<post>/ratings.json
    <container label>/Discussions/<discussion>/Posts/<post>/_files/<area>/<item>/<file>
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from forum_privacy.core.config import Settings, settings as default_settings
from forum_privacy.core.exceptions import ExportWriterError
from forum_privacy.modules.files.service import FileStorageService


class FileSystemExportWriter:
    """
    Writes exported user data below a root directory.

    Usage:
        writer = FileSystemExportWriter(FileStorageService(db), Path("exports/user-42"))
        await writer.export_data(container_id, ["Discussions", "7-welcome"], {...})
    """

    DATA_FILE = "data.json"
    METADATA_FILE = "metadata.json"
    PREFERENCES_DIR = "preferences"

    def __init__(
        self,
        files: FileStorageService,
        root: Path | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize writer.

        Args:
            files: File storage to copy area files from
            root: Directory receiving the export, created on demand
                (``export_root`` setting by default)
            settings: Settings override (module settings by default)
        """
        self.settings = settings or default_settings
        self.root = Path(root) if root is not None else self.settings.export_root
        self.files = files
        self.written: list[Path] = []

    # ==================== Paths ====================

    def container_label(self, container_id: int) -> str:
        return f"Container {container_id}"

    def directory(self, container_id: int, path: list[str]) -> Path:
        """Directory for a document, checked to stay inside the root."""
        for segment in path:
            if not segment or segment in (".", "..") or "/" in segment or "\\" in segment:
                raise ExportWriterError(path, f"invalid path segment {segment!r}")

        target = self.root / self.container_label(container_id)
        for segment in path:
            target = target / segment
        return target

    def _dump(self, data: Any) -> str:
        if self.settings.export_indent:
            return json.dumps(data, indent=2, ensure_ascii=False, default=str)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)

    def _write(self, file: Path, data: Any) -> None:
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(self._dump(data), encoding="utf-8")
        self.written.append(file)

    def _merge(self, file: Path, key: str, value: Any) -> None:
        """Add one key to a JSON object file, creating it if needed."""
        content: dict[str, Any] = {}
        if file.exists():
            content = json.loads(file.read_text(encoding="utf-8"))
        content[key] = value
        self._write(file, content)

    # ==================== Writer interface ====================

    async def export_data(
        self, container_id: int, path: list[str], data: dict[str, Any]
    ) -> None:
        """Write the main document of a path."""
        self._write(self.directory(container_id, path) / self.DATA_FILE, data)

    async def export_metadata(
        self,
        container_id: int,
        path: list[str],
        key: str,
        value: Any,
        description: str,
    ) -> None:
        """Add a described fact to the metadata file of a path."""
        self._merge(
            self.directory(container_id, path) / self.METADATA_FILE,
            key,
            {"value": value, "description": description},
        )

    async def export_related_data(
        self, container_id: int, path: list[str], name: str, data: Any
    ) -> None:
        """Write data owned by another component next to the document."""
        if not name or "/" in name:
            raise ExportWriterError(path, f"invalid related data name {name!r}")
        self._write(self.directory(container_id, path) / f"{name}.json", data)

    async def export_area_files(
        self,
        container_id: int,
        path: list[str],
        component: str,
        file_area: str,
        item_id: int,
    ) -> None:
        """Copy every file of an item's file area below the document."""
        stored = await self.files.get_area_files(container_id, component, file_area, item_id)
        if not stored:
            return

        base = (
            self.directory(container_id, path)
            / self.settings.exported_files_dirname
            / file_area
            / str(item_id)
        )
        for stored_file in stored:
            relative = stored_file.file_path.strip("/")
            if ".." in Path(relative).parts:
                raise ExportWriterError(path, f"invalid file path {stored_file.file_path!r}")
            name = stored_file.file_name
            if not name or name in (".", "..") or "/" in name or "\\" in name:
                raise ExportWriterError(path, f"invalid file name {name!r}")
            target = base / relative if relative else base
            target = target / name
            if not target.resolve().is_relative_to(self.root.resolve()):
                raise ExportWriterError(path, f"file {name!r} would leave the export root")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(stored_file.content)
            self.written.append(target)

        logger.debug(
            f"Exported {len(stored)} files from {component}/{file_area}:{item_id}"
        )

    def rewrite_embedded_references(
        self,
        container_id: int,
        path: list[str],
        component: str,
        file_area: str,
        item_id: int,
        text: str,
    ) -> str:
        """Replace the embedded file placeholder with the exported file location."""
        if not text:
            return text
        exported = f"{self.settings.exported_files_dirname}/{file_area}/{item_id}"
        return text.replace(self.settings.embedded_file_token, exported)

    async def export_user_preference(
        self, component: str, key: str, value: Any, description: str
    ) -> None:
        """Add a site-wide preference to the component's preference file."""
        self._merge(
            self.root / self.PREFERENCES_DIR / f"{component}.json",
            key,
            {"value": value, "description": description},
        )
