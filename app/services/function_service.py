"""Function service — manages Edge Function directories on disk."""

from __future__ import annotations

import json
import logging
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path

from app.schemas.common import ErrorKind
from app.schemas.function import (
    FunctionDeleteResult,
    FunctionDeployResult,
    FunctionInfo,
    FunctionListResult,
)
from app.utils.fs import missing_root_error

logger = logging.getLogger(__name__)

IMPORT_MAP_FILE = "import_map.json"
NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

HOT_RELOAD_NOTE = "Function is live immediately — the Edge Runtime hot-reloads on file changes"


class FunctionStore:
    """One directory per function under ``functions_dir``::

        <functions_dir>/<name>/index.<ext>
        <functions_dir>/<name>/import_map.json   (optional)
    """

    def __init__(self, functions_dir: Path | None, *, source_ext: str = "ts") -> None:
        self.functions_dir = functions_dir
        self.source_file = f"index.{source_ext.lstrip('.')}"

    def _check_name(self, name: str) -> str | None:
        if not NAME_PATTERN.fullmatch(name):
            return (
                f"Invalid function name '{name}'. "
                "Use letters, numbers, '-' and '_' (must not start with '-' or '_')."
            )
        return None

    def _function_dir(self, name: str) -> Path:
        return self.functions_dir / name

    async def deploy(
        self,
        name: str,
        source: str,
        import_map: dict[str, str] | None = None,
        verify_jwt: bool | None = None,
    ) -> FunctionDeployResult:
        if err := self._check_name(name):
            return FunctionDeployResult.fail(ErrorKind.INVALID_NAME, err)
        if err := missing_root_error(self.functions_dir):
            return FunctionDeployResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        fn_dir = self._function_dir(name)
        try:
            fn_dir.mkdir(parents=True, exist_ok=True)
            (fn_dir / self.source_file).write_text(source, encoding="utf-8")

            # An import map is only written when given; an existing one is kept otherwise
            if import_map:
                (fn_dir / IMPORT_MAP_FILE).write_text(
                    json.dumps({"imports": import_map}, indent=2), encoding="utf-8"
                )
        except OSError as exc:
            logger.error("Failed to deploy Edge Function '%s': %s", name, exc)
            return FunctionDeployResult.fail(ErrorKind.IO_FAILURE, str(exc))

        logger.info("Edge Function '%s' written to %s", name, fn_dir)
        return FunctionDeployResult(
            message=f"Edge Function '{name}' deployed successfully",
            path=str(fn_dir),
            verify_jwt=True if verify_jwt is None else verify_jwt,
            note=HOT_RELOAD_NOTE,
        )

    def _describe(self, fn_dir: Path) -> FunctionInfo | None:
        """Describe one function dir; None if it is not (or no longer) a directory."""
        index = fn_dir / self.source_file
        try:
            mtime = index.stat().st_mtime
        except FileNotFoundError:
            updated_at = None
        else:
            updated_at = datetime.fromtimestamp(mtime, tz=timezone.utc)
        has_import_map = (fn_dir / IMPORT_MAP_FILE).exists()

        # Checked last so a dir removed while being described is dropped
        if not fn_dir.is_dir():
            return None
        return FunctionInfo(
            name=fn_dir.name,
            has_index=updated_at is not None,
            has_import_map=has_import_map,
            updated_at=updated_at,
        )

    async def list(self) -> FunctionListResult:
        if err := missing_root_error(self.functions_dir):
            return FunctionListResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        try:
            entries = sorted(self.functions_dir.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            return FunctionListResult.fail(ErrorKind.IO_FAILURE, str(exc))

        functions: list[FunctionInfo] = []
        for child in entries:
            if child.name.startswith("."):
                continue
            try:
                info = self._describe(child)
            except OSError as exc:
                # Unreadable while listing
                logger.warning("Skipping function dir %s: %s", child, exc)
                continue
            if info is not None:
                functions.append(info)

        logger.info("Listed %d edge functions", len(functions))
        return FunctionListResult(functions=functions)

    async def delete(self, name: str) -> FunctionDeleteResult:
        if err := self._check_name(name):
            return FunctionDeleteResult.fail(ErrorKind.INVALID_NAME, err)
        if err := missing_root_error(self.functions_dir):
            return FunctionDeleteResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        fn_dir = self._function_dir(name)
        if not fn_dir.is_dir():
            return FunctionDeleteResult.fail(ErrorKind.NOT_FOUND, f"Function '{name}' not found")

        try:
            shutil.rmtree(fn_dir)
        except OSError as exc:
            logger.error("Failed to delete Edge Function '%s': %s", name, exc)
            return FunctionDeleteResult.fail(ErrorKind.IO_FAILURE, str(exc))

        logger.info("Edge Function '%s' deleted", name)
        return FunctionDeleteResult(message=f"Edge Function '{name}' deleted successfully")
