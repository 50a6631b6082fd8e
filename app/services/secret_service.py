"""Secret service — the shared ``.env`` read by every deployed function."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from app.schemas.common import ErrorKind
from app.schemas.secret import (
    SecretDeleteResult,
    SecretEntry,
    SecretListResult,
    SecretSetResult,
)
from app.services.runtime_controller import RuntimeController
from app.utils import envfile
from app.utils.fs import atomic_write_text, missing_root_error

logger = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"
MASK_CHAR = "•"
MASK_VISIBLE = 3
MASK_MAX = 20


def mask_value(value: str) -> str:
    """Show the first 3 chars, mask the rest (at most 20 mask chars)."""
    return value[:MASK_VISIBLE] + MASK_CHAR * min(len(value) - MASK_VISIBLE, MASK_MAX)


class SecretStore:
    """CRUD over ``<functions_dir>/.env``; every mutation restarts the runtime.

    Nothing is cached: each call re-reads the file.  The read-modify-write of
    ``set``/``delete`` runs under one lock, so writes from this process never
    interleave; writers in other processes can still overwrite each other.
    """

    def __init__(self, functions_dir: Path | None, runtime: RuntimeController) -> None:
        self.functions_dir = functions_dir
        self.runtime = runtime
        self._lock = asyncio.Lock()

    @property
    def env_path(self) -> Path | None:
        return self.functions_dir / ENV_FILE_NAME if self.functions_dir else None

    def _read(self, path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        return envfile.parse(path.read_text(encoding="utf-8"))

    def _restart_note(self, restarted: bool, done: str, pending: str) -> str:
        if restarted:
            return f"Edge Runtime restarted — {done}"
        return f"{pending} but runtime restart failed. Run: {self.runtime.manual_hint}"

    async def set(self, key: str, value: str) -> SecretSetResult:
        if not envfile.is_valid_key(key):
            return SecretSetResult.fail(
                ErrorKind.INVALID_KEY,
                "Invalid key name. Use letters, numbers, and underscores only.",
            )
        if err := missing_root_error(self.functions_dir):
            return SecretSetResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        path = self.env_path
        async with self._lock:
            try:
                env = self._read(path)
                existed = key in env
                env[key] = value
                atomic_write_text(path, envfile.serialize(env))
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Failed to write secret '%s': %s", key, exc)
                return SecretSetResult.fail(ErrorKind.IO_FAILURE, str(exc))

            restarted = await self.runtime.restart()

        action = "updated" if existed else "created"
        logger.info("Secret '%s' %s", key, action)
        return SecretSetResult(
            message=f"Secret '{key}' {action} successfully",
            created=not existed,
            restarted=restarted,
            note=self._restart_note(restarted, "secret is live now", "Secret saved"),
        )

    async def delete(self, key: str) -> SecretDeleteResult:
        # Any key present in the file can be removed, including hand-edited ones
        if err := missing_root_error(self.functions_dir):
            return SecretDeleteResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        path = self.env_path
        async with self._lock:
            try:
                if not path.exists():
                    return SecretDeleteResult.fail(ErrorKind.NOT_FOUND, "No secrets file exists")
                env = self._read(path)
                if key not in env:
                    return SecretDeleteResult.fail(ErrorKind.NOT_FOUND, f"Secret '{key}' not found")
                del env[key]
                atomic_write_text(path, envfile.serialize(env))
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Failed to delete secret '%s': %s", key, exc)
                return SecretDeleteResult.fail(ErrorKind.IO_FAILURE, str(exc))

            restarted = await self.runtime.restart()

        logger.info("Secret '%s' deleted", key)
        return SecretDeleteResult(
            message=f"Secret '{key}' deleted successfully",
            restarted=restarted,
            note=self._restart_note(restarted, "secret removed", "Secret removed"),
        )

    async def list(self) -> SecretListResult:
        if err := missing_root_error(self.functions_dir):
            return SecretListResult.fail(ErrorKind.CONFIGURATION_MISSING, err)

        path = self.env_path
        try:
            if not path.exists():
                return SecretListResult(secrets=[], message="No secrets configured")
            env = self._read(path)
        except (OSError, UnicodeDecodeError) as exc:
            return SecretListResult.fail(ErrorKind.IO_FAILURE, str(exc))

        secrets = [
            SecretEntry(key=k, masked_value=mask_value(v), length=len(v))
            for k, v in env.items()
        ]
        logger.info("Listed %d secrets", len(secrets))
        return SecretListResult(secrets=secrets, message=f"{len(secrets)} secret(s) configured")
