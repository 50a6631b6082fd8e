"""Edge Runtime process control.

The runtime reads the shared ``.env`` only at boot, so every secret change is
followed by a restart.  A failed restart is reported, never raised: by then the
secret file has already been rewritten.
"""

from __future__ import annotations

import asyncio
import logging
import shlex

logger = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────


async def _run(
    cmd: list[str],
    *,
    timeout: float = 30.0,
) -> tuple[int, str, str]:
    """Run a subprocess and return (returncode, stdout, stderr)."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")
    except OSError as exc:
        return (126, "", f"Command could not be started: {exc}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            proc.communicate(), timeout=timeout,
        )
    except TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass  # exited just as the timeout fired
        await proc.wait()
        return (1, "", f"Command timed out after {timeout}s")
    return (
        proc.returncode or 0,
        stdout_bytes.decode(errors="replace").strip(),
        stderr_bytes.decode(errors="replace").strip(),
    )


# ── Controller ───────────────────────────────────────────────────────


class RuntimeController:
    """Restarts the Edge Runtime container/process with a bounded timeout."""

    def __init__(self, command: str | list[str], *, timeout: float = 30.0) -> None:
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.timeout = timeout

    @property
    def manual_hint(self) -> str:
        return shlex.join(self.command)

    async def restart(self) -> bool:
        if not self.command:
            logger.warning("No runtime restart command configured")
            return False

        try:
            rc, out, err = await _run(self.command, timeout=self.timeout)
        except Exception as exc:
            logger.warning("Edge Runtime restart failed: %s", exc)
            return False
        if rc == 0:
            logger.info("Edge Runtime restarted (%s)", self.manual_hint)
            return True

        combined = f"{out}\n{err}".strip()
        logger.warning("Edge Runtime restart failed (exit %d): %s", rc, combined)
        return False
