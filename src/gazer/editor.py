"""Open-in-editor action — runs the configured editor on a file.

Backs the ``/api/open-in-editor`` endpoint.  Shares no state with the live
core.
"""

from __future__ import annotations

import asyncio
import shlex

from gazer._errors import EditorError


async def open_in_editor(command: str, filepath: str, *, timeout: float = 10.0) -> str:
    """Run ``<command> <filepath>`` without a shell.

    *command* may carry its own arguments (``"code --reuse-window"``).

    Returns:
        A human-readable success message.

    Raises:
        EditorError: If filepath is empty, the command cannot be started,
            exits non-zero, or does not finish within *timeout*.

    """
    if not filepath:
        msg = "filepath is required"
        raise EditorError(msg)

    argv = [*shlex.split(command), filepath]
    if not argv[:-1]:
        msg = "no editor command configured"
        raise EditorError(msg)

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        msg = f"cannot run {argv[0]}: {exc}"
        raise EditorError(msg) from exc

    try:
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except TimeoutError as exc:
        proc.kill()
        await proc.wait()
        msg = f"{argv[0]} did not exit within {timeout:.0f}s"
        raise EditorError(msg) from exc

    if proc.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip()
        msg = f"{argv[0]} exited with {proc.returncode}: {detail}"
        raise EditorError(msg)

    return f"Opened {filepath} in {argv[0]}"
