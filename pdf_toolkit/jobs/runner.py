"""Engine process runner.

Spawns one engine invocation non-interactively and accumulates stdout and
stderr independently as chunks arrive. Spawn failures come back through the
same result path (exit_code None, empty output) instead of raising, so callers
only ever branch on the RunResult.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class RunResult:
    exit_code: int | None
    stdout: str
    stderr: str


async def _drain(stream: asyncio.StreamReader | None, sink: list[str]) -> None:
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        sink.append(decoder.decode(chunk))
    sink.append(decoder.decode(b"", final=True))


async def run_engine(
    command: str,
    args: Sequence[str],
    cwd: str | None = None,
    *,
    timeout: float | None = None,
) -> RunResult:
    """Run `command args...` in `cwd` and wait for it to exit.

    With timeout=None the call waits indefinitely. When a timeout elapses the
    process is killed and the result carries exit_code=None together with the
    output captured so far. A process terminated by a signal also reports
    exit_code=None.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (OSError, ValueError) as exc:
        logger.error("Could not start engine %r: %s", command, exc)
        return RunResult(exit_code=None, stdout="", stderr="")

    stdout: list[str] = []
    stderr: list[str] = []
    readers = asyncio.gather(_drain(process.stdout, stdout), _drain(process.stderr, stderr))

    timed_out = False
    try:
        await asyncio.wait_for(asyncio.shield(readers), timeout=timeout)
    except asyncio.TimeoutError:
        timed_out = True
        logger.warning("Engine exceeded %.1fs timeout; killing pid %s", timeout, process.pid)
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await readers

    returncode = await process.wait()
    exit_code = None if timed_out or returncode < 0 else returncode
    return RunResult(exit_code=exit_code, stdout="".join(stdout), stderr="".join(stderr))
