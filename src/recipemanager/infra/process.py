from __future__ import annotations

import os
import queue
import signal
import subprocess
import threading
from typing import IO, Callable


STDOUT = "stdout"
STDERR = "stderr"

LineCallback = Callable[[str, str], None]

_EOF = object()


def stream_process(
    command: str,
    *,
    cwd: str,
    on_line: LineCallback,
) -> int:
    """Run ``command`` through the shell and hand each output line to ``on_line``.

    ``on_line(stream, text)`` is called on the calling thread as lines arrive.
    There is no timeout. On KeyboardInterrupt the whole process group is
    killed before the interrupt is re-raised.
    """
    proc = subprocess.Popen(
        command,
        shell=True,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
        start_new_session=hasattr(os, "killpg"),
    )

    lines: queue.Queue[tuple[str, object]] = queue.Queue()
    readers = [
        threading.Thread(target=_pump, args=(proc.stdout, STDOUT, lines), daemon=True),
        threading.Thread(target=_pump, args=(proc.stderr, STDERR, lines), daemon=True),
    ]
    for reader in readers:
        reader.start()

    try:
        open_streams = len(readers)
        while open_streams:
            stream, text = lines.get()
            if text is _EOF:
                open_streams -= 1
                continue
            on_line(stream, str(text))
        for reader in readers:
            reader.join()
        return proc.wait()
    except KeyboardInterrupt:
        _kill_tree(proc)
        raise


def _pump(pipe: IO[str] | None, stream: str, lines: queue.Queue[tuple[str, object]]) -> None:
    if pipe is None:
        lines.put((stream, _EOF))
        return
    try:
        for line in iter(pipe.readline, ""):
            lines.put((stream, line.rstrip("\r\n")))
    finally:
        pipe.close()
        lines.put((stream, _EOF))


def _kill_tree(proc: subprocess.Popen[str]) -> None:
    if proc.poll() is not None:
        return
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:  # pragma: no cover - non-POSIX
        proc.kill()
    proc.wait()
