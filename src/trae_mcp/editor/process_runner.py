"""
ProcessRunner - Bounded and fire-and-forget process execution.

This subsystem handles:
- Running a child process with captured stdout/stderr and a wall-clock timeout
- Killing the child when the timeout elapses
- Starting detached processes (editor windows, file managers) without waiting
"""

import logging
import os
import shlex
import signal
import subprocess
import threading
import time
from typing import IO, Optional, Union

import psutil

from ..core.constants import DEFAULT_TIMEOUT_MS, KILL_WAIT_SECONDS, READER_JOIN_SECONDS
from ..core.platform import PlatformProfile, get_platform_profile
from .types import OutputCallback, ProcessExecutionRequest, ProcessExecutionResult

logger = logging.getLogger(__name__)


def quote_argument(value: str) -> str:
    """Wrap a value in double quotes unless it is already quoted."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value
    return f'"{value}"'


def build_command(
    executable_path: str,
    arguments: str = "",
    profile: Optional[PlatformProfile] = None,
) -> Union[str, list[str]]:
    """
    Turn an executable and a single argument string into a Popen command.

    Windows takes the command line as one string; elsewhere the argument
    string is split with shell rules.

    Raises:
        ValueError: If the argument string has unbalanced quotes
    """
    profile = profile or get_platform_profile()
    if profile.name == "windows":
        return f"{quote_argument(executable_path)} {arguments}".rstrip()
    return [executable_path, *shlex.split(arguments)]


def _notify_line(callback: OutputCallback, line: str) -> None:
    try:
        callback(line)
    except Exception as e:
        logger.warning(f"Output callback failed: {e}")


def _read_stream(
    stream: IO[str],
    sink: list[str],
    drained: threading.Event,
    callback: Optional[OutputCallback],
) -> None:
    """Append lines from a pipe until end-of-stream, then signal drained."""
    try:
        for line in iter(stream.readline, ""):
            sink.append(line)
            if callback is not None:
                _notify_line(callback, line.rstrip("\n"))
    except (OSError, ValueError) as e:
        logger.debug(f"Pipe reader stopped: {e}")
    finally:
        drained.set()
        try:
            stream.close()
        except OSError:
            pass


def _start_reader(
    stream: IO[str],
    sink: list[str],
    drained: threading.Event,
    callback: Optional[OutputCallback] = None,
) -> threading.Thread:
    reader = threading.Thread(
        target=_read_stream,
        args=(stream, sink, drained, callback),
        daemon=True,
    )
    reader.start()
    return reader


def _wait_for_completion(
    process: subprocess.Popen,
    timeout_s: float,
    drained_events: tuple[threading.Event, ...],
) -> bool:
    """
    Wait for process exit and every drained signal against one deadline.

    Returns:
        True if all completions happened before the deadline, False otherwise
    """
    deadline = time.monotonic() + timeout_s
    try:
        process.wait(timeout=max(0.0, deadline - time.monotonic()))
    except subprocess.TimeoutExpired:
        return False

    for drained in drained_events:
        if not drained.wait(max(0.0, deadline - time.monotonic())):
            return False
    return True


def _kill_quietly(process: subprocess.Popen) -> bool:
    """
    Kill a process and reap it. Errors are discarded.

    The process may exit between the timeout and the kill, so a failure here
    is not an error for the caller.

    Returns:
        True if the process is known to be gone, False otherwise
    """
    try:
        process.kill()
    except OSError as e:
        logger.debug(f"Kill of PID {process.pid} failed: {e}")
        return False

    try:
        process.wait(timeout=KILL_WAIT_SECONDS)
    except subprocess.TimeoutExpired:
        logger.debug(f"PID {process.pid} still running after kill")
        return False
    return True


def _kill_descendants(process: subprocess.Popen, profile: PlatformProfile) -> None:
    """
    Kill everything the child started, so inherited pipes reach end-of-stream.

    POSIX children lead their own session, so the whole process group is
    killed (this also reaches grandchildren whose parent already exited).
    On Windows the live process tree is walked with psutil.
    """
    if profile.name == "windows":
        try:
            descendants = psutil.Process(process.pid).children(recursive=True)
        except psutil.Error as e:
            logger.debug(f"Cannot list children of PID {process.pid}: {e}")
            return
        for child in descendants:
            try:
                child.kill()
            except psutil.Error as e:
                logger.debug(f"Kill of child PID {child.pid} failed: {e}")
        return

    try:
        os.killpg(process.pid, signal.SIGKILL)
    except OSError as e:
        logger.debug(f"Kill of process group {process.pid} failed: {e}")


def _release_pipes(process: subprocess.Popen, readers: list[threading.Thread]) -> None:
    """Close the child's pipes once every reader has stopped."""
    for reader in readers:
        reader.join(READER_JOIN_SECONDS)

    if any(reader.is_alive() for reader in readers):
        # Closing under a blocked reader would wait on its buffer lock
        logger.warning(f"Output pipes of PID {process.pid} still held open by another process")
        return

    for stream in (process.stdout, process.stderr):
        if stream is not None:
            stream.close()


def execute(
    request: ProcessExecutionRequest,
    profile: Optional[PlatformProfile] = None,
) -> ProcessExecutionResult:
    """
    Run a process to completion or until its timeout elapses.

    Blocks the calling thread. Never raises: launch failures and timeouts are
    reported through ``success=False`` with whatever output was captured.

    Args:
        request: What to run and how long to wait
        profile: Platform profile (defaults to the running platform)

    Returns:
        ProcessExecutionResult
    """
    profile = profile or get_platform_profile()
    stdout_lines: list[str] = []
    stderr_lines: list[str] = []

    try:
        command = build_command(request.executable_path, request.arguments, profile)
        output = subprocess.PIPE if request.capture_output else subprocess.DEVNULL
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            text=True,
            encoding="utf-8",
            errors="replace",
            **profile.captured_process_kwargs(),
        )
    except (OSError, ValueError) as e:
        logger.error(f"Failed to start {request.executable_path}: {e}")
        return ProcessExecutionResult(success=False, error=str(e))

    logger.debug(f"Started {request.executable_path} (PID: {process.pid})")

    stdout_drained = threading.Event()
    stderr_drained = threading.Event()
    readers: list[threading.Thread] = []
    if request.capture_output:
        readers.append(
            _start_reader(process.stdout, stdout_lines, stdout_drained, request.output_callback)
        )
        readers.append(_start_reader(process.stderr, stderr_lines, stderr_drained))
    else:
        stdout_drained.set()
        stderr_drained.set()

    completed = False
    try:
        completed = _wait_for_completion(
            process, request.timeout_ms / 1000.0, (stdout_drained, stderr_drained)
        )
        if not completed:
            logger.warning(
                f"{request.executable_path} did not complete within {request.timeout_ms} ms, killing"
            )
            # Descendants first: on Windows the tree is gone once the child dies
            _kill_descendants(process, profile)
            _kill_quietly(process)
    finally:
        _release_pipes(process, readers)

    return ProcessExecutionResult(
        success=completed,
        stdout="".join(stdout_lines),
        stderr="".join(stderr_lines),
        timed_out=not completed,
    )


def run(
    executable_path: str,
    arguments: str = "",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    output_callback: Optional[OutputCallback] = None,
) -> ProcessExecutionResult:
    """Shorthand for execute() with a freshly built request."""
    return execute(
        ProcessExecutionRequest(
            executable_path=executable_path,
            arguments=arguments,
            timeout_ms=timeout_ms,
            output_callback=output_callback,
        )
    )


def launch(
    executable_path: str,
    arguments: str = "",
    profile: Optional[PlatformProfile] = None,
) -> None:
    """
    Start a detached process and return immediately.

    Output is discarded and the process is never waited for.

    Raises:
        OSError: If the process cannot be started (missing executable, permissions)
        ValueError: If the argument string has unbalanced quotes
    """
    profile = profile or get_platform_profile()
    command = build_command(executable_path, arguments, profile)
    process = subprocess.Popen(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        close_fds=True,
        **profile.detached_process_kwargs(),
    )
    logger.info(f"Launched {executable_path} (PID: {process.pid})")
