"""Copilot CLI Process Invoker"""

import logging
import subprocess
import threading
from pathlib import Path

from devflow.copilot.base import Failure, FailureKind, InvocationOutcome, Success
from devflow.copilot.diagnostics import (
    classify,
    is_auth_diagnostic,
    read_latest_log,
    redact_secrets,
    sanitize_error_message,
)

logger = logging.getLogger(__name__)

READ_CHUNK_BYTES = 64 * 1024
READER_JOIN_TIMEOUT = 5  # seconds


class CopilotRunner:
    """Runs `copilot -s --prompt <text>` as a subprocess.

    The prompt always travels as a single argv element. No shell is involved,
    so quotes, backticks, `$(...)` and newlines in a diff can't change what
    gets executed.

    Both pipes are drained in chunks while the process runs. Once either one
    passes max_output_bytes the process is killed.
    """

    DEFAULT_BINARY = "copilot"
    DEFAULT_TIMEOUT = 60  # seconds
    MAX_OUTPUT_BYTES = 1024 * 1024

    def __init__(
        self,
        binary: str | None = None,
        timeout: float | None = None,
        max_output_bytes: int | None = None,
        log_dir: Path | None = None,
    ):
        self.binary = binary or self.DEFAULT_BINARY
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.max_output_bytes = max_output_bytes or self.MAX_OUTPUT_BYTES
        self.log_dir = log_dir

    def build_command(self, prompt: str, model: str | None = None) -> list[str]:
        command = [self.binary]
        if model:
            command.extend(['--model', model])
        command.extend(['-s', '--prompt', prompt])
        return command

    def run(self, prompt: str, model: str | None = None) -> InvocationOutcome:
        command = self.build_command(prompt, model)
        logger.debug("Running %s (model=%s, prompt=%d chars)", self.binary, model or "default", len(prompt))

        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError:
            return Failure(
                FailureKind.TOOL_UNAVAILABLE,
                "Copilot CLI not found. Install with: npm install -g @github/copilot",
            )
        except OSError as e:
            return Failure(FailureKind.TOOL_UNAVAILABLE, f"Could not start Copilot CLI: {e.strerror or e}")

        stdout, stderr = bytearray(), bytearray()
        overflow = threading.Event()
        readers = [
            threading.Thread(target=self._drain, args=(process, stream, sink, overflow), daemon=True)
            for stream, sink in ((process.stdout, stdout), (process.stderr, stderr))
        ]
        for reader in readers:
            reader.start()

        try:
            returncode = process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
            return Failure(
                FailureKind.TIMEOUT,
                f"Copilot CLI timed out after {self.timeout:g}s. "
                "Try a faster model: devflow config set copilot_model claude-haiku-4.5",
            )
        finally:
            for reader in readers:
                reader.join(timeout=READER_JOIN_TIMEOUT)
            process.stdout.close()
            process.stderr.close()

        if overflow.is_set():
            return Failure(
                FailureKind.BUFFER_EXCEEDED,
                f"Copilot CLI output exceeded {self.max_output_bytes // 1024} KB",
            )

        if returncode != 0:
            return self._failure_from_exit(returncode, stderr.decode('utf-8', errors='replace').strip())

        return Success(stdout.decode('utf-8', errors='replace'))

    def _drain(self, process, stream, sink: bytearray, overflow: threading.Event) -> None:
        """Copy one pipe into sink, killing the process once it passes the cap."""
        for chunk in iter(lambda: stream.read1(READ_CHUNK_BYTES), b''):
            sink.extend(chunk)
            if len(sink) > self.max_output_bytes:
                logger.debug("Output passed %d bytes, killing %s", self.max_output_bytes, self.binary)
                overflow.set()
                process.kill()
                return

    def _failure_from_exit(self, returncode: int, stderr: str) -> Failure:
        if stderr:
            kind = classify(redact_secrets(stderr))
            return Failure(kind, sanitize_error_message(stderr))

        diagnostic = read_latest_log(self.log_dir)
        if diagnostic:
            if is_auth_diagnostic(diagnostic):
                return Failure(FailureKind.AUTH_FAILURE, diagnostic)
            return Failure(classify(diagnostic), diagnostic)

        return Failure(FailureKind.GENERIC, f"Copilot CLI exited with code {returncode}")
