"""Pool-depth sources for readiness checks."""

from __future__ import annotations

import subprocess
from typing import Protocol

from .capacity_policy import PoolObservation

QUEUE_LINE_MARKER = "Requests in top-level queue"
DEFAULT_STATUS_COMMAND: tuple[str, ...] = ("passenger-status",)
DEFAULT_TIMEOUT_SEC = 5.0


class PoolStatusError(RuntimeError):
    """Raised when the current pool depth cannot be determined."""


class PoolStatusSource(Protocol):
    def observe(self) -> PoolObservation: ...


def parse_queue_length(output: str) -> int:
    """Extract the top-level queue depth from `passenger-status` output.

    The relevant line looks like `Requests in top-level queue : 0`.
    """
    for line in output.splitlines():
        if QUEUE_LINE_MARKER not in line:
            continue
        _, sep, value = line.partition(":")
        if not sep:
            break
        text = value.strip()
        try:
            depth = int(text)
        except ValueError as exc:
            raise PoolStatusError(f"Failed to parse queue length from {text!r}.") from exc
        if depth < 0:
            raise PoolStatusError(f"Queue length must be non-negative, got {depth}.")
        return depth
    raise PoolStatusError("Failed to parse queue length: marker line not found.")


class PassengerStatusSource:
    """Reads queue depth by shelling out to `passenger-status`."""

    def __init__(
        self,
        *,
        command: tuple[str, ...] | list[str] = DEFAULT_STATUS_COMMAND,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self._command = list(command)
        self._timeout_sec = max(0.1, float(timeout_sec))

    @property
    def timeout_sec(self) -> float:
        return self._timeout_sec

    def observe(self) -> PoolObservation:
        try:
            completed = subprocess.run(
                self._command,
                capture_output=True,
                text=True,
                timeout=self._timeout_sec,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise PoolStatusError(f"{self._command[0]} timed out after {self._timeout_sec}s.") from exc
        except OSError as exc:
            raise PoolStatusError(f"{self._command[0]} failed to start: {exc}") from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            detail = f": {stderr}" if stderr else ""
            raise PoolStatusError(f"{self._command[0]} exited with code {completed.returncode}{detail}")

        return PoolObservation(current_size=parse_queue_length(completed.stdout or ""))


class StaticPoolStatusSource:
    """Always reports the same depth; useful for local runs and tests."""

    def __init__(self, current_size: int) -> None:
        self._observation = PoolObservation(current_size=current_size)

    def observe(self) -> PoolObservation:
        return self._observation
