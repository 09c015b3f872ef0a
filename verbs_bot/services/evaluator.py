import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

# Seconds to wait for a killed evaluator to be reaped
KILL_WAIT_TIMEOUT = 3


class EvaluatorError(Exception):
    """Base error for everything that can go wrong talking to the evaluator."""


class EvaluatorUnavailable(EvaluatorError):
    """Evaluator could not be launched, timed out or exited with non-zero status."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class EvaluatorProtocolError(EvaluatorError):
    """Evaluator exited cleanly but its output is empty or malformed."""


class EmptyCorpus(EvaluatorError):
    """Prompt listing succeeded but produced no usable prompts."""


@dataclass(frozen=True)
class EvaluationOutcome:
    """Result of checking one answer against one prompt."""

    is_success: bool
    message: Optional[str] = None


class EvaluatorClient(Protocol):
    async def list_prompts(self) -> list[str]: ...

    async def check_answer(self, prompt: str, answer: str) -> EvaluationOutcome: ...


def parse_prompts(output: str) -> list[str]:
    """Split evaluator output into trimmed, non-empty lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def parse_outcome(output: str) -> EvaluationOutcome:
    """Parse `{"is_success": bool, "msg": str | null}` into an outcome."""
    if not output.strip():
        raise EvaluatorProtocolError("Evaluator returned empty output")
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise EvaluatorProtocolError(f"Evaluator output is not JSON: {e}") from e

    if not isinstance(data, dict):
        raise EvaluatorProtocolError("Evaluator output is not a JSON object")

    is_success = data.get("is_success")
    if not isinstance(is_success, bool):
        raise EvaluatorProtocolError("Field 'is_success' is missing or not a boolean")

    message = data.get("msg")
    if message is not None and not isinstance(message, str):
        raise EvaluatorProtocolError("Field 'msg' is not a string")

    return EvaluationOutcome(is_success=is_success, message=message)


async def _kill_process(proc) -> None:
    """Kill the evaluator if it is still running and reap it."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    try:
        await asyncio.wait_for(proc.wait(), timeout=KILL_WAIT_TIMEOUT)
    except (asyncio.TimeoutError, ProcessLookupError, OSError):
        logging.warning(f"Evaluator process {proc.pid} was not reaped")


class SubprocessEvaluator:
    """Runs the external evaluator executable once per call."""

    def __init__(self, executable: Path, timeout: Optional[float] = None):
        self.executable = Path(executable)
        self.timeout = timeout

    async def list_prompts(self) -> list[str]:
        output = await self._run("verbs")
        prompts = parse_prompts(output)
        if not prompts:
            raise EmptyCorpus("Evaluator returned no prompts")
        return prompts

    async def check_answer(self, prompt: str, answer: str) -> EvaluationOutcome:
        output = await self._run("check", "-v", prompt, "-f", answer)
        return parse_outcome(output)

    async def _run(self, *args: str) -> str:
        """Start the evaluator, drain it and return stdout if it exited with 0."""
        try:
            proc = await asyncio.create_subprocess_exec(
                str(self.executable),
                *args,
                cwd=str(self.executable.parent),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: arguments the OS cannot take, e.g. an embedded null byte
            raise EvaluatorUnavailable(f"Failed to launch evaluator: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            await _kill_process(proc)
            raise EvaluatorUnavailable(
                f"Evaluator did not finish within {self.timeout}s"
            ) from None
        except BaseException:
            # Cancelled while draining, do not leave the child running
            await _kill_process(proc)
            raise

        if proc.returncode != 0:
            logging.debug(
                f"Evaluator {args[0]} stderr: {stderr.decode(errors='replace').strip()}"
            )
            raise EvaluatorUnavailable(
                f"Evaluator exited with code {proc.returncode}",
                exit_code=proc.returncode,
            )

        return stdout.decode(errors="replace")


class StaticEvaluator:
    """In-process evaluator over a fixed corpus.

    `answers` maps a prompt to its correct form; an answer matches when its
    whitespace-separated words equal the correct form's words, ignoring case.
    """

    def __init__(self, answers: dict[str, str], prompts: Optional[list[str]] = None):
        self.answers = answers
        self.prompts = list(answers) if prompts is None else list(prompts)

    async def list_prompts(self) -> list[str]:
        if not self.prompts:
            raise EmptyCorpus("No prompts configured")
        return list(self.prompts)

    async def check_answer(self, prompt: str, answer: str) -> EvaluationOutcome:
        expected = self.answers.get(prompt)
        if expected is None:
            raise EvaluatorProtocolError(f"Unknown prompt: {prompt}")
        if answer.lower().split() == expected.lower().split():
            return EvaluationOutcome(is_success=True)
        return EvaluationOutcome(is_success=False, message=expected)
