import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from playwright.async_api import Error as PlaywrightError

from browser.errors import PreconditionFailure, TimeoutFailure, TransientReadFailure
from config import config


logger = logging.getLogger(__name__)

# _poll_once outcomes
DONE = "done"
EMPTY = "empty"
CHANGED = "changed"


@dataclass(frozen=True)
class WaitPolicy:
    settle_delay_ms: int = config.SETTLE_DELAY_MS
    max_attempts: int = config.MAX_ATTEMPTS
    poll_interval_ms: int = config.POLL_INTERVAL_MS
    read_timeout_ms: int = config.READ_TIMEOUT_MS
    stabilize_delay_ms: int = config.STABILIZE_DELAY_MS
    fallback_timeout_ms: int = config.FALLBACK_TIMEOUT_MS

    def with_overrides(self, max_attempts: Optional[int] = None, poll_interval_ms: Optional[int] = None) -> "WaitPolicy":
        changes = {}
        if max_attempts is not None:
            changes["max_attempts"] = max_attempts
        if poll_interval_ms is not None:
            changes["poll_interval_ms"] = poll_interval_ms
        return replace(self, **changes)

    @property
    def budget_ms(self) -> int:
        """Upper bound on sleeping before the terminal timeout (reads excluded)."""
        return (
            self.settle_delay_ms
            + self.max_attempts * self.poll_interval_ms
            + self.fallback_timeout_ms
        )


@dataclass
class PollState:
    max_attempts: int
    poll_interval_ms: int
    attempts_made: int = 0
    last_observed_text: Optional[str] = None
    read_failures: int = 0
    phase: str = "Idle"


class AsyncOutputWaiter:
    """
    Turns the translator's debounced, unsignalled output update into a
    bounded wait.

    The waiter writes the input, lets the page settle, then polls the output
    region until it holds non-empty text that survives a stabilisation
    re-read. Polling runs for ``max_attempts`` iterations and then keeps going
    under one fallback deadline; only that deadline raises TimeoutFailure.
    """

    def __init__(
        self,
        policy: Optional[WaitPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.policy = policy or WaitPolicy()
        self._sleep = sleep
        self._clock = clock
        self.state: Optional[PollState] = None

    async def wait_for_translation(self, input_handle, output_handle, text: str, typing_delay_ms: Optional[int] = None):
        policy = self.policy
        state = PollState(
            max_attempts=policy.max_attempts,
            poll_interval_ms=policy.poll_interval_ms,
        )
        self.state = state

        if text is None or not text.strip():
            raise PreconditionFailure("Input text is blank; the translator renders nothing to wait for")

        await self._write_input(input_handle, text, typing_delay_ms)
        state.phase = "InputWritten"

        state.phase = "Settling"
        await self._pause(policy.settle_delay_ms)

        # ─────────── POLL ───────────
        # An attempt costs one poll interval, or the stabilisation pause when it
        # found text. The phase also ends at its clock deadline.
        state.phase = "Polling"
        polling_deadline = self._clock() + policy.max_attempts * policy.poll_interval_ms / 1000
        while state.attempts_made < policy.max_attempts and self._clock() < polling_deadline:
            outcome = await self._poll_once(output_handle, state)
            if outcome == DONE:
                return self._done(output_handle, state)
            if outcome == EMPTY:
                await self._pause(policy.poll_interval_ms)
            state.attempts_made += 1

        # ─────────── FALLBACK ───────────
        state.phase = "FallbackWait"
        logger.info(
            f"⏳ No stable output after {state.attempts_made} attempts, "
            f"waiting up to {policy.fallback_timeout_ms}ms more"
        )
        deadline = self._clock() + policy.fallback_timeout_ms / 1000
        while self._clock() < deadline:
            outcome = await self._poll_once(output_handle, state)
            if outcome == DONE:
                return self._done(output_handle, state)
            if outcome == EMPTY:
                await self._pause(policy.poll_interval_ms)

        state.phase = "TimedOutFailure"
        logger.error(f"❌ Output never stabilised. Last text: {state.last_observed_text!r}")
        raise TimeoutFailure(
            f"Timed out waiting for translation of {text!r} after "
            f"{state.attempts_made} attempts and a {policy.fallback_timeout_ms}ms fallback. "
            f"Last observed text: {state.last_observed_text!r}",
            last_text=state.last_observed_text,
            attempts=state.attempts_made,
        )

    async def _write_input(self, input_handle, text: str, typing_delay_ms: Optional[int]):
        try:
            await input_handle.clear()
            if typing_delay_ms:
                await input_handle.press_sequentially(text, delay=typing_delay_ms)
            else:
                await input_handle.fill(text)
        except PlaywrightError as e:
            raise PreconditionFailure(f"Input is not writable: {e}", locator=str(input_handle)) from e
        logger.debug(f"Filled input with: {text!r}")

    async def _poll_once(self, output_handle, state: PollState) -> str:
        """One read; EMPTY when nothing showed, CHANGED when text moved during the stabilisation pause."""
        text = await self._read(output_handle, state)
        if text is None or not text.strip():
            return EMPTY

        state.phase = "Stabilizing"
        await self._pause(self.policy.stabilize_delay_ms)
        settled = await self._read(output_handle, state)
        if settled == text:
            return DONE

        logger.debug(f"Output changed from {text!r} to {settled!r}, still polling")
        state.phase = "Polling"
        return CHANGED

    async def _read(self, output_handle, state: PollState) -> Optional[str]:
        try:
            text = await output_handle.text_content(timeout=self.policy.read_timeout_ms)
        except PlaywrightError as e:
            state.read_failures += 1
            logger.debug(str(TransientReadFailure(state.attempts_made, e)))
            return None
        state.last_observed_text = text
        return text

    def _done(self, output_handle, state: PollState):
        state.phase = "Done"
        logger.info(f"✓ Output stabilised after {state.attempts_made} attempts: {state.last_observed_text!r}")
        return output_handle

    async def _pause(self, ms: int):
        await self._sleep(ms / 1000)


async def wait_for_translation(
    input_handle,
    output_handle,
    text: str,
    policy: Optional[WaitPolicy] = None,
    typing_delay_ms: Optional[int] = None,
):
    return await AsyncOutputWaiter(policy).wait_for_translation(
        input_handle, output_handle, text, typing_delay_ms=typing_delay_ms
    )
