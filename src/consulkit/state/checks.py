"""A single check driven through its lifecycle against an agent.

``ManagedCheck`` pairs a CheckDescriptor with any ``AgentOperations``
implementation and keeps the client-side view of the check's lifecycle
state in step with what the agent reports.

Example:
    >>> descriptor = CheckDescriptor.ttl("worker heartbeat", ttl="15s", id="worker-ttl")
    >>> async with ManagedCheck(consul.agent, descriptor) as check:
    ...     await check.passing("processed 120 jobs")
"""

from __future__ import annotations

from consulkit.api.agent import AgentOperations
from consulkit.errors import InvalidTransitionError, ServerError
from consulkit.models.agent import AgentCheck
from consulkit.models.checks import CheckDescriptor
from consulkit.models.enums import CheckKind, CheckStatus
from consulkit.state.machine import CheckLifecycleState, initial_status, transition


class ManagedCheck:
    """Lifecycle handle for one check.

    Attributes:
        descriptor: What gets registered
        state: Client-side lifecycle state
        status: Last known status (initial status right after registration)
        output: Last note sent or output observed
    """

    def __init__(self, agent: AgentOperations, descriptor: CheckDescriptor) -> None:
        self.descriptor = descriptor
        self.state = CheckLifecycleState.UNREGISTERED
        self.status: CheckStatus | None = None
        self.output = ""
        self._agent = agent

    @property
    def check_id(self) -> str:
        return self.descriptor.check_id

    def _move(self, target: CheckLifecycleState) -> None:
        self.state = transition(self.state, target, self.check_id)

    async def register(self) -> None:
        """Register (or re-register) the check.

        A handle that was deregistered starts a new lifecycle.
        """
        if self.state.is_terminal():
            self.state = CheckLifecycleState.UNREGISTERED
        await self._agent.register_check(self.descriptor)
        self._move(CheckLifecycleState.REGISTERED)
        self.status = initial_status(self.descriptor)
        self.output = ""

    async def update(self, status: CheckStatus, note: str | None = None) -> None:
        """Push a TTL status.

        Raises:
            InvalidTransitionError: Not a TTL check, or not registered
            ServerError: The agent rejected the update; on 404 the check is
                marked deregistered before the error propagates
        """
        target = CheckLifecycleState.from_status(status)
        if self.descriptor.kind is not CheckKind.TTL:
            raise InvalidTransitionError(
                from_state=self.state.value,
                to_state=target.value,
                details={
                    "check_id": self.check_id,
                    "reason": f"{self.descriptor.kind.value} checks are driven by the agent",
                },
            )
        if not self.state.is_live():
            raise InvalidTransitionError(
                from_state=self.state.value,
                to_state=target.value,
                details={"check_id": self.check_id},
            )
        try:
            await self._agent.update_ttl(self.check_id, status, note)
        except ServerError as exc:
            if exc.status == 404:
                self._move(CheckLifecycleState.DEREGISTERED)
            raise
        self._move(target)
        self.status = status
        self.output = note or ""

    async def passing(self, note: str | None = None) -> None:
        await self.update(CheckStatus.PASSING, note)

    async def warning(self, note: str | None = None) -> None:
        await self.update(CheckStatus.WARNING, note)

    async def critical(self, note: str | None = None) -> None:
        await self.update(CheckStatus.CRITICAL, note)

    async def refresh(self) -> AgentCheck | None:
        """Read the agent's view of the check and follow it.

        Returns None (and marks the check deregistered) when the agent no
        longer lists it.
        """
        observed = (await self._agent.checks()).get(self.check_id)
        if observed is None:
            if self.state.is_live():
                self._move(CheckLifecycleState.DEREGISTERED)
            return None
        if self.state.is_terminal():
            self.state = CheckLifecycleState.UNREGISTERED
        if self.state is CheckLifecycleState.UNREGISTERED:
            self._move(CheckLifecycleState.REGISTERED)
        self._move(CheckLifecycleState.from_status(observed.status))
        self.status = observed.status
        self.output = observed.output
        return observed

    async def deregister(self) -> None:
        """Remove the check from the agent.

        Raises:
            ServerError: 404 if the agent does not know the check, which still
                marks the handle deregistered. Any other failure leaves the
                state unchanged, since the check may still exist.
        """
        try:
            await self._agent.deregister_check(self.check_id)
        except ServerError as exc:
            if exc.status == 404:
                self._mark_deregistered()
            raise
        self._mark_deregistered()

    def _mark_deregistered(self) -> None:
        if not self.state.is_terminal():
            self._move(CheckLifecycleState.DEREGISTERED)

    async def __aenter__(self) -> "ManagedCheck":
        await self.register()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        if self.state.is_live():
            await self.deregister()


__all__ = ["ManagedCheck"]
