"""Open a release pull request in each changed repository.

Each repository runs through a small state machine:

    query --(open PR found)--> exists
    query --(none open)------> create --(created)--> review --> created
    query/create --(call failed)--> failed

Every repository's machine runs as its own task; all tasks are launched
together and joined once. Failures are reported where they happen and end
only that repository's machine.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum

from relpr.core.config import RunConfig
from relpr.core.model import RepositoryRef
from relpr.core.result import Err
from relpr.github.client import GitHubClient
from relpr.github.errors import describe_failure
from relpr.output.console import ConsoleProtocol, Style

from .outcome import Failed, OperationOutcome, Skipped, Succeeded
from .review import request_review

__all__ = [
    "PipelineContext",
    "PipelineState",
    "Step",
    "outcome_of",
    "release_title",
    "run_pipeline",
    "run_pipelines",
]


class Step(StrEnum):
    QUERY = "query"
    CREATE = "create"
    REVIEW = "review"
    # Terminal
    EXISTS = "exists"
    CREATED = "created"
    PLANNED = "planned"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({Step.EXISTS, Step.CREATED, Step.PLANNED, Step.FAILED})


@dataclass(frozen=True, slots=True)
class PipelineState:
    repo: RepositoryRef
    step: Step = Step.QUERY
    pr_number: int | None = None
    reviewed: bool = False
    message: str | None = None


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """Read-only inputs shared by every repository's pipeline."""

    client: GitHubClient
    config: RunConfig
    console: ConsoleProtocol
    dry_run: bool = False


StepHandler = Callable[[PipelineContext, PipelineState], Awaitable[PipelineState]]


def _today() -> date:
    return datetime.now().date()


def release_title(base: str, day: date) -> str:
    return f"Release to {base} {day.strftime('%Y-%m-%d')}"


def _fail(ctx: PipelineContext, state: PipelineState, message: str) -> PipelineState:
    ctx.console.error(message)
    return replace(state, step=Step.FAILED, message=message)


async def _query(ctx: PipelineContext, state: PipelineState) -> PipelineState:
    repo = state.repo
    result = await ctx.client.list_open_pull_requests(
        repo.owner, repo.name, ctx.config.head, ctx.config.base
    )
    if isinstance(result, Err):
        return _fail(
            ctx,
            state,
            describe_failure(f"Failed to fetch {repo.name}'s pull requests.", result.error),
        )

    if result.value:
        ctx.console.info(f"{repo.name} already has an opened pull request")
        return replace(state, step=Step.EXISTS, pr_number=result.value[0].number)

    return replace(state, step=Step.CREATE)


async def _create(ctx: PipelineContext, state: PipelineState) -> PipelineState:
    repo = state.repo
    base, head = ctx.config.base, ctx.config.head
    # Dated here rather than once per run.
    title = release_title(base, _today())

    if ctx.dry_run:
        ctx.console.print(f"would create pull request in {repo.name}: {title}", Style.DIM)
        return replace(state, step=Step.PLANNED)

    ctx.console.info(f"Creating pull request for {repo.name}...")
    result = await ctx.client.create_pull_request(repo.owner, repo.name, title, head, base)
    if isinstance(result, Err):
        return _fail(
            ctx,
            state,
            describe_failure(f"Failed creating a pull request in {repo.name}", result.error),
        )

    pr = result.value
    if pr.html_url:
        ctx.console.print(f"{repo.name}: {pr.html_url}", Style.DIM)
    return replace(state, step=Step.REVIEW, pr_number=pr.number)


async def _review(ctx: PipelineContext, state: PipelineState) -> PipelineState:
    assert state.pr_number is not None
    reviewed = await request_review(
        ctx.client, ctx.config, ctx.console, state.repo, state.pr_number
    )
    return replace(state, step=Step.CREATED, reviewed=reviewed)


DEFAULT_HANDLERS: Mapping[Step, StepHandler] = {
    Step.QUERY: _query,
    Step.CREATE: _create,
    Step.REVIEW: _review,
}


async def run_pipeline(
    ctx: PipelineContext,
    repo: RepositoryRef,
    *,
    handlers: Mapping[Step, StepHandler] = DEFAULT_HANDLERS,
) -> PipelineState:
    """Drive one repository from ``query`` to a terminal step."""
    state = PipelineState(repo=repo)

    while not state.step.is_terminal:
        handler = handlers.get(state.step)
        if handler is None:
            raise ValueError(f"no handler for pipeline step: {state.step}")
        state = await handler(ctx, state)

    return state


def outcome_of(state: PipelineState) -> OperationOutcome:
    name = state.repo.name
    match state.step:
        case Step.EXISTS:
            return Skipped(repo=name, reason="already has an opened pull request")
        case Step.PLANNED:
            return Skipped(repo=name, reason="dry run")
        case Step.CREATED:
            assert state.pr_number is not None
            return Succeeded(repo=name, pr_number=state.pr_number, reviewed=state.reviewed)
        case Step.FAILED:
            return Failed(repo=name, message=state.message or "failed")
        case _:
            raise ValueError(f"pipeline for {name} stopped at non-terminal step {state.step}")


async def run_pipelines(
    ctx: PipelineContext,
    repositories: Sequence[RepositoryRef],
) -> list[OperationOutcome]:
    """Run every repository's pipeline concurrently and wait for all of them.

    An exception raised inside one pipeline (a ``ContractViolation``) is only
    re-raised once every other pipeline has reached its terminal step, so a
    created pull request is never left without its review request.
    """
    pending = {repo.name: run_pipeline(ctx, repo) for repo in repositories}
    finals = await asyncio.gather(*pending.values(), return_exceptions=True)

    states: dict[str, PipelineState] = {}
    for name, final in zip(pending.keys(), finals, strict=True):
        if isinstance(final, BaseException):
            raise final
        states[name] = final
    return [outcome_of(states[repo.name]) for repo in repositories]
