"""Release pull request orchestration."""

from .compare import ChangedRepositories, compare_all, filter_changed
from .outcome import Failed, OperationOutcome, RunSummary, Skipped, Succeeded
from .pulls import PipelineContext, PipelineState, Step, release_title, run_pipeline, run_pipelines
from .review import request_review
from .service import run_release

__all__ = [
    "ChangedRepositories",
    "Failed",
    "OperationOutcome",
    "PipelineContext",
    "PipelineState",
    "RunSummary",
    "Skipped",
    "Step",
    "Succeeded",
    "compare_all",
    "filter_changed",
    "release_title",
    "request_review",
    "run_pipeline",
    "run_pipelines",
    "run_release",
]
