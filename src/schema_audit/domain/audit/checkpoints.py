# audit/checkpoints.py

import logging
from collections.abc import Callable, Iterable

from .models import CheckpointExample, CheckpointResult, CheckpointStatus

logger = logging.getLogger(__name__)


def derive_status(count: int, warning_limit: int) -> CheckpointStatus:
    """
    Grade a checkpoint from the number of offending items.

    Args:
        count: Offending items found.
        warning_limit: Largest count still graded as a warning.

    Returns:
        CheckpointStatus: ``good`` for none, ``warning`` up to the limit,
            ``issue`` beyond it.
    """
    if count <= 0:
        return CheckpointStatus.GOOD
    if count <= warning_limit:
        return CheckpointStatus.WARNING
    return CheckpointStatus.ISSUE


def assemble_checkpoint(
    title: str,
    status: CheckpointStatus,
    *,
    findings: Iterable[str],
    examples: Iterable[CheckpointExample] = (),
    action_items: Iterable[str] = (),
) -> CheckpointResult:
    """
    Wrap a topic's findings into a checkpoint result.

    Args:
        title: Checkpoint title.
        status: Grade derived from the same items as the findings.
        findings: Human-readable finding lines.
        examples: Concrete examples backing the findings.
        action_items: Suggested remediation steps.

    Returns:
        CheckpointResult: Immutable checkpoint result.
    """
    return CheckpointResult(
        status=status,
        title=title,
        findings=tuple(findings),
        examples=tuple(examples),
        action_items=tuple(action_items),
    )


def run_checkpoint(
    title: str,
    analyser: Callable[..., CheckpointResult],
    *args: object,
) -> CheckpointResult:
    """
    Run one analyser so that a failure degrades only its own topic.

    Args:
        title: Checkpoint title, used for the fallback result.
        analyser: Callable producing the checkpoint result.
        *args: Arguments passed to ``analyser``.

    Returns:
        CheckpointResult: The analyser's result, or a ``good`` placeholder
            stating the topic could not be evaluated.
    """
    try:
        return analyser(*args)
    except Exception:
        logger.error("Checkpoint %r failed", title, exc_info=True)
        return assemble_checkpoint(
            title,
            CheckpointStatus.GOOD,
            findings=(f"{title} could not be evaluated.",),
        )
