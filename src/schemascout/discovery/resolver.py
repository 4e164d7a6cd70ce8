"""Multi-instance resolution: pick one primary file per (feature, file type).

Several files can claim the same role for the same feature: an active
progress log, a backup copy, an archived one under ``_old/``. The
``MultiInstanceResolver`` selects exactly one primary through an ordered
chain of stages, records why, and says how much the choice can be trusted.

Resolution Chain
----------------
Each stage narrows the candidate set; the chain stops as soon as one
candidate remains.

1. ``explicit_primary`` -- keep files declaring ``meta.is_primary: true``.
   None declared: keep everything. Several declared: keep only those.
2. ``active_status`` -- drop files whose status is archived. If that would
   drop everything, keep the set unchanged.
3. ``latest_modified`` -- keep the most recently modified file(s).
4. ``shallowest_path`` -- keep the file(s) with the fewest path segments.
5. ``alphabetically_first`` -- the lexicographically first path.

Only stages 1 and 2 are confident: they reflect author intent or an
unambiguous lifecycle tag. Timestamps, depth and names are heuristics, and
their results are flagged for human review.

Determinism
-----------
Candidates are ordered by path before the chain runs, and every stage is a
filter over that ordering, so the outcome depends only on the set of
candidates, never on the order they were discovered in.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from schemascout.config.models import RESOLUTION_STAGES, ResolutionConfig
from schemascout.discovery.models import (
    ConflictReportRaw,
    ConflictReportUI,
    DiscoveredFile,
    ResolutionResult,
    SelectionReason,
)

logger = logging.getLogger(__name__)

REASON_TEXTS: dict[SelectionReason, str] = {
    SelectionReason.EXPLICIT_PRIMARY: "Explicitly marked as primary (meta.is_primary: true)",
    SelectionReason.ACTIVE_STATUS: "Only remaining file after excluding archived instances",
    SelectionReason.LATEST_MODIFIED: "Most recently modified instance",
    SelectionReason.SHALLOWEST_PATH: "Instance with the shallowest path",
    SelectionReason.ALPHABETICALLY_FIRST: "Alphabetically first path (last-resort tie-break)",
    SelectionReason.SINGLE_INSTANCE: "Only instance found",
    SelectionReason.NO_INSTANCES: "No instances found",
}

# Stages whose singleton outcome counts as a confident choice.
_CONFIDENT_STAGES = frozenset({SelectionReason.EXPLICIT_PRIMARY, SelectionReason.ACTIVE_STATUS})

Stage = Callable[[list[DiscoveredFile], list[str]], list[DiscoveredFile]]


def reason_text(reason: SelectionReason) -> str:
    return REASON_TEXTS[reason]


class MultiInstanceResolver:
    """Deterministic primary-file selection over same-typed candidates.

    Args:
        config: Priority chain and archived-status vocabulary. Defaults to
            the five-stage chain and ``archived/backup/deprecated/obsolete``.
    """

    def __init__(self, config: ResolutionConfig | None = None) -> None:
        self.config = config if config is not None else ResolutionConfig()
        self._archived = frozenset(s.lower() for s in self.config.archived_statuses)
        self._stages: dict[SelectionReason, Stage] = {
            SelectionReason.EXPLICIT_PRIMARY: self._explicit_primary,
            SelectionReason.ACTIVE_STATUS: self._active_status,
            SelectionReason.LATEST_MODIFIED: self._latest_modified,
            SelectionReason.SHALLOWEST_PATH: self._shallowest_path,
            SelectionReason.ALPHABETICALLY_FIRST: self._alphabetically_first,
        }
        self.priority: list[SelectionReason] = [
            SelectionReason(name) for name in self.config.priority if name in RESOLUTION_STAGES
        ]

    def is_archived(self, file: DiscoveredFile) -> bool:
        """True if the file's status is in the archived vocabulary.

        Files without a status are active.
        """
        status = file.meta.status
        return status is not None and status.lower() in self._archived

    def resolve(
        self,
        instances: Sequence[DiscoveredFile],
        file_type: str,
        feature_id: str = "",
    ) -> ResolutionResult:
        """Select the primary file among ``instances``.

        Args:
            instances: All candidates for one (feature, file type) pair.
            file_type: Logical file type, used in reports.
            feature_id: Owning feature, used in the decision log.

        Returns:
            A ``ResolutionResult``. Conflict reports are attached only when
            there is more than one candidate.
        """
        candidates = sorted(instances, key=lambda f: f.path)

        if not candidates:
            return ResolutionResult(
                primary=None, reason=SelectionReason.NO_INSTANCES, confident=True,
            )
        if len(candidates) == 1:
            return ResolutionResult(
                primary=candidates[0],
                reason=SelectionReason.SINGLE_INSTANCE,
                confident=True,
                all_instances=candidates,
            )

        label = f"{feature_id}/{file_type}" if feature_id else file_type
        decision_log = [f"Resolving {label}: {len(candidates)} instances"]
        reason: SelectionReason | None = None
        remaining = candidates

        for stage in self.priority:
            before = len(remaining)
            remaining = self._stages[stage](remaining, decision_log)
            if len(remaining) == 1:
                reason = stage
                decision_log.append(f"{stage.value}: selected {remaining[0].path}")
                break
            if len(remaining) < before:
                decision_log.append(f"{stage.value}: {len(remaining)} candidates remain")
            else:
                decision_log.append(f"{stage.value}: no distinction")

        if reason is None:
            # Chain exhausted (custom priority without the final stage).
            remaining = self._alphabetically_first(remaining, decision_log)
            reason = SelectionReason.ALPHABETICALLY_FIRST
            decision_log.append(f"fallback: selected {remaining[0].path}")

        primary = remaining[0]
        confident = reason in _CONFIDENT_STAGES
        logger.debug(
            "Resolved %s -> %s (%s, confident=%s)", label, primary.path, reason.value, confident,
        )

        return ResolutionResult(
            primary=primary,
            reason=reason,
            confident=confident,
            all_instances=candidates,
            conflict_ui=ConflictReportUI(
                file_type=file_type,
                instances=[f.path for f in candidates],
                selected_path=primary.path,
                reason_text=REASON_TEXTS[reason],
                has_explicit_primary=any(f.is_primary for f in candidates),
            ),
            conflict_raw=ConflictReportRaw(
                file_type=file_type,
                instances=list(candidates),
                reason=reason,
                decision_log=decision_log,
            ),
        )

    # -- stages --------------------------------------------------------------

    def _explicit_primary(
        self, candidates: list[DiscoveredFile], log: list[str],
    ) -> list[DiscoveredFile]:
        declared = [f for f in candidates if f.is_primary]
        if len(declared) > 1:
            log.append(f"explicit_primary: {len(declared)} files declare is_primary")
        return declared or candidates

    def _active_status(
        self, candidates: list[DiscoveredFile], log: list[str],
    ) -> list[DiscoveredFile]:
        active = [f for f in candidates if not self.is_archived(f)]
        if not active:
            log.append("active_status: all instances archived, keeping all")
            return candidates
        return active

    def _latest_modified(
        self, candidates: list[DiscoveredFile], log: list[str],
    ) -> list[DiscoveredFile]:
        latest = max(f.last_modified for f in candidates)
        return [f for f in candidates if f.last_modified == latest]

    def _shallowest_path(
        self, candidates: list[DiscoveredFile], log: list[str],
    ) -> list[DiscoveredFile]:
        shallowest = min(f.depth for f in candidates)
        return [f for f in candidates if f.depth == shallowest]

    def _alphabetically_first(
        self, candidates: list[DiscoveredFile], log: list[str],
    ) -> list[DiscoveredFile]:
        return [min(candidates, key=lambda f: f.path)]
