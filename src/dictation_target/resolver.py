"""Pick the single best input field and submit control from scored candidates."""

from __future__ import annotations

import logging
from typing import List, Optional

from .button_scoring import score_button
from .collector import collect_buttons, collect_buttons_near, collect_inputs, unique_by_handle
from .disabled import is_disabled
from .dom import DocumentLike, ElementLike
from .guards import fail_closed
from .input_scoring import score_input
from .models import DEFAULT_WEIGHTS, ButtonResolution, Candidate, ScoreWeights

logger = logging.getLogger(__name__)


def _ranked(candidates: List[Candidate]) -> List[Candidate]:
    # sorted() is stable with reverse=True, so ties keep collection order.
    return sorted(candidates, key=lambda entry: entry.score, reverse=True)


@fail_closed(factory=list)
def rank_inputs(document: DocumentLike, weights: ScoreWeights = DEFAULT_WEIGHTS) -> List[Candidate]:
    viewport = document.viewport
    return _ranked(
        [Candidate(element=element, score=score_input(element, viewport, weights)) for element in collect_inputs(document)]
    )


@fail_closed(factory=list)
def rank_buttons(
    document: DocumentLike,
    input_element: Optional[ElementLike],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> List[Candidate]:
    """Score the near-input ∪ page-wide button set relative to ``input_element``."""
    if input_element is None:
        return []
    pool = unique_by_handle(collect_buttons_near(input_element), collect_buttons(document))
    return _ranked([Candidate(element=button, score=score_button(button, input_element, weights)) for button in pool])


@fail_closed(None)
def resolve_best_input(document: DocumentLike, weights: ScoreWeights = DEFAULT_WEIGHTS) -> Optional[ElementLike]:
    """Return the most likely composition field, or None when the page has no candidate."""
    ranking = rank_inputs(document, weights)
    if not ranking:
        logger.debug("No input candidates found")
        return None
    best = ranking[0]
    logger.debug("Best input score=%s tag=%s of %s candidates", best.score, best.element.tag, len(ranking))
    return best.element


@fail_closed(factory=ButtonResolution)
def resolve_button_candidates(
    document: DocumentLike,
    input_element: Optional[ElementLike],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> ButtonResolution:
    """Resolve the submit control, falling back exactly one rank when the top choice is disabled."""
    ranking = rank_buttons(document, input_element, weights)
    if not ranking:
        logger.debug("No button candidates found")
        return ButtonResolution()

    top = ranking[0]
    if not is_disabled(top.element):
        logger.debug("Best button score=%s tag=%s", top.score, top.element.tag)
        return ButtonResolution(button=top.element, top=top, candidates=ranking)

    runner_up = ranking[1] if len(ranking) > 1 else None
    if runner_up is not None and not is_disabled(runner_up.element):
        logger.debug(
            "Top button disabled (score=%s); using runner-up score=%s tag=%s",
            top.score,
            runner_up.score,
            runner_up.element.tag,
        )
        return ButtonResolution(button=runner_up.element, top=top, top_disabled=True, candidates=ranking)

    logger.debug("Top button disabled (score=%s) and no enabled runner-up", top.score)
    return ButtonResolution(top=top, top_disabled=True, candidates=ranking)


@fail_closed(None)
def resolve_best_button(
    document: DocumentLike,
    input_element: Optional[ElementLike],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> Optional[ElementLike]:
    return resolve_button_candidates(document, input_element, weights).button


__all__ = [
    "rank_buttons",
    "rank_inputs",
    "resolve_best_button",
    "resolve_best_input",
    "resolve_button_candidates",
]
