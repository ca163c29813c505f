"""
WorkforcePilot Composite Score

The Operational Friction Score (OFS) is a weighted sum of the four
component scores. It is the only weight-dependent value in an
evaluation, so changing weights never requires re-running the engine:

    ofs = recompute_composite(evaluation.component_scores, new_weights)

Also owns the weight renormalization contract used by interactive
weight sliders: after changing one weight the other three are rescaled
so the set stays valid.
"""
from __future__ import annotations

import logging
import math
from typing import Mapping, Union

from ..exceptions import InvalidWeightsError
from ..models import MAX_WEIGHT, MIN_WEIGHT, OFSComponentScores, OFSWeights

logger = logging.getLogger(__name__)


SCORE_FLOOR = 0
SCORE_CEILING = 100

# Residual rounding error below this is left alone
_RESIDUAL_EPSILON = 0.001


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties upward.

    Engine values are non-negative, so this matches rounding ties away
    from zero and is stable at .5 boundaries (unlike banker's rounding
    in ``round``).
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up and clamp into [0, 100]."""
    return max(SCORE_FLOOR, min(round_half_up(value), SCORE_CEILING))


def weighted_contributions(
    components: OFSComponentScores,
    weights: OFSWeights,
) -> tuple[float, float, float, float]:
    """
    Per-component contributions to the composite, in fixed order:
    exposure, governance, execution (speed), confidence.
    """
    return (
        components.exposure_score * weights.exposure,
        components.governance_load * weights.governance,
        components.execution_cluster_risk * weights.speed,
        components.confidence_penalty * weights.confidence,
    )


def recompute_composite(components: OFSComponentScores, weights: OFSWeights) -> int:
    """
    Compute the OFS from stored component scores.

    Pure: reads nothing but its arguments. Result is always in [0, 100].
    """
    return clamp_score(sum(weighted_contributions(components, weights)))


# =============================================================================
# Weight Normalization
# =============================================================================

WeightsInput = Union[OFSWeights, Mapping[str, float]]


def _as_dict(weights: WeightsInput) -> dict[str, float]:
    if isinstance(weights, OFSWeights):
        return weights.to_dict()
    return OFSWeights.from_dict(dict(weights)).to_dict()


def normalize_weights(
    weights: WeightsInput,
    changed_key: str,
    raw_value: float,
) -> OFSWeights:
    """
    Set one weight and rescale the others so the total stays 1.0.

    The changed weight is clamped to [MIN_WEIGHT, MAX_WEIGHT]. The other
    three are scaled proportionally to fill the remainder, each rounded
    to two decimals; any residual rounding error is folded into the last
    of the other weights. When the others sum to zero the remainder is
    split equally. A rescaled weight never leaves the valid range: it is
    pinned at the bound and the others absorb the difference.

    Raises:
        InvalidWeightsError: If ``changed_key`` is not a weight name
    """
    if changed_key not in OFSWeights.KEYS:
        raise InvalidWeightsError(
            message=f"Unknown weight key: '{changed_key}'",
            details={"allowed": list(OFSWeights.KEYS), "key": changed_key},
        )

    current = _as_dict(weights)
    clamped = max(MIN_WEIGHT, min(MAX_WEIGHT, float(raw_value)))
    remaining = 1.0 - clamped

    other_keys = [k for k in OFSWeights.KEYS if k != changed_key]
    shares = _rescale(current, other_keys, remaining)

    updated = dict(current)
    updated[changed_key] = clamped
    for key in other_keys:
        updated[key] = round(shares[key], 2)

    residual = round(1.0 - sum(updated.values()), 2)
    if abs(residual) > _RESIDUAL_EPSILON:
        # Last other weight absorbs the residual unless that leaves the range
        for key in reversed(other_keys):
            adjusted = round(updated[key] + residual, 2)
            if MIN_WEIGHT <= adjusted <= MAX_WEIGHT:
                updated[key] = adjusted
                break
        else:
            # Rescaled shares stay inside the bounds, so some weight can always
            # absorb a two-decimal residual
            logger.debug(
                "Rounding residual %.2f left unassigned; every weight is at a bound",
                residual,
            )

    return OFSWeights(**updated)


def _rescale(
    current: dict[str, float],
    keys: list[str],
    budget: float,
) -> dict[str, float]:
    """
    Distribute ``budget`` over ``keys`` proportionally to their current values.

    Weights that would fall outside [MIN_WEIGHT, MAX_WEIGHT] are pinned to
    the bound and the rest is redistributed over the remaining keys. An
    all-zero group is split equally.
    """
    shares: dict[str, float] = {}
    free = list(keys)
    while free:
        total = sum(current[k] for k in free)
        if total <= 0:
            proposed = {k: budget / len(free) for k in free}
        else:
            proposed = {k: current[k] * budget / total for k in free}

        low = [k for k in free if proposed[k] < MIN_WEIGHT]
        high = [k for k in free if proposed[k] > MAX_WEIGHT]
        pinned, bound = (low, MIN_WEIGHT) if low else (high, MAX_WEIGHT)
        if not pinned:
            shares.update(proposed)
            break
        for key in pinned:
            shares[key] = bound
            budget -= bound
            free.remove(key)
    return shares
