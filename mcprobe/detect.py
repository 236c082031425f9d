"""Edition auto-detection: race the Java and Bedrock probes against each other."""
import logging

from .combinators import TIMED_OUT, first_success, with_deadline
from .results import DetectionOutcome, Edition, Failure, failure_cause

logger = logging.getLogger(__name__)

DETECTION_FAILED = 'unable to detect the server edition, please specify the edition parameter'


async def _guarded(edition, probe, deadline=None):
    """Turn anything a probe raises or a blown deadline into a Failure."""
    try:
        outcome = await with_deadline(probe, deadline)
    except Exception as e:
        logger.warning(f"{edition.value} probe raised {e!r}")
        return Failure(f"cannot reach {edition.value} server", str(e) or type(e).__name__)
    if outcome is TIMED_OUT:
        return Failure(f"cannot reach {edition.value} server", f"{edition.value} probe timed out after {deadline}s")
    return outcome


async def auto_detect(java_probe, bedrock_probe, bedrock_deadline=None, race_window=None) -> DetectionOutcome:
    """Return the first edition to answer, preferring Java when both are judged together.

    ``java_probe`` and ``bedrock_probe`` are awaitables yielding a ProbeOutcome.
    """
    race = await first_success({
        Edition.JAVA: _guarded(Edition.JAVA, java_probe),
        Edition.BEDROCK: _guarded(Edition.BEDROCK, bedrock_probe, bedrock_deadline),
    }, window=race_window)

    if race.winner is not None:
        logger.info(f"🔎 Detected {race.winner.value} server at {race.outcome.result.server_address}")
        return DetectionOutcome(race.outcome, detected=True, edition=race.winner)

    java_error = failure_cause(race.settled.get(Edition.JAVA))
    bedrock_error = failure_cause(race.settled.get(Edition.BEDROCK))
    logger.info(f"Auto-detection failed (java: {java_error}; bedrock: {bedrock_error})")
    return DetectionOutcome(
        Failure(DETECTION_FAILED, 'auto-detection failed'),
        java_error=java_error,
        bedrock_error=bedrock_error,
    )
