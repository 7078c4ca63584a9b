"""Volume classification against the calibrated noise floor."""

from ..models.session import SessionState, Verdict, VolumeStatus


def classify(current_db: float,
             noise_floor_db: float,
             target_offset_db: float,
             scream_threshold_db: float) -> Verdict:
    """Classify one loudness sample.

    Loud wins over good. The target bound is inclusive, the scream
    bound is exclusive.
    """
    if current_db > scream_threshold_db:
        return Verdict.TOO_LOUD
    if current_db >= noise_floor_db + target_offset_db:
        return Verdict.GOOD
    return Verdict.TOO_QUIET


_STATUS_BY_VERDICT = {
    Verdict.TOO_QUIET: VolumeStatus.QUIET,
    Verdict.GOOD: VolumeStatus.GOOD,
    Verdict.TOO_LOUD: VolumeStatus.LOUD,
}


def volume_status(state: SessionState,
                  level_db: float,
                  noise_floor_db: float,
                  target_offset_db: float,
                  scream_threshold_db: float) -> VolumeStatus:
    """Meter status for the given engine state and displayed level."""
    if state == SessionState.CALIBRATING:
        return VolumeStatus.CALIBRATING
    if state != SessionState.READING:
        return VolumeStatus.IDLE
    verdict = classify(level_db, noise_floor_db, target_offset_db, scream_threshold_db)
    return _STATUS_BY_VERDICT[verdict]
