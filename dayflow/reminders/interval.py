import logging
import math

from dayflow.reminders.types import FocusState, ReminderSettings, ReminderState

logger = logging.getLogger(__name__)

DEFAULT_FIXED_INTERVAL_MINUTES = 30

# Context switches per hour above which the user counts as scattered
SCATTERED_SWITCH_THRESHOLD = 10


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def smart_interval_minutes(
    focus_state: FocusState,
    is_idle: bool,
    context_switch_count: int,
    min_interval: int,
    max_interval: int,
) -> int:
    """Adaptive cadence. First matching rule wins."""
    if focus_state == FocusState.DEEP:
        # Stretch the gap so deep work is interrupted less
        interval = max_interval * 0.85
        rule = "deep"
    elif is_idle:
        interval = min_interval * 1.2
        rule = "idle"
    elif context_switch_count > SCATTERED_SWITCH_THRESHOLD:
        interval = min(max_interval, min_interval * 1.5)
        rule = "scattered"
    else:
        interval = (min_interval + max_interval) / 2
        rule = "shallow"

    minutes = max(min_interval, min(max_interval, _round_half_up(interval)))
    logger.debug("Smart interval rule=%s -> %d min", rule, minutes)
    return minutes


def compute_interval_minutes(settings: ReminderSettings, state: ReminderState) -> int:
    if not settings.smart_reminders_enabled:
        return max(1, settings.fixed_interval_minutes or DEFAULT_FIXED_INTERVAL_MINUTES)

    min_interval, max_interval = settings.interval_bounds()
    if (min_interval, max_interval) != (settings.min_interval_minutes, settings.max_interval_minutes):
        logger.warning(
            "Repaired reminder interval range %s-%s to %s-%s",
            settings.min_interval_minutes, settings.max_interval_minutes,
            min_interval, max_interval,
        )

    return smart_interval_minutes(
        focus_state=state.focus_state,
        is_idle=state.is_idle,
        context_switch_count=state.context_switch_count_last_hour,
        min_interval=min_interval,
        max_interval=max_interval,
    )
