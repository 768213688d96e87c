"""Decode loosely-typed session form input into a validated SessionConfig.

Validation is a parse-and-coerce boundary: it never raises on bad input and
always reports every violated constraint at once. Field-level rules live on
the ``SessionForm`` schema; the geometric rules that span several fields
(window ordering and capacity) are checked here against ``ScheduleWindow`` and
``ScheduleFields`` so they are still evaluated when unrelated fields are
invalid.
"""

import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from shootbook.scheduling.timeutil import required_minutes, window_minutes
from shootbook.scheduling.types import FieldError, SessionConfig, ValidationResult
from shootbook.schemas.session import ScheduleFields, ScheduleWindow, SessionForm

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MISSING_SELECTION_MESSAGE = "Please select at least one date for this session."
INVALID_SELECTION_MESSAGE = "Selected dates must be a list of YYYY-MM-DD dates."
END_BEFORE_START_MESSAGE = "End time must be after start time."
NOT_ENOUGH_TIME_MESSAGE = "Not enough time for all spots with specified duration and gaps."

ModelT = TypeVar("ModelT", bound=BaseModel)


def _clean(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Drop blank and null values so schema defaults apply to absent fields."""
    cleaned: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[key] = value
    return cleaned


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__root__"
        errors.append(FieldError(field=field, message=err["msg"]))
    return errors


def check_window(window: ScheduleWindow) -> list[FieldError]:
    """Ordering of a day's window, reported on ``end_time``."""
    if window_minutes(window.start_time, window.end_time) <= 0:
        return [FieldError(field="end_time", message=END_BEFORE_START_MESSAGE)]
    return []


def check_schedule(schedule: ScheduleFields) -> list[FieldError]:
    """Cross-field feasibility of a day's window.

    Ordering failures are reported on ``end_time``; capacity failures on
    ``number_of_spots``, the field a photographer usually has to reduce.
    Capacity is only checked for an ordered window.
    """
    errors = check_window(schedule)
    if errors:
        return errors

    needed = required_minutes(
        schedule.duration_minutes,
        schedule.number_of_spots,
        schedule.gap_between_slots,
        schedule.same_start_time,
    )
    if window_minutes(schedule.start_time, schedule.end_time) < needed:
        return [FieldError(field="number_of_spots", message=NOT_ENOUGH_TIME_MESSAGE)]
    return []


def _validated_or_none(model: type[ModelT], data: Mapping[str, Any]) -> ModelT | None:
    try:
        return model.model_validate(data)
    except ValidationError:
        # Already reported through SessionForm
        return None


def validate_session_fields(
    raw: Mapping[str, Any],
) -> tuple[SessionForm | None, list[FieldError]]:
    """Schema-level validation: per-field rules plus the cross-field schedule rules.

    The window ordering check needs only the two times, so it still runs when
    duration, spots or gap are invalid; capacity needs all of them.
    """
    data = _clean(raw)
    form: SessionForm | None = None
    errors: list[FieldError] = []

    try:
        form = SessionForm.model_validate(data)
    except ValidationError as e:
        errors.extend(_field_errors(e))

    schedule = _validated_or_none(ScheduleFields, data)
    if schedule is not None:
        errors.extend(check_schedule(schedule))
    else:
        window = _validated_or_none(ScheduleWindow, data)
        if window is not None:
            errors.extend(check_window(window))

    if errors:
        return None, errors
    return form, errors


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and DATE_PATTERN.match(value.strip()):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD.")


def parse_selected_dates(
    values: Iterable[Any] | None,
) -> tuple[tuple[date, ...], list[FieldError], str | None]:
    """Parse the date-picker selection.

    Returns the de-duplicated ascending dates, format errors reported on
    ``selected_dates``, and a separate missing-selection message when nothing
    was chosen.
    """
    if isinstance(values, (str, date)):
        values = [values]
    if values is not None and not isinstance(values, (list, tuple, set, frozenset)):
        return (), [FieldError(field="selected_dates", message=INVALID_SELECTION_MESSAGE)], None
    items = [v for v in (values or []) if not (isinstance(v, str) and not v.strip())]
    if not items:
        return (), [], MISSING_SELECTION_MESSAGE

    parsed: set[date] = set()
    errors: list[FieldError] = []
    for value in items:
        try:
            parsed.add(_parse_date(value))
        except ValueError as e:
            errors.append(FieldError(field="selected_dates", message=str(e)))
    return tuple(sorted(parsed)), errors, None


def validate_session_form(raw: Mapping[str, Any]) -> ValidationResult:
    """Validate a full new-session submission.

    Args:
        raw: Form values as submitted, strings or JSON scalars. The date
            selection is read from ``selected_dates``.

    Returns:
        ValidationResult carrying either the SessionConfig or every problem
        found (field errors and the missing-selection error together).
    """
    fields = {k: v for k, v in raw.items() if k != "selected_dates"}
    form, field_errors = validate_session_fields(fields)
    dates, date_errors, selection_error = parse_selected_dates(raw.get("selected_dates"))
    field_errors.extend(date_errors)

    if form is None or field_errors or selection_error:
        return ValidationResult(field_errors=field_errors, selection_error=selection_error)

    config = SessionConfig(**form.model_dump(), selected_dates=dates)
    return ValidationResult(config=config)
