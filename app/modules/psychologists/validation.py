"""
Checks the time windows of submitted day-agendas before anything is stored.

Each day is a fold over its windows in submission order: a window is accepted
only if both ends are filled in, it ends after it starts, and it starts after
every window already accepted for that day has ended. The first offending
window stops the whole submission.

Times are compared as the strings they were sent as, so "9:00" sorts after
"10:00"; clients are expected to send zero-padded "HH:MM" values.
"""
from functools import reduce
from typing import Iterable, Protocol, Sequence

class TimeWindow(Protocol):
    start_time: str
    end_time: str

class DayAgenda(Protocol):
    available_times: Sequence[TimeWindow]

class AgendaValidationError(ValueError):
    def __init__(self, message: str, *, day_index: int, window_index: int):
        super().__init__(f"agendas[{day_index}].available_times[{window_index}]: {message}")
        self.day_index = day_index
        self.window_index = window_index

def _accept(day_index: int):
    def step(validated: tuple, indexed: tuple[int, TimeWindow]) -> tuple:
        window_index, window = indexed
        start, end = window.start_time or "", window.end_time or ""
        if not start.strip() or not end.strip():
            raise AgendaValidationError("start_time and end_time must not be empty", day_index=day_index, window_index=window_index)
        if end <= start:
            raise AgendaValidationError(
                f"end_time {end} must be later than start_time {start}", day_index=day_index, window_index=window_index
            )
        for prev in validated:
            if prev.end_time >= start:
                raise AgendaValidationError(
                    f"window {start}-{end} overlaps {prev.start_time}-{prev.end_time}; "
                    "start_time must be later than the end_time of the previous windows",
                    day_index=day_index, window_index=window_index,
                )
        return validated + (window,)
    return step

def validate_day(windows: Iterable[TimeWindow], day_index: int = 0) -> tuple:
    """Return the windows of one day once all of them are accepted."""
    return reduce(_accept(day_index), enumerate(windows), ())

def validate_agendas(agendas: Sequence[DayAgenda]) -> list[tuple]:
    return [validate_day(day.available_times, i) for i, day in enumerate(agendas)]
