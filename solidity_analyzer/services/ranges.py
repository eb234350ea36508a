"""Склейка номеров строк в непрерывные диапазоны."""

from typing import Iterable

from solidity_analyzer.services.models import LineRange


def coalesce_lines(lines: Iterable[int]) -> list[LineRange]:
    """
    Склеить номера строк в минимальный список диапазонов.

    Соседние номера (разница ровно 1) попадают в один диапазон,
    любой разрыв начинает новый. Дубликаты и неположительные номера
    отбрасываются.

    Returns:
        Список LineRange по возрастанию, без пересечений и смежных пар
    """
    return coalesce_spans((n, n) for n in lines)


def coalesce_spans(spans: Iterable[tuple[int, int]]) -> list[LineRange]:
    """
    Склеить пары `(start, end)` в минимальный список диапазонов.

    Перевёрнутые границы меняются местами, часть диапазона ниже первой
    строки обрезается. Пересекающиеся и смежные пары сливаются без
    разворачивания в отдельные номера строк.
    """
    cleaned = []
    for start, end in spans:
        if end < start:
            start, end = end, start
        if end < 1:
            continue
        cleaned.append((max(start, 1), end))

    ranges: list[LineRange] = []
    current_start = current_end = None

    for start, end in sorted(cleaned):
        if current_start is None:
            current_start, current_end = start, end
        elif start <= current_end + 1:
            current_end = max(current_end, end)
        else:
            ranges.append(LineRange(current_start, current_end))
            current_start, current_end = start, end

    if current_start is not None:
        ranges.append(LineRange(current_start, current_end))

    return ranges


def format_ranges(ranges: Iterable[LineRange]) -> str:
    """Формат для отчёта: `1-3, 7-8, 10`."""
    return ", ".join(
        str(r.start) if r.start == r.end else f"{r.start}-{r.end}" for r in ranges
    )
