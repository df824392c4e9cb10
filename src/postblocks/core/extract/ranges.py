"""Consumed source-range bookkeeping for overlap-free extraction"""

from bisect import bisect_left, bisect_right, insort


class ConsumedRanges:
    """Sorted set of disjoint half-open [start, end) character spans.

    Spans are only added after passing `overlaps`, so the stored spans never
    intersect and a lookup starts from a single bisect.
    """

    def __init__(self) -> None:
        self._spans: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self._spans)

    def __iter__(self):
        return iter(self._spans)

    def overlapping(self, start: int, end: int) -> list[tuple[int, int]]:
        """Consumed spans intersecting [start, end), in source order."""
        i = bisect_right(self._spans, (start, float('inf')))
        if i > 0 and self._spans[i - 1][1] > start:
            i -= 1
        found = []
        while i < len(self._spans) and self._spans[i][0] < end:
            found.append(self._spans[i])
            i += 1
        return found

    def overlaps(self, start: int, end: int) -> bool:
        """True if [start, end) intersects any consumed span."""
        return bool(self.overlapping(start, end))

    def claim(self, start: int, end: int) -> bool:
        """Consume [start, end) unless it overlaps an earlier claim. Returns whether it was consumed."""
        if start >= end or self.overlaps(start, end):
            return False
        insort(self._spans, (start, end))
        return True

    def release(self, start: int, end: int) -> None:
        """Give back a previously claimed span. Unknown spans are ignored."""
        i = bisect_left(self._spans, (start, end))
        if i < len(self._spans) and self._spans[i] == (start, end):
            del self._spans[i]
