"""Circular history of the most recent curves."""

from primitives.curve import Curve, blank_curve


class CurveRing:
    """Fixed-capacity circular buffer of curves.

    Usage:
        ring = CurveRing(capacity=30)
        i = ring.push(curve)     # slot the curve landed in
        ring[i]                  # newest curve
        ring[i - 1]              # the one before it (indices wrap)
        ring.window(i, 3)        # [ring[i - 2], ring[i - 1], ring[i]]

    Every slot starts out blank. Once `capacity` curves have been pushed the
    oldest slot is overwritten.
    """

    def __init__(self, capacity: int):
        if capacity < 2:
            raise ValueError(f"ring capacity must be >= 2, got {capacity}")
        self.capacity = capacity
        self.slots = [blank_curve() for _ in range(capacity)]
        self.write_idx = 0
        self.pushed = 0

    def wrap(self, index: int) -> int:
        """Slot for any index; negative offsets count back from the end."""
        return index % self.capacity

    def push(self, curve: Curve) -> int:
        """Store a curve in the next slot and return that slot."""
        idx = self.write_idx
        self.slots[idx] = curve
        self.write_idx = (idx + 1) % self.capacity
        self.pushed += 1
        return idx

    def __getitem__(self, index: int) -> Curve:
        return self.slots[index % self.capacity]

    def __len__(self):
        return self.capacity

    @property
    def newest(self) -> int:
        """Slot of the most recently pushed curve."""
        return (self.write_idx - 1) % self.capacity

    def window(self, index: int, count: int) -> tuple:
        """The `count` curves ending at `index`, oldest first."""
        if count > self.capacity:
            raise ValueError(f"window of {count} curves exceeds ring capacity {self.capacity}")
        return tuple(self[index - count + 1 + k] for k in range(count))

    def reset(self):
        """Blank every slot."""
        self.slots = [blank_curve() for _ in range(self.capacity)]
        self.write_idx = 0
        self.pushed = 0
