from typing import Iterator, List

TOMBSTONE = -1


class SelectionSet:
    """
    Multi-select overlay keyed by candidate id.

    Slots keep selection order. Deselecting leaves a tombstone, and the
    first tombstone is reused by the next selection. Independent of the
    current match list, so selections survive requerying.
    """

    def __init__(self):
        self.slots: List[int] = []

    def toggle(self, id: int) -> bool:
        """Select or deselect ``id``. Returns True if it is now selected."""
        if id < 0:
            raise ValueError(f"Candidate id must not be negative: {id}")
        for i, slot in enumerate(self.slots):
            if slot == id:
                self.slots[i] = TOMBSTONE
                return False
        for i, slot in enumerate(self.slots):
            if slot == TOMBSTONE:
                self.slots[i] = id
                return True
        self.slots.append(id)
        return True

    def is_selected(self, id: int) -> bool:
        return id != TOMBSTONE and id in self.slots

    def selected(self) -> List[int]:
        """Selected ids in slot order."""
        return [s for s in self.slots if s != TOMBSTONE]

    def clear(self) -> None:
        self.slots = []

    def __iter__(self) -> Iterator[int]:
        return iter(self.selected())

    def __len__(self) -> int:
        return len(self.selected())
