from __future__ import annotations

DEFAULT_TAPE_SIZE = 30000


class Tape:
    """
    Growable byte tape.

    Starts at `size` zeroed cells and only ever grows: a move past the end
    extends it in one step by the whole jump, zero filled.
    """

    def __init__(self, size: int = DEFAULT_TAPE_SIZE):
        if size < 1:
            raise ValueError(f"Tape size must be at least 1, got {size}")
        self.cells = bytearray(size)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return self.cells[index]

    def ensure(self, index: int) -> None:
        missing = index + 1 - len(self.cells)
        if missing > 0:
            self.cells.extend(bytes(missing))
