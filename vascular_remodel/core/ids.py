"""
ID generation for graph edges.
"""


class IDGenerator:
    """
    Sequential edge id generator.

    Ids are never reused within a graph, so edge ids stay stable across
    removals and can be stored in adjacency lists.
    """

    def __init__(self, start_id: int = 0):
        self.current_id = start_id

    def next_id(self) -> int:
        """Get next ID."""
        id_val = self.current_id
        self.current_id += 1
        return id_val

    def peek_next_id(self) -> int:
        """Peek at next ID without consuming it."""
        return self.current_id

    def reserve(self, used_id: int) -> None:
        """Make sure an externally assigned id is never handed out."""
        if used_id >= self.current_id:
            self.current_id = used_id + 1

    def get_state(self) -> dict:
        """Get current state for serialization."""
        return {"current_id": self.current_id}

    def set_state(self, state: dict) -> None:
        """Restore state from serialization."""
        self.current_id = state["current_id"]
