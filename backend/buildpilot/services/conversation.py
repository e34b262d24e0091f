# buildpilot/services/conversation.py
from __future__ import annotations

from typing import List, Optional, Set, Tuple

from buildpilot.core.ids import new_id, utcnow_iso
from buildpilot.models.editor import Message

class ConversationLog:
    def __init__(self) -> None:
        self._turns: List[Message] = []
        self._ids: Set[str] = set()

    def append(
        self,
        role: str,
        content: str,
        turn_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> Message:
        turn_id = turn_id or new_id()
        if turn_id in self._ids:
            raise ValueError(f"duplicate turn id: {turn_id}")
        turn = Message(id=turn_id, role=role, content=content, timestamp=timestamp or utcnow_iso())
        self._turns.append(turn)
        self._ids.add(turn_id)
        return turn

    def all(self) -> Tuple[Message, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)
