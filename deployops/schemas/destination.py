"""Where an uploaded log document is delivered."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Destination(BaseModel):
    """A Telegram chat and, for forum groups, the topic inside it."""

    model_config = ConfigDict(frozen=True)

    chat_id: int
    topic_id: Optional[int] = None

    def send_kwargs(self) -> dict[str, int]:
        """Bot API routing kwargs; the thread id only when there is one."""
        kwargs = {"chat_id": self.chat_id}
        if self.topic_id is not None:
            kwargs["message_thread_id"] = self.topic_id
        return kwargs
