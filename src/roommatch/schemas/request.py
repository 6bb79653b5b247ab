from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

RequestStatus = Literal["pending", "accepted", "declined"]
SendOutcome = Literal["sent", "already_sent", "already_matched"]
Direction = Literal["sent", "received"]


class RoommateRequest(BaseModel):
    """Roommate request between two profiles, keyed ``{from_uid}_{to_uid}``."""

    id: str
    from_uid: str
    to_uid: str
    from_name: str = "Someone"
    from_photo: str = ""
    status: RequestStatus = "pending"
    created_at: str

    model_config = ConfigDict(extra="forbid")

    @staticmethod
    def make_id(from_uid: str, to_uid: str) -> str:
        return f"{from_uid}_{to_uid}"

    def involves(self, uid: str) -> bool:
        return uid in (self.from_uid, self.to_uid)

    def partner_of(self, uid: str) -> str:
        return self.to_uid if self.from_uid == uid else self.from_uid
