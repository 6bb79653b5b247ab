"""In-memory roommate request ledger."""

from __future__ import annotations

from typing import Callable, get_args

import pendulum
import structlog

from ..schemas import Profile, RoommateRequest
from ..schemas.request import Direction, RequestStatus, SendOutcome

_RESPONSE_STATUSES: frozenset[str] = frozenset(get_args(RequestStatus)) - {"pending"}


class RequestNotFoundError(KeyError):
    """Raised when responding to a request id that was never sent."""


class RequestBook:
    """Track roommate requests between profiles.

    At most one request exists per ordered pair; relationship lookups consider
    both directions, so a reply from the other side does not open a second
    request once the first is pending or accepted.
    """

    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._requests: dict[str, RoommateRequest] = {}
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def __len__(self) -> int:
        return len(self._requests)

    def send(self, sender: Profile, to_uid: str) -> SendOutcome:
        existing = self.between(sender.id, to_uid)
        if existing is not None and existing.status == "accepted":
            return "already_matched"
        if existing is not None and existing.status == "pending":
            return "already_sent"

        request = RoommateRequest(
            id=RoommateRequest.make_id(sender.id, to_uid),
            from_uid=sender.id,
            to_uid=to_uid,
            from_name=sender.first_name or "Someone",
            from_photo=sender.photo_url or "",
            status="pending",
            created_at=self._now_provider().to_iso8601_string(),
        )
        self._requests[request.id] = request
        self._logger.info("request.sent", request_id=request.id)
        return "sent"

    def respond(self, request_id: str, status: str) -> RoommateRequest:
        if status not in _RESPONSE_STATUSES:
            raise ValueError(f"Unsupported response status: {status!r}")
        try:
            current = self._requests[request_id]
        except KeyError as exc:
            raise RequestNotFoundError(request_id) from exc
        updated = current.model_copy(update={"status": status})
        self._requests[request_id] = updated
        self._logger.info("request.responded", request_id=request_id, status=status)
        return updated

    def get(self, request_id: str) -> RoommateRequest | None:
        return self._requests.get(request_id)

    def between(self, uid1: str, uid2: str) -> RoommateRequest | None:
        forward = self._requests.get(RoommateRequest.make_id(uid1, uid2))
        if forward is not None:
            return forward
        return self._requests.get(RoommateRequest.make_id(uid2, uid1))

    def accepted_partners(self, uid: str) -> list[str]:
        partners: dict[str, None] = {}
        for request in self._requests.values():
            if request.status == "accepted" and request.involves(uid):
                partners[request.partner_of(uid)] = None
        return list(partners)

    def pending_for(self, uid: str) -> list[tuple[RoommateRequest, Direction]]:
        results: list[tuple[RoommateRequest, Direction]] = []
        for request in self._requests.values():
            if request.status != "pending":
                continue
            if request.from_uid == uid:
                results.append((request, "sent"))
            elif request.to_uid == uid:
                results.append((request, "received"))
        return results

    def incoming_pending(self, uid: str) -> list[RoommateRequest]:
        return [
            request
            for request in self._requests.values()
            if request.status == "pending" and request.to_uid == uid
        ]
