"""Record storage for users, community images, and saved images.

This module isolates persistence from ``neuravision.api.main`` so route
handlers can focus on HTTP concerns while the store remains testable as a
small unit.

The store contract is :class:`Storage`.  The only implementation shipped is
:class:`MemStorage`, which keeps three independent dictionaries for the
lifetime of the process:

- ``users`` keyed by user id
- ``images`` (community gallery) keyed by image id
- ``saved_images`` (per-user favourites) keyed by saved image id

Every operation is total.  Point lookups return :class:`Found` or
:data:`NOT_FOUND` instead of raising, and :meth:`Storage.delete_saved_image`
reports a miss with ``False``.  Listings are reverse-chronological (newest
first) and sliced ``[offset, offset + limit)``.

Nothing here locks.  Every method runs to completion without awaiting, so
single dictionary operations are safe under the event loop, but callers that
check-then-act (for example "is this username free?" followed by
``create_user``) can interleave with other requests.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar, Union

from neuravision.core.records import (
    Image,
    InsertImage,
    InsertSavedImage,
    InsertUser,
    ModerationStatus,
    SavedImage,
    User,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LIMIT = 20
DEFAULT_OFFSET = 0


# ---------------------------------------------------------------------------
# Lookup result type.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found(Generic[T]):
    """A successful point lookup."""

    record: T


@dataclass(frozen=True)
class NotFound:
    """A point lookup that matched nothing."""


NOT_FOUND = NotFound()

Lookup = Union[Found[T], NotFound]


def _lookup(record: T | None) -> Lookup[T]:
    return NOT_FOUND if record is None else Found(record)


# ---------------------------------------------------------------------------
# Listing helpers.
# ---------------------------------------------------------------------------


def newest_first(records: Iterable[T]) -> list[T]:
    """Sort records by ``created_at`` descending.

    The sort is stable, so records sharing a timestamp keep their insertion
    order.
    """
    return sorted(records, key=lambda record: record.created_at, reverse=True)


def paginate(records: list[T], limit: int, offset: int) -> list[T]:
    """Return the contiguous slice ``[offset, offset + limit)``.

    Negative values are clamped to zero.  An offset past the end yields an
    empty list.
    """
    start = max(offset, 0)
    end = start + max(limit, 0)
    return records[start:end]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Store contract.
# ---------------------------------------------------------------------------


class Storage(ABC):
    """CRUD contract over the user, image, and saved image collections."""

    # Users

    @abstractmethod
    def create_user(self, data: InsertUser) -> User:
        """Store a new user under a fresh id.

        No uniqueness check is made against existing usernames.
        """

    @abstractmethod
    def get_user(self, user_id: str) -> Lookup[User]:
        """Look a user up by id."""

    @abstractmethod
    def get_user_by_username(self, username: str) -> Lookup[User]:
        """Return the first user (in insertion order) with *username*."""

    # Community images

    @abstractmethod
    def create_image(self, data: InsertImage) -> Image:
        """Store a community image, filling server-side defaults."""

    @abstractmethod
    def get_images(self, limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET) -> list[Image]:
        """List approved images, newest first, sliced by *limit*/*offset*."""

    @abstractmethod
    def get_image_by_id(self, image_id: str) -> Lookup[Image]:
        """Look a community image up by id."""

    @abstractmethod
    def count_images(self) -> int:
        """Number of approved community images."""

    # Saved images

    @abstractmethod
    def create_saved_image(self, data: InsertSavedImage) -> SavedImage:
        """Store a favourite, filling server-side defaults."""

    @abstractmethod
    def get_saved_images_by_user_id(
        self,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> list[SavedImage]:
        """List one user's favourites, newest first, sliced by *limit*/*offset*."""

    @abstractmethod
    def get_saved_image_by_id(self, saved_image_id: str) -> Lookup[SavedImage]:
        """Look a favourite up by id."""

    @abstractmethod
    def count_saved_images(self, user_id: str) -> int:
        """Number of favourites owned by *user_id*."""

    @abstractmethod
    def delete_saved_image(self, saved_image_id: str) -> bool:
        """Remove a favourite.  Returns whether anything was removed."""


# ---------------------------------------------------------------------------
# In-memory implementation.
# ---------------------------------------------------------------------------


class MemStorage(Storage):
    """Process-lifetime store backed by three dictionaries.

    Args:
        clock: Returns the timestamp assigned to ``created_at``.  Defaults to
            the current UTC time.
        id_factory: Returns candidate record ids.  Defaults to random UUID4
            strings.  Candidates already present in the target collection are
            discarded, so ids stay unique even with a colliding factory.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _random_id
        self._users: dict[str, User] = {}
        self._images: dict[str, Image] = {}
        self._saved_images: dict[str, SavedImage] = {}

    def _new_id(self, collection: dict) -> str:
        new_id = self._id_factory()
        while not new_id or new_id in collection:
            new_id = self._id_factory()
        return new_id

    # --- Users -------------------------------------------------------------

    def create_user(self, data: InsertUser) -> User:
        user = User(id=self._new_id(self._users), **data.model_dump())
        self._users[user.id] = user
        logger.debug(f"Created user {user.id} ({user.username})")
        return user

    def get_user(self, user_id: str) -> Lookup[User]:
        return _lookup(self._users.get(user_id))

    def get_user_by_username(self, username: str) -> Lookup[User]:
        match = next((u for u in self._users.values() if u.username == username), None)
        return _lookup(match)

    # --- Community images --------------------------------------------------

    def create_image(self, data: InsertImage) -> Image:
        fields = data.model_dump()
        fields.update(
            id=self._new_id(self._images),
            negative_prompt=data.negative_prompt or None,
            user_display_name=data.user_display_name or None,
            created_at=self._clock(),
            # Moderation is not implemented; every upload is auto-approved.
            moderation_status=ModerationStatus.APPROVED,
            like_count=0,
        )
        image = Image(**fields)
        self._images[image.id] = image
        logger.debug(f"Created image {image.id}")
        return image

    def get_images(self, limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET) -> list[Image]:
        approved = (
            img
            for img in self._images.values()
            if img.moderation_status == ModerationStatus.APPROVED
        )
        return paginate(newest_first(approved), limit, offset)

    def get_image_by_id(self, image_id: str) -> Lookup[Image]:
        return _lookup(self._images.get(image_id))

    def count_images(self) -> int:
        """Number of approved community images."""
        return sum(
            1 for img in self._images.values() if img.moderation_status == ModerationStatus.APPROVED
        )

    # --- Saved images ------------------------------------------------------

    def create_saved_image(self, data: InsertSavedImage) -> SavedImage:
        fields = data.model_dump()
        fields.update(
            id=self._new_id(self._saved_images),
            negative_prompt=data.negative_prompt or None,
            original_image_id=data.original_image_id or None,
            created_at=self._clock(),
        )
        saved = SavedImage(**fields)
        self._saved_images[saved.id] = saved
        logger.debug(f"Saved image {saved.id} for user {saved.user_id}")
        return saved

    def get_saved_images_by_user_id(
        self,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> list[SavedImage]:
        owned = (s for s in self._saved_images.values() if s.user_id == user_id)
        return paginate(newest_first(owned), limit, offset)

    def get_saved_image_by_id(self, saved_image_id: str) -> Lookup[SavedImage]:
        return _lookup(self._saved_images.get(saved_image_id))

    def count_saved_images(self, user_id: str) -> int:
        """Number of favourites owned by *user_id*."""
        return sum(1 for s in self._saved_images.values() if s.user_id == user_id)

    def delete_saved_image(self, saved_image_id: str) -> bool:
        removed = self._saved_images.pop(saved_image_id, None)
        if removed is None:
            logger.debug(f"Saved image {saved_image_id} not found for deletion")
            return False
        logger.debug(f"Deleted saved image {saved_image_id}")
        return True
