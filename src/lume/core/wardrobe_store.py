"""MongoDB-backed storage for wardrobe items.

This module isolates the persistence logic from :mod:`lume.api.main` so route
handlers can focus on HTTP concerns while the store remains testable as a
small unit against an in-memory collection.

The store is intentionally simple:

- one document per uploaded image in a single collection
- the image bytes live inside the document as base64 text next to their
  declared MIME type
- list order is reverse-chronological (newest first)
- there is no update operation; items are created and deleted only

The collection handle is passed in explicitly.  :meth:`WardrobeStore.from_config`
builds a real :class:`pymongo.MongoClient` for the application lifespan; tests
hand in a ``mongomock`` collection instead.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from lume.core.config import MIB, LumeConfig
from lume.core.errors import ItemNotFoundError, UploadValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)
MAX_UPLOAD_BYTES = 10 * MIB


def create_data_url(base64_data: str, mime_type: str) -> str:
    """Embed base64 image data in a ``data:`` URL."""
    return f"data:{mime_type};base64,{base64_data}"


def _isoformat(value: datetime) -> str:
    # BSON dates come back naive but are always UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _utcnow() -> datetime:
    # BSON dates keep millisecond precision; truncate so the value returned
    # from create() matches what a later read yields.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass
class WardrobeItem:
    """A single uploaded clothing image.

    Attributes:
        id: Hex string of the document ``ObjectId``.
        owner_id: Owner identifier the item is scoped to.
        image_data: Base64-encoded image bytes.
        image_mime_type: Declared MIME type of the upload.
        category: Free-text category label (``tops``, ``shoes``, ...).
        upload_date: UTC creation timestamp.
        file_name: Original client-side file name, if supplied.
    """

    id: str
    owner_id: str
    image_data: str
    image_mime_type: str
    category: str
    upload_date: datetime
    file_name: str | None = None

    @classmethod
    def from_document(cls, doc: dict) -> WardrobeItem:
        return cls(
            id=str(doc["_id"]),
            owner_id=doc["userId"],
            image_data=doc["imageData"],
            image_mime_type=doc["imageMimeType"],
            category=doc["category"],
            upload_date=doc["uploadDate"],
            file_name=doc.get("fileName"),
        )

    @property
    def data_url(self) -> str:
        return create_data_url(self.image_data, self.image_mime_type)

    def to_public(self) -> dict:
        """JSON shape returned by the list and detail endpoints."""
        return {
            "_id": self.id,
            "imageUrl": self.data_url,
            "category": self.category,
            "uploadDate": _isoformat(self.upload_date),
            "fileName": self.file_name,
        }

    def to_summary(self) -> dict:
        """JSON shape returned after an upload."""
        return {
            "_id": self.id,
            "category": self.category,
            "uploadDate": _isoformat(self.upload_date),
        }


def validate_upload(
    image_bytes: bytes,
    mime_type: str | None,
    *,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Check an upload against the size limit and the MIME allow-list.

    Only the declared MIME type is checked; the bytes are not sniffed.

    Raises:
        UploadValidationError: If the upload is empty, too large, or of a
            disallowed type.
    """
    if not image_bytes:
        raise UploadValidationError("No file uploaded")
    if len(image_bytes) > max_bytes:
        raise UploadValidationError(
            f"File too large: {len(image_bytes)} bytes exceeds the {max_bytes} byte limit"
        )
    if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise UploadValidationError("Only image files are allowed!")


class WardrobeStore:
    """Data access for wardrobe items held in one MongoDB collection."""

    def __init__(self, collection: Collection, *, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        """Wrap an existing collection handle.

        Args:
            collection: The ``pymongo`` (or compatible) collection to use.
            max_upload_bytes: Largest image accepted by :meth:`create`.
        """
        self._collection = collection
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_config(cls, config: LumeConfig) -> tuple[MongoClient, WardrobeStore]:
        """Connect to MongoDB and build a store from configuration.

        The caller owns the returned client and must close it on shutdown.

        Returns:
            Tuple of ``(client, store)``.
        """
        client: MongoClient = MongoClient(config.mongodb_uri)
        if config.mongodb_database:
            database = client[config.mongodb_database]
        else:
            database = client.get_default_database(default="ai-stylist")
        store = cls(
            database[config.mongodb_collection],
            max_upload_bytes=config.max_upload_bytes,
        )
        logger.info(
            f"Wardrobe store using {database.name}.{config.mongodb_collection}"
        )
        return client, store

    def ensure_indexes(self) -> None:
        """Create the owner index used by every list and stats query."""
        self._collection.create_index([("userId", ASCENDING)])

    # -- Queries ------------------------------------------------------------

    def list_by_owner(self, owner_id: str) -> list[WardrobeItem]:
        """Return all items for *owner_id*, newest first."""
        cursor = self._collection.find({"userId": owner_id}).sort(
            [("uploadDate", DESCENDING), ("_id", DESCENDING)]
        )
        return [WardrobeItem.from_document(doc) for doc in cursor]

    def get_by_id(self, item_id: str) -> WardrobeItem:
        """Return one item by identifier.

        Raises:
            ItemNotFoundError: If the identifier is malformed or unknown.
        """
        doc = self._find_document(item_id)
        return WardrobeItem.from_document(doc)

    def stats_by_owner(self, owner_id: str) -> dict:
        """Count the owner's items overall and per category.

        Returns:
            Dictionary with ``totalItems`` and ``categories`` (a mapping of
            category → count).  The category counts always sum to
            ``totalItems``.
        """
        pipeline = [
            {"$match": {"userId": owner_id}},
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
        ]
        categories: dict[str, int] = {}
        for row in self._collection.aggregate(pipeline):
            categories[row["_id"]] = row["count"]
        return {"totalItems": sum(categories.values()), "categories": categories}

    def categories_for_owner(self, owner_id: str) -> list[str]:
        """Return the distinct categories the owner has uploaded, sorted."""
        return sorted(self._collection.distinct("category", {"userId": owner_id}))

    # -- Mutations ----------------------------------------------------------

    def create(
        self,
        owner_id: str,
        category: str,
        image_bytes: bytes,
        mime_type: str | None,
        file_name: str | None = None,
    ) -> WardrobeItem:
        """Validate and insert a new wardrobe item.

        Validation happens before anything is written, so a rejected upload
        never leaves a partial record behind.

        Raises:
            UploadValidationError: For a missing owner or category, or an
                image that fails :func:`validate_upload`.
        """
        if not owner_id or not category:
            raise UploadValidationError("userId and category are required")
        validate_upload(image_bytes, mime_type, max_bytes=self.max_upload_bytes)

        doc = {
            "userId": owner_id,
            "imageData": base64.b64encode(image_bytes).decode("ascii"),
            "imageMimeType": mime_type,
            "category": category,
            "uploadDate": _utcnow(),
            "fileName": file_name,
        }
        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return WardrobeItem.from_document(doc)

    def delete_by_id(self, item_id: str) -> None:
        """Delete one item by identifier.

        Raises:
            ItemNotFoundError: If the identifier is malformed or unknown.
        """
        if not ObjectId.is_valid(item_id):
            raise ItemNotFoundError(item_id)
        result = self._collection.delete_one({"_id": ObjectId(item_id)})
        if result.deleted_count == 0:
            raise ItemNotFoundError(item_id)

    def _find_document(self, item_id: str) -> dict:
        if not ObjectId.is_valid(item_id):
            raise ItemNotFoundError(item_id)
        doc = self._collection.find_one({"_id": ObjectId(item_id)})
        if doc is None:
            raise ItemNotFoundError(item_id)
        return doc
