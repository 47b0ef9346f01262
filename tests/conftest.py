"""Common utilities for tests."""

from __future__ import annotations

import datetime
import unittest
import unittest.mock
from typing import Any, Iterator, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference

from oneman import create_app
from oneman.user.models import UserSession

# Every module that reaches Firestore through ``firebase_admin.firestore``.
FIRESTORE_MODULES = (
    "oneman.firestore",
    "oneman.auth.routes.firestore",
    "oneman.user.routes.firestore",
    "oneman.user.services.firestore",
    "oneman.group.routes.firestore",
    "oneman.group.services.group_service.firestore",
    "oneman.group.services.membership.firestore",
    "oneman.inventory.routes.firestore",
    "oneman.inventory.services.firestore",
    "oneman.chat.routes.firestore",
    "oneman.chat.services.firestore",
)

ADMIN_ID = "admin1"
MEMBER_ID = "member1"
OUTSIDER_ID = "outsider1"

USERS = {
    ADMIN_ID: {
        "username": "alice",
        "email": "alice@example.com",
        "displayName": "Alice Admin",
    },
    MEMBER_ID: {
        "username": "bob",
        "email": "bob@example.com",
        "displayName": "Bob Builder",
    },
    OUTSIDER_ID: {
        "username": "carol",
        "email": "carol@example.com",
        "displayName": "Carol",
    },
}


class MockArrayUnion:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockArrayRemove:
    def __init__(self, values: list[Any]) -> None:
        self.values = values

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


class MockFieldFilter:
    def __init__(self, field_path: str, op_string: str, value: Any) -> None:
        self.field_path = field_path
        self.op_string = op_string
        self.value = value


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and sentinels."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    # Transactional reads pass ``transaction=``.
    if not hasattr(DocumentReference, "_orig_get"):
        DocumentReference._orig_get = DocumentReference.get

        def doc_ref_get(self: Any, transaction: Any = None) -> Any:
            return self._orig_get()

        DocumentReference.get = doc_ref_get

    if not hasattr(DocumentReference, "_orig_update"):
        DocumentReference._orig_update = DocumentReference.update

        def patched_update(self: Any, data: dict[str, Any]) -> Any:
            current_data = self.get().to_dict() or {}
            new_data = {}
            for k, v in data.items():
                if isinstance(v, MockArrayUnion):
                    merged = list(current_data.get(k) or [])
                    for item in v.values:
                        if item not in merged:
                            merged.append(item)
                    new_data[k] = merged
                elif isinstance(v, MockArrayRemove):
                    existing = current_data.get(k) or []
                    new_data[k] = [i for i in existing if i not in v.values]
                else:
                    new_data[k] = v
            return self._orig_update(new_data)

        DocumentReference.update = patched_update


class MockBatch:
    """Collects writes and applies them on commit."""

    def __init__(self, db: Any) -> None:
        self.db = db
        self.writes: list[tuple[str, Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def update(self, ref: Any, data: Any) -> None:
        self.writes.append(("update", ref, data))

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.writes.append(("set", ref, data))

    def delete(self, ref: Any) -> None:
        self.writes.append(("delete", ref, None))

    def _real_commit(self) -> None:
        for op, ref, data in self.writes:
            if op == "delete":
                ref.delete()
            elif op == "set":
                ref.set(data)
            else:
                ref.update(data)


class MockTransaction(MockBatch):
    """A batch that also stands in for a Firestore transaction.

    Writes are buffered until ``commit`` so a failing transactional function
    leaves the data untouched, like the real thing.
    """


def transactional(func: Any) -> Any:
    """Stand-in for ``firestore.transactional`` that commits on success."""

    def wrapper(transaction: MockTransaction, *args: Any, **kwargs: Any) -> Any:
        result = func(transaction, *args, **kwargs)
        transaction.commit()
        return result

    return wrapper


def make_firestore_module(db: MockFirestore) -> unittest.mock.MagicMock:
    """Build a stand-in for ``firebase_admin.firestore`` backed by ``db``."""
    module = unittest.mock.MagicMock()
    module.client.return_value = db
    module.FieldFilter = MockFieldFilter
    module.ArrayUnion = MockArrayUnion
    module.ArrayRemove = MockArrayRemove
    module.SERVER_TIMESTAMP = datetime.datetime(
        2024, 1, 1, tzinfo=datetime.timezone.utc
    )
    module.Query.ASCENDING = "ASCENDING"
    module.transactional = transactional
    return module


def session_for(user_id: str) -> UserSession:
    """Return the signed-in session of one of the seeded users."""
    return UserSession({**USERS[user_id], "uid": user_id})


class FirestoreTestCase(unittest.TestCase):
    """Runs each test against a fresh MockFirestore inside an app context."""

    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        self.batches: list[MockBatch] = []
        self.db.batch = unittest.mock.MagicMock(side_effect=self._new_batch)
        self.db.transaction = unittest.mock.MagicMock(
            side_effect=lambda: MockTransaction(self.db)
        )
        self.mock_firestore_module = make_firestore_module(self.db)

        patchers = {
            "init_app": unittest.mock.patch("firebase_admin.initialize_app"),
            **{
                name: unittest.mock.patch(name, new=self.mock_firestore_module)
                for name in FIRESTORE_MODULES
            },
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SERVER_NAME": "localhost"}
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

        for uid, data in USERS.items():
            self.db.collection("users").document(uid).set(data)

    def _new_batch(self) -> MockBatch:
        batch = MockBatch(self.db)
        self.batches.append(batch)
        return batch

    def make_group(
        self,
        kind: str = "site",
        group_id: str = "site1",
        name: str = "North Site",
        members: Optional[list[str]] = None,
        materials: Optional[list[dict[str, Any]]] = None,
        admin_id: str = ADMIN_ID,
    ) -> str:
        collection = "sites" if kind == "site" else "stores"
        self.db.collection(collection).document(group_id).set(
            {
                "name": name,
                "location": f"{name} Road",
                "adminId": admin_id,
                "members": members if members is not None else [admin_id],
                "materials": materials or [],
                "createdAt": datetime.datetime(
                    2024, 1, 1, tzinfo=datetime.timezone.utc
                ),
            }
        )
        return group_id

    def group_data(self, kind: str, group_id: str) -> dict[str, Any]:
        collection = "sites" if kind == "site" else "stores"
        return self.db.collection(collection).document(group_id).get().to_dict()

    def stored_messages(self, kind: str, group_id: str) -> list[dict[str, Any]]:
        collection = "sites" if kind == "site" else "stores"
        docs = (
            self.db.collection(collection)
            .document(group_id)
            .collection("messages")
            .stream()
        )
        return [doc.to_dict() for doc in docs if doc.exists]

    def login(self, user_id: str = ADMIN_ID) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id
