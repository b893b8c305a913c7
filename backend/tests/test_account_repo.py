"""Tests for AccountRepositoryImpl against a minimal in-memory Firestore double."""
from google.cloud import firestore

from foro.infra.firestore.repositories.account_repo import (
    IN_FILTER_LIMIT,
    AccountRepositoryImpl,
)

_OPS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a is not None and a != b,
    "in": lambda a, b: a in b,
}


class FakeSnapshot:
    def __init__(self, ref, data):
        self.id = ref.id
        self.reference = ref
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    async def get(self):
        return FakeSnapshot(self, self.collection.docs.get(self.id))

    async def set(self, data, merge=False):
        current = self.collection.docs.get(self.id, {}) if merge else {}
        self.collection.docs[self.id] = {**current, **data}

    async def update(self, data):
        self.collection.apply(self.id, data)


class FakeQuery:
    def __init__(self, collection, filters=(), limit=None):
        self.collection = collection
        self.filters = tuple(filters)
        self._limit = limit

    def where(self, filter):
        self.collection.queries.append((filter.field_path, filter.op_string, filter.value))
        return FakeQuery(self.collection, self.filters + (filter,), self._limit)

    def limit(self, count):
        return FakeQuery(self.collection, self.filters, count)

    async def stream(self):
        matched = 0
        for doc_id, data in list(self.collection.docs.items()):
            if all(_OPS[f.op_string](data.get(f.field_path), f.value) for f in self.filters):
                yield FakeSnapshot(FakeDocumentRef(self.collection, doc_id), data)
                matched += 1
                if self._limit is not None and matched >= self._limit:
                    return


class FakeCollection(FakeQuery):
    def __init__(self):
        self.docs = {}
        self.queries = []
        super().__init__(self)

    def document(self, doc_id):
        return FakeDocumentRef(self, doc_id)

    def apply(self, doc_id, data):
        doc = self.docs[doc_id]
        for key, value in data.items():
            if value is firestore.DELETE_FIELD:
                doc.pop(key, None)
            else:
                doc[key] = value


class FakeBatch:
    def __init__(self, client):
        self.client = client
        self.updates = []

    def update(self, ref, data):
        self.updates.append((ref, data))

    async def commit(self):
        self.client.committed.append(len(self.updates))
        for ref, data in self.updates:
            ref.collection.apply(ref.id, data)


class FakeFirestoreClient:
    def __init__(self):
        self.collections = {}
        self.committed = []

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def batch(self):
        return FakeBatch(self)


def _repo_with_users(users):
    client = FakeFirestoreClient()
    client.collection("users").docs.update(users)
    return client, AccountRepositoryImpl(client, "users")


async def test_find_accounts_by_role():
    _, repo = _repo_with_users({
        "u1": {"email": "a@x", "role": "usuario", "fcmToken": "t1"},
        "o1": {"email": "o@x", "role": "organizador"},
    })
    accounts = await repo.find_accounts_by_role("usuario")
    assert [a.id for a in accounts] == ["u1"]
    assert accounts[0].fcm_token == "t1"


async def test_find_accounts_with_token_skips_missing_tokens_and_limits():
    _, repo = _repo_with_users({
        "u1": {"role": "usuario", "fcmToken": "t1"},
        "u2": {"role": "usuario"},
        "u3": {"role": "usuario", "fcmToken": "t3"},
        "u4": {"role": "usuario", "fcmToken": "t4"},
    })
    accounts = await repo.find_accounts_with_token("usuario", 2)
    assert [a.fcm_token for a in accounts] == ["t1", "t3"]


async def test_create_account_merges_into_existing_document():
    client, repo = _repo_with_users({"u1": {"role": "usuario", "fcmToken": "t1"}})
    account = await repo.create_account("u1", "a@x", "organizador")
    assert account.role == "organizador"
    assert account.fcm_token == "t1"
    assert client.collection("users").docs["u1"]["email"] == "a@x"


async def test_clear_tokens_chunks_in_filters_and_removes_field():
    users = {f"u{i}": {"role": "usuario", "fcmToken": f"t{i}"} for i in range(70)}
    users["keep"] = {"role": "usuario", "fcmToken": "keep-me"}
    client, repo = _repo_with_users(users)
    # Duplicates and empties are ignored
    invalid = [f"t{i}" for i in range(70)] + ["t0", ""]

    removed = await repo.clear_token_on_accounts_with_token(invalid)

    assert removed == 70
    in_queries = [values for field, op, values in client.collection("users").queries if op == "in"]
    assert [len(v) for v in in_queries] == [IN_FILTER_LIMIT, IN_FILTER_LIMIT, 10]
    assert client.committed == [70]
    docs = client.collection("users").docs
    assert all("fcmToken" not in docs[f"u{i}"] for i in range(70))
    assert docs["keep"]["fcmToken"] == "keep-me"


async def test_clear_tokens_with_no_matches_writes_nothing():
    client, repo = _repo_with_users({"u1": {"role": "usuario", "fcmToken": "t1"}})
    assert await repo.clear_token_on_accounts_with_token(["unknown"]) == 0
    assert client.committed == []
    assert await repo.clear_token_on_accounts_with_token([]) == 0
