"""In-memory stand-in for the parts of the Supabase client the app touches.

Covers PostgREST table queries (including `alias:fk (cols)` embeds), the
`check_rate_limit` RPC, Auth admin/session calls and Storage buckets.
Failures can be injected per table and operation with `fail_on`.
"""

import copy
import re
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError
from pydantic import BaseModel

UNIQUE_KEYS = {
    "tenants": ("tenant_id",),
    "admin_users": ("user_id", "tenant_id"),
    "hero": ("tenant_id",),
    "about": ("tenant_id",),
    "contact_info": ("tenant_id",),
}

ROW_DEFAULTS = {
    "tenants": {"is_active": True, "theme_config": None, "logo_url": None},
    "admin_users": {"role": "owner"},
    "messages": {"is_read": False},
}

EMBED_PATTERN = re.compile(r"^(\w+):(\w+)\s*\((.*)\)$")

_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class Result:
    def __init__(self, data: Any):
        self.data = data


class FakeUser(BaseModel):
    id: str
    email: str
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}


class FakeSession(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    user: FakeUser


class UserResponse(BaseModel):
    user: Optional[FakeUser] = None


class AuthResponse(BaseModel):
    user: Optional[FakeUser] = None
    session: Optional[FakeSession] = None


class FakeAuthError(Exception):
    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


def _split_columns(columns: str) -> List[str]:
    """Split a select string on commas that are not inside an embed"""
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class QueryBuilder:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List[Tuple[str, str, Any]] = []
        self.ordering: Optional[Tuple[str, bool]] = None
        self.single = False

    def select(self, columns: str = "*"):
        self.columns = columns
        return self

    def insert(self, payload):
        self.operation, self.payload = "insert", payload
        return self

    def upsert(self, payload, on_conflict: Optional[str] = None):
        self.operation, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, payload):
        self.operation, self.payload = "update", payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: List[Any]):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def maybe_single(self):
        self.single = True
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        for kind, column, value in self.filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "in" and row.get(column) not in value:
                return False
        return True

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        columns = _split_columns(self.columns)
        if columns == ["*"]:
            return copy.deepcopy(row)
        projected = {}
        for column in columns:
            embed = EMBED_PATTERN.match(column)
            if embed:
                alias, fk, inner = embed.groups()
                target = next((r for r in self.db.tables.get(alias, []) if r.get("id") == row.get(fk)), None)
                if target is None:
                    projected[alias] = None
                else:
                    wanted = [c.strip() for c in inner.split(",") if c.strip()]
                    projected[alias] = {c: copy.deepcopy(target.get(c)) for c in wanted}
            else:
                projected[column] = copy.deepcopy(row.get(column))
        return projected

    def execute(self):
        error = self.db.failures.get((self.table, self.operation))
        if error is not None:
            raise error
        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "select":
            found = [r for r in rows if self._matches(r)]
            if self.ordering:
                column, desc = self.ordering
                found.sort(key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
            data = [self._project(r) for r in found]
            if self.single:
                # postgrest returns no response object at all for a missing row
                return Result(data[0]) if data else None
            return Result(data)

        if self.operation == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.add_row(self.table, p) for p in payloads]
            return Result(copy.deepcopy(created))

        if self.operation == "upsert":
            keys = tuple(k.strip() for k in (self.on_conflict or "id").split(","))
            existing = next((r for r in rows if all(r.get(k) == self.payload.get(k) for k in keys)), None)
            if existing is not None:
                existing.update(copy.deepcopy(self.payload))
                return Result([copy.deepcopy(existing)])
            return Result([copy.deepcopy(self.db.add_row(self.table, self.payload))])

        if self.operation == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    changed.append(copy.deepcopy(row))
            return Result(changed)

        if self.operation == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return Result(removed)

        raise ValueError(f"Unsupported operation {self.operation}")


class RpcCall:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        error = self.db.failures.get(("rpc", self.name))
        if error is not None:
            raise error
        if self.name != "check_rate_limit":
            raise APIError({"message": f"function {self.name} does not exist", "code": "42883"})
        return Result([self.db.count_request(
            self.params["p_key"], self.params["p_limit"], self.params["p_window_ms"]
        )])


class FakeAdminAuth:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def create_user(self, attributes: Dict[str, Any]) -> UserResponse:
        if self.auth.fail_create_user:
            raise FakeAuthError(self.auth.fail_create_user)
        email = attributes["email"].lower()
        if any(u["user"].email == email for u in self.auth.users.values()):
            raise FakeAuthError("A user with this email address has already been registered", 422)
        user = FakeUser(id=str(uuid.uuid4()), email=email)
        self.auth.users[user.id] = {"user": user, "password": attributes["password"]}
        return UserResponse(user=user)

    def delete_user(self, user_id: str) -> None:
        if self.auth.fail_delete_user:
            raise FakeAuthError("Auth admin API unavailable", 503)
        if user_id not in self.auth.users:
            raise FakeAuthError("User not found", 404)
        del self.auth.users[user_id]
        self.auth.tokens = {t: uid for t, uid in self.auth.tokens.items() if uid != user_id}

    def sign_out(self, jwt: str, scope: str = "global") -> None:
        self.auth.tokens.pop(jwt, None)
        self.auth.signed_out.append(jwt)


class FakeAuth:
    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}
        self.signed_out: List[str] = []
        self.fail_create_user: Optional[str] = None
        self.fail_sign_in = False
        self.fail_delete_user = False
        self.admin = FakeAdminAuth(self)

    def sign_in_with_password(self, credentials: Dict[str, str]) -> AuthResponse:
        if self.fail_sign_in:
            raise FakeAuthError("Auth service unavailable", 503)
        email = credentials["email"].lower()
        for entry in self.users.values():
            if entry["user"].email == email and entry["password"] == credentials["password"]:
                user = entry["user"]
                token = f"token-{uuid.uuid4().hex}"
                self.tokens[token] = user.id
                session = FakeSession(access_token=token, refresh_token=f"refresh-{uuid.uuid4().hex}", user=user)
                return AuthResponse(user=user, session=session)
        raise FakeAuthError("Invalid login credentials")

    def get_user(self, jwt: Optional[str] = None) -> UserResponse:
        user_id = self.tokens.get(jwt)
        if user_id is None or user_id not in self.users:
            raise FakeAuthError("invalid JWT: unable to parse or verify signature", 401)
        return UserResponse(user=self.users[user_id]["user"])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", bucket: str):
        self.storage = storage
        self.bucket = bucket

    def upload(self, path: str, file: bytes, file_options: Optional[Dict[str, str]] = None):
        if self.storage.fail_upload:
            raise FakeAuthError("Storage unavailable", 503)
        objects = self.storage.objects.setdefault(self.bucket, {})
        if path in objects:
            raise FakeAuthError("The resource already exists", 409)
        objects[path] = {"content": file, "options": file_options or {}}
        return {"path": path}

    def get_public_url(self, path: str) -> str:
        return f"https://project.supabase.co/storage/v1/object/public/{self.bucket}/{path}"

    def remove(self, paths: List[str]):
        objects = self.storage.objects.setdefault(self.bucket, {})
        return [{"name": p} for p in paths if objects.pop(p, None) is not None]


class FakeStorage:
    def __init__(self):
        self.objects: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_upload = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.rate_hits: Dict[str, List[float]] = {}
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self._clock = 0
        self.elapsed_ms = 0

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> RpcCall:
        return RpcCall(self, name, params or {})

    def fail_on(self, table: str, operation: str, error: Optional[Exception] = None) -> None:
        """Make the next and all later `operation` calls on `table` raise (use table="rpc" for functions)"""
        self.failures[(table, operation)] = error or APIError({"message": "connection reset", "code": "08006"})

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def add_row(self, table: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        row = {**ROW_DEFAULTS.get(table, {}), **copy.deepcopy(payload)}
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._next_timestamp())
        keys = UNIQUE_KEYS.get(table)
        if keys and any(all(r.get(k) == row.get(k) for k in keys) for r in self.tables.get(table, [])):
            raise APIError({
                "message": f'duplicate key value violates unique constraint "{table}_unique"',
                "code": "23505",
            })
        self.tables.setdefault(table, []).append(row)
        return row

    def count_request(self, key: str, limit: int, window_ms: int) -> Dict[str, Any]:
        """Sliding window counter mirroring the check_rate_limit function"""
        now = time.monotonic() * 1000 + self.elapsed_ms
        hits = [t for t in self.rate_hits.get(key, []) if now - t < window_ms]
        if len(hits) >= limit:
            self.rate_hits[key] = hits
            return {"allowed": False, "remaining": 0}
        hits.append(now)
        self.rate_hits[key] = hits
        return {"allowed": True, "remaining": limit - len(hits)}

    def advance(self, ms: int) -> None:
        """Move the rate limiter clock forward"""
        self.elapsed_ms += ms

    def _next_timestamp(self) -> str:
        self._clock += 1
        return (_BASE_TIME + timedelta(seconds=self._clock)).isoformat()
