import json
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from larasession.exceptions import SessionException
from larasession.session import CookieSessionStore, FileSessionStore, RedisSessionStore


class TestFileSessionStore:
    @pytest.fixture
    def file_store(self, tmp_path):
        return FileSessionStore({"path": str(tmp_path / "sessions"), "expire": 300})

    @pytest.mark.asyncio
    async def test_open_creates_save_path(self, file_store, tmp_path):
        target = tmp_path / "elsewhere"
        assert await file_store.open(str(target), "framework_session") is True
        assert target.is_dir()
        assert file_store.path == target

    @pytest.mark.asyncio
    async def test_write_read_destroy(self, file_store):
        assert await file_store.write("abc", {"user": {"id": 1}}) is True
        assert await file_store.exists("abc") is True
        assert await file_store.read("abc") == {"user": {"id": 1}}

        payload = json.loads((file_store.path / "session_abc.json").read_text())
        assert payload["_expire_at"] == pytest.approx(time.time() + 300, abs=5)

        assert await file_store.destroy("abc") is True
        assert await file_store.exists("abc") is False
        assert await file_store.read("abc") == {}

    @pytest.mark.asyncio
    async def test_expired_session_reads_empty(self, file_store):
        file_store.lifetime = -1
        await file_store.write("old", {"k": "v"})

        assert await file_store.read("old") == {}
        assert await file_store.exists("old") is False

    @pytest.mark.asyncio
    async def test_corrupted_file_reads_empty(self, file_store):
        file_store.path.mkdir(parents=True)
        (file_store.path / "session_bad.json").write_text("{not json")
        assert await file_store.read("bad") == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ['["corrupt"]', "null", '{"data": [1], "_expire_at": 9999999999}'])
    async def test_non_object_payload_reads_empty(self, file_store, content):
        file_store.path.mkdir(parents=True)
        (file_store.path / "session_odd.json").write_text(content)

        assert await file_store.read("odd") == {}

    @pytest.mark.asyncio
    async def test_gc_removes_non_object_files(self, file_store):
        file_store.path.mkdir(parents=True)
        (file_store.path / "session_list.json").write_text("[]")

        assert await file_store.gc(300) == 1

    @pytest.mark.asyncio
    async def test_gc_removes_expired_and_corrupted(self, file_store):
        await file_store.write("fresh", {"k": 1})
        file_store.lifetime = -1
        await file_store.write("stale", {"k": 2})
        (file_store.path / "session_broken.json").write_text("garbage")

        assert await file_store.gc(300) == 2
        assert await file_store.exists("fresh") is True
        assert await file_store.exists("stale") is False

    @pytest.mark.asyncio
    async def test_unserializable_data_is_not_written(self, file_store):
        assert await file_store.write("abc", {"obj": object()}) is False


class TestCookieSessionStore:
    @pytest.fixture
    def cookie_store(self):
        return CookieSessionStore({"secret": "test-secret"})

    @pytest.mark.asyncio
    async def test_serialized_payload_reads_back(self, cookie_store):
        payload = cookie_store.serialize({"user": {"id": 5}})

        assert await cookie_store.read(payload) == {"user": {"id": 5}}
        assert await cookie_store.exists(payload) is True

    @pytest.mark.asyncio
    async def test_tampered_payload_is_rejected(self, cookie_store):
        payload = cookie_store.serialize({"role": "user"})
        other = CookieSessionStore({"secret": "another-secret"})

        assert await other.read(payload) == {}
        assert await cookie_store.read(payload + "x") == {}
        assert await cookie_store.exists("garbage") is False
        assert await cookie_store.read("") == {}

    @pytest.mark.asyncio
    async def test_locking_is_noop(self, cookie_store):
        await cookie_store.acquire_lock("payload")
        await cookie_store.acquire_lock("payload")
        await cookie_store.release_lock("payload")
        assert cookie_store.is_locked("payload") is False


class TestRedisSessionStore:
    @pytest.fixture
    def mock_redis(self):
        redis = AsyncMock()
        redis.get = AsyncMock(return_value=None)
        redis.setex = AsyncMock()
        redis.delete = AsyncMock()
        redis.exists = AsyncMock(return_value=0)

        lock = MagicMock()
        lock.acquire = AsyncMock(return_value=True)
        lock.release = AsyncMock()
        redis.lock = MagicMock(return_value=lock)
        return redis

    @pytest.fixture
    def redis_store(self, mock_redis):
        return RedisSessionStore({"expire": 120, "redis_prefix": "app:sess:"}, client=mock_redis)

    @pytest.mark.asyncio
    async def test_write_uses_setex_with_lifetime(self, redis_store, mock_redis):
        assert await redis_store.write("abc", {"k": "v"}) is True

        mock_redis.setex.assert_awaited_once_with("app:sess:abc", 120, json.dumps({"k": "v"}))

    @pytest.mark.asyncio
    async def test_read_decodes_json(self, redis_store, mock_redis):
        mock_redis.get.return_value = json.dumps({"cart": {"items": 2}})

        assert await redis_store.read("abc") == {"cart": {"items": 2}}
        mock_redis.get.assert_awaited_once_with("app:sess:abc")

    @pytest.mark.asyncio
    async def test_read_missing_or_invalid(self, redis_store, mock_redis):
        assert await redis_store.read("abc") == {}

        mock_redis.get.return_value = "not-json"
        assert await redis_store.read("abc") == {}

    @pytest.mark.asyncio
    async def test_connection_errors_are_reported_not_raised(self, redis_store, mock_redis):
        mock_redis.get.side_effect = RedisConnectionError("down")
        mock_redis.setex.side_effect = RedisConnectionError("down")

        assert await redis_store.read("abc") == {}
        assert await redis_store.write("abc", {"k": 1}) is False

    @pytest.mark.asyncio
    async def test_destroy_and_exists(self, redis_store, mock_redis):
        mock_redis.exists.return_value = 1

        assert await redis_store.exists("abc") is True
        assert await redis_store.destroy("abc") is True
        mock_redis.delete.assert_awaited_once_with("app:sess:abc")
        assert await redis_store.gc(120) == 0

    @pytest.mark.asyncio
    async def test_lock_round_trip(self, redis_store, mock_redis):
        await redis_store.acquire_lock("abc")

        mock_redis.lock.assert_called_once()
        assert mock_redis.lock.call_args[0][0] == "app:sess:abc:lock"
        assert redis_store.is_locked("abc")

        await redis_store.release_lock("abc")
        mock_redis.lock.return_value.release.assert_awaited_once()
        assert not redis_store.is_locked("abc")

    @pytest.mark.asyncio
    async def test_lock_timeout_raises(self, redis_store, mock_redis):
        mock_redis.lock.return_value.acquire.return_value = False

        with pytest.raises(SessionException):
            await redis_store.acquire_lock("abc")
