import pytest
from fastapi.testclient import TestClient

from shortener_app.config import settings
from shortener_app.dependencies import get_storage
from shortener_app.exceptions import DuplicateURLError, InvalidURLError, ShortCodeNotFoundError, StorageError
from shortener_app.models.url import URL
from shortener_app.services.url_service import URLService
from shortener_app.storage.strategies import SQLAlchemyURLStorage
from main import app


class TestURLShortener:
    """Test URL shortener HTTP endpoints"""

    def test_encode(self, client: TestClient):
        """Test creating a short URL"""
        response = client.post("/encode", json={"url": "https://example.com/page"})
        assert response.status_code == 200
        assert response.json() == {"short_url": "http://shrt.est/000001"}

    def test_encode_twice_returns_same_short_url(self, client: TestClient, db_session):
        first = client.post("/encode", json={"url": "https://www.google.com/"})
        second = client.post("/encode", json={"url": "https://www.google.com/"})

        assert first.json() == second.json()
        assert db_session.query(URL).count() == 1

    def test_decode(self, client: TestClient):
        """Test resolving a short URL created through the API"""
        short_url = client.post("/encode", json={"url": "https://www.github.com/"}).json()["short_url"]

        response = client.post("/decode", json={"url": short_url})
        assert response.status_code == 200
        assert response.json() == {"long_url": "https://www.github.com/"}

    def test_decode_bare_code(self, client: TestClient):
        client.post("/encode", json={"url": "https://www.github.com/"})

        response = client.post("/decode", json={"url": "000001"})
        assert response.json() == {"long_url": "https://www.github.com/"}

    def test_decode_unknown(self, client: TestClient):
        """Test decoding a code that was never issued"""
        response = client.post("/decode", json={"url": "http://shrt.est/zzzzzz"})
        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_invalid_url(self, client: TestClient, db_session):
        """Test creating URL with invalid URL"""
        response = client.post("/encode", json={"url": "not-a-url"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL"}
        assert db_session.query(URL).count() == 0

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": None}])
    def test_encode_requires_url(self, client: TestClient, body):
        response = client.post("/encode", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    @pytest.mark.parametrize("body", [{}, {"url": ""}])
    def test_decode_requires_url(self, client: TestClient, body):
        response = client.post("/decode", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Short URL is required"}

    def test_malformed_body(self, client: TestClient):
        response = client.post(
            "/encode",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_redirect_url(self, client: TestClient):
        """Test URL redirection"""
        client.post("/encode", json={"url": "https://www.github.com/"})

        response = client.get("/000001", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent_url(self, client: TestClient):
        """Test redirecting non-existent URL"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    def test_invalid_endpoint(self, client: TestClient):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        assert response.json() == {"error": "Invalid endpoint"}

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_memory_backend(self, client: TestClient, db_session, monkeypatch):
        monkeypatch.setattr(settings, "storage_backend", "memory")

        short_url = client.post("/encode", json={"url": "https://example.com/"}).json()["short_url"]

        assert short_url == "http://shrt.est/000001"
        assert client.post("/decode", json={"url": short_url}).json() == {"long_url": "https://example.com/"}
        assert db_session.query(URL).count() == 0

    def test_storage_failure(self, client: TestClient, db_session):
        class BrokenStorage(SQLAlchemyURLStorage):
            def find_by_url(self, long_url):
                raise StorageError("connection lost")

        app.dependency_overrides[get_storage] = lambda: BrokenStorage(db_session)

        response = client.post("/encode", json={"url": "https://example.com/"})
        assert response.status_code == 500
        assert response.json() == {"error": "Storage failure"}


class TestURLService:
    """Test URL service business logic directly"""

    def test_encode_empty_store(self, sql_storage, test_settings, db_session):
        service = URLService(sql_storage, test_settings)

        assert service.encode("https://example.com/page") == "http://shrt.est/000001"

        url = db_session.query(URL).one()
        assert url.id == 1
        assert url.short_code == "000001"
        assert url.long_url == "https://example.com/page"

    def test_round_trip(self, sql_storage, test_settings):
        service = URLService(sql_storage, test_settings)

        for long_url in [
            "https://www.example.com/",
            "http://example.org/a/b?c=d#e",
            "ftp://files.example.net/pub/file.txt",
        ]:
            assert service.decode(service.encode(long_url)) == long_url

    def test_url_stored_verbatim(self, sql_storage, test_settings):
        """No normalization: trailing slash makes a different URL"""
        service = URLService(sql_storage, test_settings)

        with_slash = service.encode("https://www.example.com/")
        without_slash = service.encode("https://www.example.com")

        assert with_slash != without_slash
        assert service.decode(without_slash) == "https://www.example.com"

    def test_url_not_normalised_by_validation(self, sql_storage, test_settings, db_session):
        service = URLService(sql_storage, test_settings)

        short_url = service.encode("HTTPS://Example.COM/Path")

        assert service.decode(short_url) == "HTTPS://Example.COM/Path"
        assert db_session.query(URL).one().long_url == "HTTPS://Example.COM/Path"

    def test_idempotent_encode(self, sql_storage, test_settings, db_session):
        service = URLService(sql_storage, test_settings)

        first = service.encode("https://www.test.com/")
        second = service.encode("https://www.test.com/")

        assert first == second
        assert db_session.query(URL).count() == 1

    def test_invalid_url_writes_nothing(self, memory_storage, test_settings):
        service = URLService(memory_storage, test_settings)

        with pytest.raises(InvalidURLError) as exc_info:
            service.encode("not-a-url")

        assert exc_info.value.message == "Invalid URL"
        assert len(memory_storage) == 0

    def test_decode_unknown_code(self, sql_storage, test_settings):
        service = URLService(sql_storage, test_settings)

        with pytest.raises(ShortCodeNotFoundError) as exc_info:
            service.decode("http://shrt.est/zzzzzz")

        assert exc_info.value.message == "Short URL not found"
        assert exc_info.value.short_code == "zzzzzz"

    def test_decode_strips_prefix_literally(self, memory_storage, test_settings):
        """Only the literal base URL is removed; other hosts are kept in the code"""
        service = URLService(memory_storage, test_settings)
        service.encode("https://example.com/")

        assert service.decode("http://shrt.est/000001") == "https://example.com/"
        assert service.decode("000001") == "https://example.com/"
        with pytest.raises(ShortCodeNotFoundError):
            service.decode("https://shrt.est/000001")

    def test_custom_base_url(self, memory_storage, test_settings):
        test_settings.base_url = "https://s.example/"
        service = URLService(memory_storage, test_settings)

        short_url = service.encode("https://example.com/")

        assert short_url == "https://s.example/000001"
        assert service.decode(short_url) == "https://example.com/"

    def test_sequential_codes(self, memory_storage, test_settings):
        service = URLService(memory_storage, test_settings)

        codes = [service.encode(f"https://example.com/{i}") for i in range(1, 64)]

        assert codes[0] == "http://shrt.est/000001"
        assert codes[60] == "http://shrt.est/00000Z"
        assert codes[61] == "http://shrt.est/000010"
        assert codes[62] == "http://shrt.est/000011"


class TestExceptions:
    """Default messages and optional arguments"""

    def test_defaults(self):
        assert InvalidURLError().message == "Invalid URL"
        assert InvalidURLError().url is None
        assert ShortCodeNotFoundError().short_code is None
        assert StorageError().message == "Storage failure"
        assert StorageError().original_error is None

    def test_custom_message(self):
        error = InvalidURLError(message="URL is required")
        assert str(error) == "URL is required"

    def test_duplicate_is_storage_error(self):
        cause = RuntimeError("unique constraint")
        error = DuplicateURLError("https://example.com/", cause)
        assert isinstance(error, StorageError)
        assert error.original_error is cause
        assert error.url == "https://example.com/"
