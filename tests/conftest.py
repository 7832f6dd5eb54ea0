import pytest

from tests.fixtures.mock_clients import FlexibleFallback, FlexibleGateway
from tests.fixtures.responses import optimizer_payload


@pytest.fixture
def optimizer():
    """Standard OpenAI gpt-5-mini Optimizer for testing."""
    from models.api_models import Optimizer
    return Optimizer.model_validate(optimizer_payload())


@pytest.fixture
def google_optimizer():
    """Optimizer targeting Gemini."""
    from models.api_models import Optimizer
    return Optimizer.model_validate(optimizer_payload(provider="Google", model="gemini-2.5-flash"))


@pytest.fixture
def usage_store(tmp_path, monkeypatch):
    """Fresh SQLite usage store installed as the global instance."""
    from utils.usage_store import UsageStore
    store = UsageStore(db_path=str(tmp_path / "usage.db"))
    monkeypatch.setattr("utils.usage_store._usage_store", store)
    return store


@pytest.fixture
def gateway():
    return FlexibleGateway(responses=[{"text": "Generated tagline"}])


@pytest.fixture
def fallback():
    return FlexibleFallback()


@pytest.fixture
def fake_verify_token(monkeypatch):
    """Accept 'admin-token' and 'user-token'; reject everything else."""
    from auth import AuthError, CallerIdentity

    async def verify(token):
        if token == "admin-token":
            return CallerIdentity(uid="admin-1", role="admin")
        if token == "user-token":
            return CallerIdentity(uid="user-1", role="member")
        raise AuthError("Token rejected (status 400)")

    monkeypatch.setattr("auth.verify_token", verify)
    return verify


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def user_headers():
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
def configured_app(monkeypatch, gateway, fallback, usage_store, fake_verify_token):
    """The service app with provider backends, auth and storage replaced by fakes."""
    from fastapi.testclient import TestClient
    from main import app

    for module in ("routes.generate", "routes.playground"):
        monkeypatch.setattr(f"{module}.ModelGateway", lambda: gateway)
        monkeypatch.setattr(f"{module}.OpenAIChatFallback", lambda: fallback)

    with TestClient(app) as client:
        yield client
