"""
Test configuration and fixtures for the gated link shortener.
This centralizes all test setup, making individual tests clean.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from gatelink_app.adkit.dom import DomHost, Element
from gatelink_app.cache.strategies import InMemoryCache
from gatelink_app.database.connection import Base, get_db
from gatelink_app.dependencies import get_cache, get_captcha_verifier
from gatelink_app.services.captcha import CaptchaVerifier

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeCaptchaVerifier(CaptchaVerifier):
    """Accepts exactly the tokens it is told to accept"""

    def __init__(self, valid_tokens=("valid-token",)):
        self.valid_tokens = set(valid_tokens)
        self.calls: List[Optional[str]] = []

    def verify(self, token: Optional[str]) -> bool:
        self.calls.append(token)
        return token in self.valid_tokens


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def cache():
    return InMemoryCache()


@pytest.fixture(scope="function")
def captcha_verifier():
    return FakeCaptchaVerifier()


@pytest.fixture(scope="function")
def client(db_session, cache, captcha_verifier):
    """
    Create a test client with database, cache and CAPTCHA dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_captcha_verifier] = lambda: captcha_verifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Fake DOM for the page-side components
# ---------------------------------------------------------------------------

# What happens when a script/iframe with a given src is attached:
# "load", "error", "hang" (never settles) or a callable run before "load"
Behaviour = Union[str, Callable[["FakeDomHost"], None]]


class FakeElement(Element):
    def __init__(self, host: "FakeDomHost", tag_name: str):
        self.host = host
        self.tag_name = tag_name
        self.id = ""
        self.class_name = ""
        self.style: Dict[str, str] = {}
        self.attributes: Dict[str, str] = {}
        self.children: List["FakeElement"] = []
        self.parent: Optional["FakeElement"] = None
        self.listeners: Dict[str, List[Callable[[], None]]] = {}
        self.on_load = None
        self.on_error = None
        self._html = ""

    @property
    def inner_html(self) -> str:
        return self._html + "".join(
            f"<{child.tag_name}>{child.inner_html}</{child.tag_name}>" for child in self.children
        )

    @inner_html.setter
    def inner_html(self, html: str) -> None:
        for child in list(self.children):
            child.remove()
        self._html = html

    def set_attribute(self, name, value):
        self.attributes[name] = value

    def get_attribute(self, name):
        return self.attributes.get(name)

    def append_child(self, child):
        child.remove()
        child.parent = self
        self.children.append(child)
        if self.is_connected:
            self.host.attached(child)

    def remove(self):
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def add_event_listener(self, event, handler):
        self.listeners.setdefault(event, []).append(handler)

    def click(self):
        for handler in self.listeners.get("click", []):
            handler()

    @property
    def is_connected(self) -> bool:
        node = self
        while node.parent is not None:
            node = node.parent
        return node is self.host.root

    @property
    def _collapsed(self) -> bool:
        return self.host.hide_bait and "adsbox" in self.class_name.split()

    @property
    def offset_parent(self):
        if not self.is_connected or self._collapsed:
            return None
        return self.parent

    @property
    def offset_width(self):
        return 0 if self._collapsed else 1

    @property
    def offset_height(self):
        return 0 if self._collapsed else 1

    @property
    def client_width(self):
        return 0 if self._collapsed else 1

    @property
    def client_height(self):
        return 0 if self._collapsed else 1


class FakeDomHost(DomHost):
    def __init__(self, container_ids=("ad-banner", "social-bar")):
        self.root = FakeElement(self, "html")
        self._head = FakeElement(self, "head")
        self._body = FakeElement(self, "body")
        self.root.append_child(self._head)
        self.root.append_child(self._body)
        for container_id in container_ids:
            container = FakeElement(self, "div")
            container.id = container_id
            self._body.append_child(container)

        self.behaviours: Dict[str, Behaviour] = {}
        self.requests: List[str] = []
        self.hide_bait = False
        self.privacy_browser = False
        self.reload_count = 0

    @property
    def head(self):
        return self._head

    @property
    def body(self):
        return self._body

    def get_element_by_id(self, element_id):
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.id == element_id:
                return node
            stack.extend(node.children)
        return None

    def create_element(self, tag_name):
        return FakeElement(self, tag_name)

    def is_privacy_browser(self):
        return self.privacy_browser

    def reload(self):
        self.reload_count += 1

    def attached(self, element: FakeElement) -> None:
        """Simulate the network for scripts and iframes on the next loop turn"""
        if element.tag_name not in ("script", "iframe"):
            return
        src = element.get_attribute("src")
        self.requests.append(src)
        behaviour = self.behaviours.get(src, "load")
        loop = asyncio.get_running_loop()

        def fire(handler_name):
            handler = getattr(element, handler_name)
            if handler is not None:
                handler()

        if behaviour == "load":
            loop.call_soon(fire, "on_load")
        elif behaviour == "error":
            loop.call_soon(fire, "on_error")
        elif behaviour == "hang":
            pass
        else:
            def run_then_load():
                behaviour(self)
                fire("on_load")
            loop.call_soon(run_then_load)

    def attempts(self, src: str) -> int:
        return self.requests.count(src)


@pytest.fixture
def dom():
    return FakeDomHost()
