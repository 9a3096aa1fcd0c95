"""
Minimal DOM surface the page-side components run against.

An embedding (a browser-hosted interpreter, a headless renderer, the test
suite's fake document) implements these two classes. The host is
responsible for calling ``on_load`` / ``on_error`` on script and iframe
elements once they are attached and the resource settles.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional


class Element(ABC):
    """A DOM element as seen by the ad loader and blocker detector"""

    tag_name: str
    id: str
    class_name: str
    style: Dict[str, str]
    on_load: Optional[Callable[[], None]]
    on_error: Optional[Callable[[], None]]

    @property
    @abstractmethod
    def inner_html(self) -> str:
        pass

    @inner_html.setter
    @abstractmethod
    def inner_html(self, html: str) -> None:
        """Replace all children with the given markup"""
        pass

    @abstractmethod
    def set_attribute(self, name: str, value: str) -> None:
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def append_child(self, child: "Element") -> None:
        pass

    @abstractmethod
    def remove(self) -> None:
        """Detach from the parent, if attached"""
        pass

    @abstractmethod
    def add_event_listener(self, event: str, handler: Callable[[], None]) -> None:
        pass

    # Layout, as reported after style and filter rules are applied
    @property
    @abstractmethod
    def offset_parent(self) -> Optional["Element"]:
        pass

    @property
    @abstractmethod
    def offset_width(self) -> int:
        pass

    @property
    @abstractmethod
    def offset_height(self) -> int:
        pass

    @property
    @abstractmethod
    def client_width(self) -> int:
        pass

    @property
    @abstractmethod
    def client_height(self) -> int:
        pass


class DomHost(ABC):
    """The page: element lookup and creation plus a few window hooks"""

    @property
    @abstractmethod
    def head(self) -> Element:
        pass

    @property
    @abstractmethod
    def body(self) -> Element:
        pass

    @abstractmethod
    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        pass

    @abstractmethod
    def create_element(self, tag_name: str) -> Element:
        pass

    @abstractmethod
    def is_privacy_browser(self) -> bool:
        """True when the browser advertises built-in ad blocking (e.g. Brave)"""
        pass

    @abstractmethod
    def reload(self) -> None:
        pass
