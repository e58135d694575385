"""Root test configuration: runtime artifact cleanup and in-process preview doubles"""

import re
from dataclasses import dataclass
from pathlib import Path

import pytest

from componentize.preview.runtime import ComponentError, ComponentRuntime, LibrariesNotLoaded
from componentize.protocol.loop import EventLoop


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["componentize.db", "test.db"]

OPEN_TAG_RE = re.compile(r'<([A-Za-z][\w.]*)[^>]*?(?<!/)>')
CLOSE_TAG_RE = re.compile(r'</([A-Za-z][\w.]*)\s*>')
RETURN_RE = re.compile(r'return\s*\(?\s*(<.*?>)\s*\)?\s*;', re.DOTALL)
THROW_RE = re.compile(r'throw new Error\("([^"]*)"\)')
SLOT_FUNCTION_RE = re.compile(r'window\.(\w+)\s*=\s*function\s*(\w*)\s*\(')
SLOT_VALUE_RE = re.compile(r'window\.(\w+)\s*=\s*(\w+)')
FUNCTION_RE = re.compile(r'function\s+(\w+)\s*\(')


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()


@dataclass
class FakeComponent:
    name: str
    markup: str

    def __call__(self) -> str:
        return self.markup


class FakeRuntime(ComponentRuntime):
    """In-process runtime: 'transpiles' by checking tag balance and 'executes' by reading
    function declarations and slot assignments out of the script text."""

    def __init__(self, ready: bool = True):
        self.ready = ready
        self.loading_started = False
        self.globals: dict = {}
        self.mounted: list[str] = []
        self.transpiled: list[str] = []
        self.executed: list[str] = []

    def finish_loading(self) -> None:
        self.ready = True

    def start_loading(self) -> None:
        self.loading_started = True

    def libraries_ready(self) -> bool:
        return self.ready

    def transpile(self, source: str) -> str:
        if not self.ready:
            raise LibrariesNotLoaded("Babel missing")
        if len(OPEN_TAG_RE.findall(source)) != len(CLOSE_TAG_RE.findall(source)):
            raise ComponentError("unknown: Unterminated JSX contents. (1:40)")
        self.transpiled.append(source)
        return source

    def execute(self, script: str) -> None:
        self.executed.append(script)
        if m := THROW_RE.search(script):
            raise ComponentError(m.group(1))
        returned = RETURN_RE.search(script)
        markup = returned.group(1) if returned else ""
        for name in FUNCTION_RE.findall(script):
            self.globals[name] = FakeComponent(name, markup)
        if m := SLOT_FUNCTION_RE.search(script):
            self.globals[m.group(1)] = FakeComponent(m.group(2) or "Anonymous", markup)
        elif m := SLOT_VALUE_RE.search(script):
            self.globals[m.group(1)] = self.globals.get(m.group(2), m.group(2))

    def reset_slot(self, slot: str) -> None:
        self.globals.pop(slot, None)

    def assign_slot(self, slot: str, identifier: str) -> None:
        if not self.globals.get(slot) and identifier in self.globals:
            self.globals[slot] = self.globals[identifier]

    def slot_is_callable(self, slot: str) -> bool:
        return callable(self.globals.get(slot))

    def clear_mount(self) -> None:
        self.mounted.clear()

    def mount(self, slot: str) -> str:
        markup = self.globals[slot]()
        self.mounted.append(markup)
        return markup


class FakeClock:
    """Seconds-based clock whose sleep() just advances time."""

    def __init__(self):
        self.ms = 0

    def __call__(self) -> float:
        return self.ms / 1000.0

    def sleep(self, seconds: float) -> None:
        self.ms += round(seconds * 1000)


@pytest.fixture(name="runtime")
def runtime_fixture():
    return FakeRuntime()


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="loop")
def loop_fixture(clock):
    return EventLoop(clock=clock, sleep=clock.sleep)
