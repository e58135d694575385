"""Untrusted component execution: the capability a preview surface runs generated code through.

Generated UI code has to execute for the preview to exist, so it is confined
to an implementation of ``ComponentRuntime``. The pipeline never evaluates
anything itself; it only hands source and script text across this interface
and reads back rendered markup.
"""

from abc import ABC, abstractmethod


class LibrariesNotLoaded(RuntimeError):
    """The runtime's rendering library or transpiler is not available yet."""


class ComponentError(RuntimeError):
    """Transpilation or execution of generated code failed."""


class ComponentRuntime(ABC):

    @abstractmethod
    def start_loading(self) -> None:
        """Begin acquiring the rendering library and transpiler; must not block on completion."""
        raise NotImplementedError

    @abstractmethod
    def libraries_ready(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def transpile(self, source: str) -> str:
        """Return executable script for component source. Raises ComponentError on syntax errors."""
        raise NotImplementedError

    @abstractmethod
    def execute(self, script: str) -> None:
        """Run script in the surface's global scope. Raises ComponentError if it throws."""
        raise NotImplementedError

    @abstractmethod
    def reset_slot(self, slot: str) -> None:
        """Remove any value left in the global slot by an earlier payload."""
        raise NotImplementedError

    @abstractmethod
    def assign_slot(self, slot: str, identifier: str) -> None:
        """If slot is still unset, store the global named identifier into it; no-op if undefined."""
        raise NotImplementedError

    @abstractmethod
    def slot_is_callable(self, slot: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def clear_mount(self) -> None:
        """Empty the mount point, discarding previously rendered output."""
        raise NotImplementedError

    @abstractmethod
    def mount(self, slot: str) -> str:
        """Render the slot's component with no props into a fresh container; return its markup."""
        raise NotImplementedError
