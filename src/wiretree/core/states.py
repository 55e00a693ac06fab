"""State registration and the per-widget finite-state machine."""

from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
    overload,
)

from wiretree.core.exceptions import UnknownStateError

F = TypeVar("F", bound=Callable[..., Any])

StartState = Union[str, Sequence[str]]


@overload
def state(fn: F) -> F: ...


@overload
def state(fn: str) -> Callable[[F], F]: ...


def state(fn: Any = None) -> Any:
    """Mark a widget method as a state handler.

    Usage:
        @state
        def idle(self):
            return self.render()

        @state("eating")
        def eat(self):
            ...
    """

    def mark(func: F, name: Optional[str] = None) -> F:
        setattr(func, "_wiretree_state", name or func.__name__)
        return func

    if isinstance(fn, str):
        return lambda func: mark(func, fn)
    if fn is None:
        return mark
    return mark(fn)


class TransitionTable(Mapping[str, str]):
    """Read-only mapping from a state name to its conventional next state."""

    def __init__(self, transitions: Optional[Mapping[Any, Any]] = None) -> None:
        table = {str(k): str(v) for k, v in (transitions or {}).items()}
        self._table: Mapping[str, str] = MappingProxyType(table)

    def __getitem__(self, key: str) -> str:
        return self._table[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def next_state(self, current: Optional[str]) -> Optional[str]:
        if current is None:
            return None
        return self._table.get(str(current))

    def __repr__(self) -> str:
        return f"TransitionTable({dict(self._table)!r})"


def collect_states(cls: Type[Any]) -> Mapping[str, Callable[..., Any]]:
    """Build the closed state registry for a widget class (inherited included)."""
    attrs: Dict[str, str] = {}
    # Walk base-first so subclasses win; an undecorated override of a state
    # method is resolved by getattr below and stays a state.
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            name = getattr(value, "_wiretree_state", None)
            if name is not None:
                attrs[name] = attr
    return MappingProxyType({name: getattr(cls, attr) for name, attr in attrs.items()})


def validate_transitions(
    table: TransitionTable, states: Mapping[str, Any], owner: str
) -> None:
    for source, target in table.items():
        if source not in states:
            raise UnknownStateError(owner, source)
        if target not in states:
            raise UnknownStateError(owner, target)


def first_state(start_state: StartState) -> str:
    """Return the state that opens a (possibly multi-state) start configuration."""
    if isinstance(start_state, str):
        return start_state
    return str(start_state[0])


class StateMachine:
    """Decides what a widget runs next.

    The machine only reads the class's transition table, so repeated queries with
    the same current state always give the same answer.
    """

    def __init__(self, transitions: TransitionTable, start_state: StartState):
        self.transitions = transitions
        self.start_state = start_state

    def next_state(self, current: Optional[str]) -> Optional[str]:
        # A widget that never ran has no current state and opens with its start state.
        if current is None:
            return first_state(self.start_state)
        return self.transitions.next_state(current)

    def resolve(self, current: Optional[str]) -> str:
        """Next state for ``current``, falling back to the start state."""
        return self.next_state(current) or first_state(self.start_state)
