"""
Plugin contract

A plugin is any object with:
    id, name
    init(context: InitContext) -> {"parameters": [raw definitions], "state": object}
    run(context: RunContext) -> None

and optionally:
    restart(context: RunContext)
    on_resize(context: RunContext)

init is called on load, plugin switch, restart and resize. run is called
once per scheduler step with a parameter snapshot: Range parameters arrive
as their current number, Bounds as {"min", "max"}, numbers as numbers.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from gensynth.params.definitions import LimitContext


class InvalidPluginError(ValueError):
    """Raised when an object without callable init and run is activated."""
    pass


@dataclass
class InitContext:
    width: int
    height: int
    limit_context: LimitContext
    surface: Any = None


@dataclass
class RunContext:
    width: int
    height: int
    frame: int
    delta_ms: float
    timestamp: float
    params: Dict[str, Any]
    state: Any
    surface: Any = None
    clear: Optional[Callable[[], None]] = None


@dataclass
class InitResult:
    parameters: List[Mapping] = field(default_factory=list)
    state: Any = None

    @classmethod
    def from_value(cls, result) -> "InitResult":
        """Accept a dict, an InitResult, or None from plugin.init."""
        if isinstance(result, InitResult):
            return result
        if isinstance(result, Mapping):
            parameters = result.get("parameters")
            state = result.get("state")
        else:
            parameters = getattr(result, "parameters", None)
            state = getattr(result, "state", None)
        if not isinstance(parameters, (list, tuple)):
            parameters = []
        return cls(parameters=list(parameters), state=state if state is not None else {})


class Plugin:
    """Optional base class; plugins only need to satisfy the contract."""

    id = ""
    name = ""

    def init(self, context: InitContext) -> dict:
        raise NotImplementedError

    def run(self, context: RunContext) -> None:
        raise NotImplementedError


def validate_plugin(plugin) -> None:
    """
    Raises:
        InvalidPluginError: If plugin lacks callable init and run
    """
    if plugin is None:
        raise InvalidPluginError("Invalid plugin: None")
    for member in ("init", "run"):
        if not callable(getattr(plugin, member, None)):
            raise InvalidPluginError(f"Invalid plugin {plugin!r}: missing callable '{member}'")


def plugin_id(plugin) -> str:
    value = getattr(plugin, "id", "")
    return value if isinstance(value, str) else ""


def plugin_name(plugin) -> str:
    name = getattr(plugin, "name", "")
    return name if isinstance(name, str) and name else plugin_id(plugin)


def call_optional(plugin, hook: str, context) -> bool:
    """Call an optional hook (restart, on_resize) if the plugin defines it."""
    method = getattr(plugin, hook, None)
    if not callable(method):
        return False
    method(context)
    return True
