"""Runtime capability registry addressing for virtual modules."""

import json

from ..core.config import GLOBAL_PATH_PATTERN, IDENTIFIER_PATTERN


class CapabilityRegistry:
    """Renders the runtime expression that provides a virtual module.
    
    The host runtime exposes every virtual module as a property of one
    registry object; ``runtime_global`` is the expression naming that
    object (``W`` by default).
    """
    
    def __init__(self, runtime_global: str = "W"):
        if not GLOBAL_PATH_PATTERN.match(runtime_global):
            raise ValueError(f"Invalid runtime global expression: {runtime_global!r}")
        self.runtime_global = runtime_global
    
    def access(self, module_id: str) -> str:
        """Return the property access expression for a module id."""
        if IDENTIFIER_PATTERN.match(module_id):
            return f"{self.runtime_global}.{module_id}"
        return f"{self.runtime_global}[{json.dumps(module_id)}]"
