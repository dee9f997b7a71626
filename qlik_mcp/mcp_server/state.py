from __future__ import annotations

from typing import Optional

from qlik_mcp.mcp_server.components import ServerComponents

components: Optional[ServerComponents] = None


def set_components(value: Optional[ServerComponents]) -> None:
    global components
    components = value


def require_components() -> None:
    if components is None:
        raise RuntimeError("Server components have not been initialised")


def ensure_components() -> ServerComponents:
    require_components()
    assert components is not None
    return components
