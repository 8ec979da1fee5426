"""Protocol for the graph store query boundary."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol


class GraphStoreClient(Protocol):
    """Executes one openCypher statement and returns decoded rows.

    Implementations raise ``StoreError`` for connectivity or execution
    failures; nothing else may escape.
    """

    async def execute(
        self,
        query: str,
        parameters: Mapping[str, Any] | None = None,
        columns: Sequence[str] = ("result",),
    ) -> list[dict[str, Any]]:
        """Run ``query`` and return one dict per row keyed by ``columns``."""
        ...
