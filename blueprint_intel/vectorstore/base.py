"""Vector store RPC contract.

The retriever talks to the store only through named RPC calls, mirroring a
Postgres function exposed over a REST gateway: a call returns either rows in
``data`` or an ``error`` with a message, never both.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

MATCH_BLUEPRINT_CHUNKS = "match_blueprint_chunks"


@dataclass(frozen=True)
class RPCError:
    message: str
    code: str | None = None


@dataclass
class RPCResult:
    data: list[dict] | None = None
    error: RPCError | None = None


class VectorStore(ABC):
    """A store that answers similarity RPCs over blueprint chunks.

    ``match_blueprint_chunks`` params: ``query_embedding``, ``p_blueprint_id``,
    ``match_threshold``, ``match_count``, ``section_filter`` (str or None).
    Rows: ``id``, ``section``, ``field_path``, ``content``, ``content_type``,
    ``metadata``, ``similarity``.
    """

    @abstractmethod
    async def rpc(self, name: str, params: dict) -> RPCResult:
        ...
