"""
Client source adapters.

JsonClientSource reads an exported client list from disk; StaticClientSource
wraps records the host already holds in memory.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..domain.models import ClientRecord, ClientDataError
from ..ports.client_port import ClientSourcePort

logger = logging.getLogger(__name__)

# Accepted spellings for each field (camelCase export, snake_case, legacy pt-BR columns)
FIELD_ALIASES = {
    "name": ("name", "nome"),
    "referred_by": ("referredBy", "referred_by", "indicado_por"),
    "ltv": ("ltv",),
    "created_at": ("createdAt", "created_at"),
    "city": ("city", "cidade"),
    "handle": ("handle", "instagram"),
    "email": ("email",),
}


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _pick(data: Dict[str, Any], key: str) -> Any:
    for alias in FIELD_ALIASES[key]:
        if alias in data and data[alias] is not None:
            return data[alias]
    return None


def _coerce_ltv(value: Any) -> float:
    try:
        ltv = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    return ltv if ltv > 0 else 0.0


def record_from_dict(data: Dict[str, Any]) -> ClientRecord:
    """
    Build a ClientRecord from a loosely-typed dict.

    Raises:
        ClientDataError: missing id or unparsable createdAt
    """
    if data.get("id") in (None, ""):
        raise ClientDataError(f"Client record without id: {data!r}")
    client_id = str(data["id"])

    referred_by = _pick(data, "referred_by")
    if referred_by in ("", None):
        referred_by = None
    else:
        referred_by = str(referred_by)

    raw_created = _pick(data, "created_at")
    if raw_created is None:
        created_at = datetime.now(timezone.utc)
    else:
        try:
            created_at = parse_timestamp(raw_created)
        except ValueError as e:
            raise ClientDataError(
                f"Client {client_id}: invalid createdAt {raw_created!r}"
            ) from e

    name = _pick(data, "name")
    return ClientRecord(
        id=client_id,
        name=str(name) if name is not None else client_id,
        referred_by=referred_by,
        ltv=_coerce_ltv(_pick(data, "ltv")),
        created_at=created_at,
        city=_pick(data, "city"),
        handle=_pick(data, "handle"),
        email=_pick(data, "email"),
    )


class StaticClientSource(ClientSourcePort):
    """In-memory client source."""

    def __init__(self, records: Iterable[Union[ClientRecord, Dict[str, Any]]]):
        self._records = [
            r if isinstance(r, ClientRecord) else record_from_dict(r)
            for r in records
        ]

    def load_clients(self) -> List[ClientRecord]:
        return list(self._records)

    @property
    def description(self) -> str:
        return f"{len(self._records)} in-memory clients"


class JsonClientSource(ClientSourcePort):
    """
    Client list stored as JSON.

    The file holds either a list of records or an object with a
    "clients" list.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_clients(self) -> List[ClientRecord]:
        """
        Read and parse the file.

        Raises:
            FileNotFoundError: the file does not exist
            ClientDataError: the payload or a record is malformed
        """
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as e:
                raise ClientDataError(f"{self.path}: not valid JSON ({e})") from e

        rows: Optional[List[Any]]
        if isinstance(payload, dict):
            rows = payload.get("clients")
        else:
            rows = payload
        if not isinstance(rows, list):
            raise ClientDataError(f"{self.path}: expected a list of clients")

        records = []
        for row in rows:
            if not isinstance(row, dict):
                raise ClientDataError(f"{self.path}: client entry is not an object: {row!r}")
            records.append(record_from_dict(row))

        logger.info(f"Loaded {len(records)} clients from {self.path}")
        return records

    @property
    def description(self) -> str:
        return str(self.path)
