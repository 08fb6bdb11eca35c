"""Domain models for pallet slots, staged rows and archive entries.

Every record serializes to the camelCase JSON shape used by the local state
files and the shared remote row (``locationId``, ``orderNumber``...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SlotStatus(str, Enum):
    EMPTY = "EMPTY"
    JAUNE = "JAUNE"  # failed delivery, awaiting reprogramming
    BLANC = "BLANC"  # reprogrammed, awaiting dispatch
    ROUGE = "ROUGE"  # refused, cancellation pending
    BLEU = "BLEU"  # cancelled, store return
    ORANGE = "ORANGE"  # status error or leftover article

    @property
    def label(self) -> str:
        return STATUS_CONFIG[self]["label"]

    @property
    def description(self) -> str:
        return STATUS_CONFIG[self]["description"]

    @property
    def is_occupied(self) -> bool:
        return self is not SlotStatus.EMPTY


STATUS_CONFIG: dict[SlotStatus, dict[str, str]] = {
    SlotStatus.EMPTY: {"label": "DISPONIBLE", "description": "Emplacement vide"},
    SlotStatus.JAUNE: {"label": "FAILED", "description": "En attente de reprogrammation"},
    SlotStatus.BLANC: {"label": "DÉPART", "description": "Commande reprogrammée"},
    SlotStatus.ROUGE: {"label": "REFUS", "description": "En attente d'annulation"},
    SlotStatus.BLEU: {"label": "RETOUR ISOM", "description": "Retour magasin (annulé)"},
    SlotStatus.ORANGE: {"label": "ORDER", "description": "Erreur de statut ou article restant"},
}

IN_PROGRESS_STATUSES = frozenset({SlotStatus.JAUNE, SlotStatus.BLANC, SlotStatus.ROUGE, SlotStatus.BLEU})

NEW_DATE_SENTINEL = "NEW"


class Flux(str, Enum):
    """Delivery-flow classification of an order."""

    CDC = "CDC"
    LCD = "LCD"
    RET = "RET"
    REG = "REG"
    NONE = ""

    @classmethod
    def parse(cls, value: Any) -> "Flux":
        """Coerce any value to a flux; unknown values become ``NONE``."""
        if isinstance(value, Flux):
            return value
        if not isinstance(value, str):
            return cls.NONE
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.NONE


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    return "" if value is None else str(value)


def _optional_int(payload: dict, key: str) -> Optional[int]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    return int(value)


@dataclass(slots=True)
class Order:
    """An order occupying a slot."""

    id: str
    order_number: str = ""
    flux: Flux = Flux.NONE
    client_name: str = ""
    date: str = ""
    info: str = ""
    comment: str = ""
    tournee: Optional[str] = None
    created_at: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "orderNumber": self.order_number,
            "flux": self.flux.value,
            "clientName": self.client_name,
            "date": self.date,
            "info": self.info,
            "comment": self.comment,
        }
        if self.tournee is not None:
            payload["tournee"] = self.tournee
        if self.created_at is not None:
            payload["createdAt"] = self.created_at
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "Order":
        tournee = payload.get("tournee")
        return cls(
            id=_text(payload, "id"),
            order_number=_text(payload, "orderNumber"),
            flux=Flux.parse(payload.get("flux")),
            client_name=_text(payload, "clientName"),
            date=_text(payload, "date"),
            info=_text(payload, "info"),
            comment=_text(payload, "comment"),
            tournee=None if tournee is None else str(tournee),
            created_at=_optional_int(payload, "createdAt"),
        )


@dataclass(slots=True)
class PalletSlot:
    """One addressable pallet position and its current occupant."""

    location_id: str
    status: SlotStatus = SlotStatus.EMPTY
    order: Optional[Order] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"locationId": self.location_id, "status": self.status.value}
        if self.order is not None:
            payload["order"] = self.order.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "PalletSlot":
        status = SlotStatus(payload.get("status") or SlotStatus.EMPTY.value)
        order_payload = payload.get("order")
        order = Order.from_dict(order_payload) if order_payload and status.is_occupied else None
        return cls(location_id=_text(payload, "locationId"), status=status, order=order)


@dataclass(slots=True)
class SasItem:
    """A partially-filled order row waiting in the reception buffer."""

    id: str
    order_number: str = ""
    client_name: str = ""
    flux: Flux = Flux.NONE
    date: str = ""
    info: str = ""
    comment: str = ""
    created_at: Optional[int] = None

    @property
    def primary_number(self) -> str:
        return self.order_number

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "orderNumber": self.order_number,
            "clientName": self.client_name,
            "flux": self.flux.value,
            "date": self.date,
        }
        if self.info:
            payload["info"] = self.info
        if self.comment:
            payload["comment"] = self.comment
        if self.created_at is not None:
            payload["createdAt"] = self.created_at
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "SasItem":
        return cls(
            id=_text(payload, "id"),
            order_number=_text(payload, "orderNumber"),
            client_name=_text(payload, "clientName"),
            flux=Flux.parse(payload.get("flux")),
            date=_text(payload, "date"),
            info=_text(payload, "info"),
            comment=_text(payload, "comment"),
            created_at=_optional_int(payload, "createdAt"),
        )


@dataclass(slots=True)
class ReturnItem:
    """A store return waiting to be processed."""

    id: str
    return_number: str = ""
    client_name: str = ""
    date: str = ""
    created_at: Optional[int] = None
    # Never set here; carried so stored and remote payloads keep the field.
    archived_at: Optional[int] = None

    @property
    def primary_number(self) -> str:
        return self.return_number

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "returnNumber": self.return_number,
            "clientName": self.client_name,
            "date": self.date,
        }
        if self.created_at is not None:
            payload["createdAt"] = self.created_at
        if self.archived_at is not None:
            payload["archivedAt"] = self.archived_at
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "ReturnItem":
        return cls(
            id=_text(payload, "id"),
            return_number=_text(payload, "returnNumber"),
            client_name=_text(payload, "clientName"),
            date=_text(payload, "date"),
            created_at=_optional_int(payload, "createdAt"),
            archived_at=_optional_int(payload, "archivedAt"),
        )


@dataclass(frozen=True, slots=True)
class OrderArchive:
    """Completed occupancy cycle of one slot."""

    order_number: str
    client_name: str
    entry_time: int
    exit_time: int
    location_id: str
    flux: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "orderNumber": self.order_number,
            "clientName": self.client_name,
            "entryTime": self.entry_time,
            "exitTime": self.exit_time,
            "locationId": self.location_id,
        }
        if self.flux is not None:
            payload["flux"] = self.flux
        return payload

    @classmethod
    def from_dict(cls, payload: dict) -> "OrderArchive":
        flux = payload.get("flux")
        return cls(
            order_number=_text(payload, "orderNumber"),
            client_name=_text(payload, "clientName"),
            entry_time=int(payload.get("entryTime") or 0),
            exit_time=int(payload.get("exitTime") or 0),
            location_id=_text(payload, "locationId"),
            flux=None if flux is None else str(flux),
        )
