"""Pydantic models for board records, snapshots and operator requests."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.domain import Flux, Order, OrderArchive, PalletSlot, ReturnItem, SasItem, SlotStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OrderModel(_CamelModel):
    id: str = ""
    order_number: str = Field("", alias="orderNumber")
    flux: Flux = Flux.NONE
    client_name: str = Field("", alias="clientName")
    date: str = ""
    info: str = ""
    comment: str = ""
    tournee: Optional[str] = None
    created_at: Optional[int] = Field(None, alias="createdAt")

    @field_validator("flux", mode="before")
    @classmethod
    def _parse_flux(cls, value: Any) -> Flux:
        return Flux.parse(value)

    @field_validator("order_number", "client_name", "date", "info", "comment", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_domain(self) -> Order:
        return Order.from_dict(self.model_dump(by_alias=True, exclude_none=True, mode="json"))


class SlotModel(_CamelModel):
    location_id: str = Field("", alias="locationId")
    status: SlotStatus
    order: Optional[OrderModel] = None
    label: Optional[str] = None

    @model_validator(mode="after")
    def _check_order_matches_status(self) -> "SlotModel":
        if self.status is SlotStatus.EMPTY:
            self.order = None
        elif self.order is None:
            raise ValueError(f"Slot {self.location_id or '?'} is {self.status.value} but has no order.")
        return self

    def to_domain(self, location_id: str | None = None) -> PalletSlot:
        return PalletSlot(
            location_id=location_id or self.location_id,
            status=self.status,
            order=self.order.to_domain() if self.order else None,
        )

    @classmethod
    def from_domain(cls, slot: PalletSlot) -> "SlotModel":
        model = cls.model_validate(slot.to_dict())
        model.label = slot.status.label
        return model


class SasItemModel(_CamelModel):
    id: str
    order_number: str = Field("", alias="orderNumber")
    client_name: str = Field("", alias="clientName")
    flux: Flux = Flux.NONE
    date: str = ""
    info: str = ""
    comment: str = ""
    created_at: Optional[int] = Field(None, alias="createdAt")

    @field_validator("flux", mode="before")
    @classmethod
    def _parse_flux(cls, value: Any) -> Flux:
        return Flux.parse(value)

    @field_validator("order_number", "client_name", "date", "info", "comment", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_domain(self) -> SasItem:
        return SasItem.from_dict(self.model_dump(by_alias=True, exclude_none=True, mode="json"))


class ReturnItemModel(_CamelModel):
    id: str
    return_number: str = Field("", alias="returnNumber")
    client_name: str = Field("", alias="clientName")
    date: str = ""
    created_at: Optional[int] = Field(None, alias="createdAt")
    archived_at: Optional[int] = Field(None, alias="archivedAt")

    @field_validator("return_number", "client_name", "date", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_domain(self) -> ReturnItem:
        return ReturnItem.from_dict(self.model_dump(by_alias=True, exclude_none=True, mode="json"))


class ArchiveModel(_CamelModel):
    order_number: str = Field(..., alias="orderNumber")
    client_name: str = Field("", alias="clientName")
    entry_time: int = Field(..., alias="entryTime")
    exit_time: int = Field(..., alias="exitTime")
    flux: Optional[str] = None
    location_id: str = Field("", alias="locationId")

    def to_domain(self) -> OrderArchive:
        return OrderArchive.from_dict(self.model_dump(by_alias=True, exclude_none=True, mode="json"))


class BoardSnapshot(_CamelModel):
    """Shape of the shared remote row payload; every part is optional."""

    data: Optional[dict[str, SlotModel]] = None
    sas: Optional[list[SasItemModel]] = None
    returns: Optional[list[ReturnItemModel]] = None
    archives: Optional[list[ArchiveModel]] = None
    last_updated: Optional[int] = Field(None, alias="lastUpdated")


class SaveSlotRequest(_CamelModel):
    status: SlotStatus
    order: Optional[OrderModel] = None


class PickFromSasRequest(_CamelModel):
    sas_item_id: str = Field(..., alias="sasItemId")
    status: SlotStatus = SlotStatus.JAUNE


class CellEditRequest(_CamelModel):
    index: int = Field(..., ge=0)
    field: str
    value: str = ""


class ClipboardModel(_CamelModel):
    source_id: str = Field(..., alias="sourceId")
    status: SlotStatus
    is_cutting: bool = Field(..., alias="isCutting")
    order: OrderModel


class ReturnTransferResponse(_CamelModel):
    sas: list[SasItemModel]
    returns: list[ReturnItemModel]


class SyncStatusModel(_CamelModel):
    dirty: bool
    remote_enabled: bool = Field(..., alias="remoteEnabled")
    subscribed: bool
    last_saved_at: Optional[int] = Field(None, alias="lastSavedAt")
    last_remote_applied_at: Optional[int] = Field(None, alias="lastRemoteAppliedAt")


class SaveResultModel(_CamelModel):
    local_saved: bool = Field(..., alias="localSaved")
    remote_synced: bool = Field(..., alias="remoteSynced")
    saved_at: int = Field(..., alias="savedAt")


class ThemeModel(_CamelModel):
    theme: Literal["dark", "light"]


class ScanResponse(_CamelModel):
    item: SasItemModel
    complete: bool
