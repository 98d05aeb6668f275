# app/adapters/repos/properties.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.address import require_address_identity
from ...domain.errors import ConflictError
from ...domain.parsing import parse_date, parse_tags, to_int
from ...domain.types import PropertySnapshot
from ...models import Property


def snapshot_from_row(row: Property) -> PropertySnapshot:
    return PropertySnapshot(
        id=row.id,
        rent=row.rent,
        city=row.city,
        region=row.state,
        amenities=parse_tags(row.amenities or []),
        bedrooms=row.bedrooms,
        square_feet=row.square_feet,
        available_date=row.available_date,
    )


class PropertyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, property_id: int) -> Property | None:
        q = select(Property).where(Property.id == property_id)
        return (await self.session.execute(q)).scalars().first()

    async def list_properties(self, *, available: bool | None = None) -> list[Property]:
        q = select(Property).order_by(Property.id.asc())
        if available is not None:
            q = q.where(Property.available.is_(available))
        return list((await self.session.execute(q)).scalars().all())

    async def get_by_address(self, payload: dict[str, Any]) -> Property | None:
        addr = require_address_identity(payload)
        q = select(Property).where(
            Property.address == addr.address,
            Property.city == addr.city,
            Property.state == addr.state,
            Property.zip_code == addr.zip_code,
        )
        return (await self.session.execute(q)).scalars().first()

    async def create(self, payload: dict[str, Any]) -> Property:
        if await self.get_by_address(payload) is not None:
            raise ConflictError("a property with this address already exists")
        prop = Property()
        self._apply(prop, payload)
        prop.created_at = datetime.utcnow()
        self.session.add(prop)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # lost a race with a concurrent create of the same address
            raise ConflictError("a property with this address already exists") from e
        return prop

    async def upsert(self, payload: dict[str, Any]) -> tuple[Property, bool]:
        """
        Upsert keyed on the canonical address. Returns (property, was_created).
        """
        prop = await self.get_by_address(payload)
        was_created = prop is None
        if prop is None:
            prop = Property(created_at=datetime.utcnow())
            self.session.add(prop)
        self._apply(prop, payload)
        await self.session.flush()
        return prop, was_created

    @staticmethod
    def _apply(prop: Property, payload: dict[str, Any]) -> None:
        addr = require_address_identity(payload)
        prop.address = addr.address
        prop.city = addr.city
        prop.state = addr.state
        prop.zip_code = addr.zip_code

        prop.landlord_id = payload.get("landlord_id", prop.landlord_id)
        prop.title = (payload.get("title") or prop.title or addr.address).strip()
        prop.description = payload.get("description", prop.description)

        prop.rent = to_int(payload.get("rent")) or 0
        prop.bedrooms = to_int(payload.get("bedrooms")) or 0
        bathrooms = to_int(payload.get("bathrooms"))
        prop.bathrooms = 1 if bathrooms is None else bathrooms
        prop.square_feet = to_int(payload.get("square_feet"))

        prop.amenities = sorted(parse_tags(payload.get("amenities") or []))
        prop.available = bool(payload.get("available", True))
        prop.available_date = parse_date(payload.get("available_date"), field="availableDate")
        prop.updated_at = datetime.utcnow()
