"""Asset store: just enough to list, count and manage the assets a user owns."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ibuddy.models.asset import AssetRecord
from ibuddy.schemas.asset import Asset, AssetCreate

logger = logging.getLogger(__name__)


class AssetService:

    async def create_asset(self, db: AsyncSession, new_asset: AssetCreate) -> Asset:
        record = AssetRecord(
            id=str(uuid.uuid4()),
            name=new_asset.name,
            type=new_asset.type.value,
            owner_id=new_asset.owner_id,
        )
        db.add(record)
        await db.flush()
        logger.info("Asset %s created for %s", record.id, record.owner_id)
        return Asset.model_validate(record)

    async def get_asset_by_id(self, db: AsyncSession, asset_id: str) -> Optional[Asset]:
        record = await db.get(AssetRecord, asset_id)
        return Asset.model_validate(record) if record else None

    async def get_user_assets(self, db: AsyncSession, owner_id: str) -> List[Asset]:
        result = await db.execute(
            select(AssetRecord)
            .where(AssetRecord.owner_id == owner_id)
            .order_by(AssetRecord.name)
        )
        return [Asset.model_validate(record) for record in result.scalars().all()]

    async def get_user_asset_count(self, db: AsyncSession, owner_id: str) -> int:
        result = await db.execute(
            select(func.count()).select_from(AssetRecord).where(AssetRecord.owner_id == owner_id)
        )
        return result.scalar() or 0

    async def delete_asset(self, db: AsyncSession, asset_id: str) -> None:
        record = await db.get(AssetRecord, asset_id)
        if record is not None:
            await db.delete(record)
            await db.flush()
            logger.info("Asset %s deleted", asset_id)


asset_service = AssetService()
