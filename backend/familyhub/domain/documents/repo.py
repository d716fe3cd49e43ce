"""Postgres access for documents and categories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import asyncpg

from familyhub.domain.common.repository import FilterSpec, TableRepository, TableSpec
from familyhub.domain.documents import models

DOCUMENTS = TableSpec(
	table="documents",
	model=models.Document,
	alias="d",
	columns=("title", "description", "file_path", "file_type", "file_size", "category_id", "uploaded_by"),
	updatable=("title", "description", "file_path", "file_type", "file_size", "category_id"),
	filters={"category_id": FilterSpec("category_id"), "uploaded_by": FilterSpec("uploaded_by")},
	search_columns=("title", "description"),
	select_extra=", c.name AS category_name, u.name AS uploader_name",
	joins=" LEFT JOIN document_categories c ON c.id = d.category_id LEFT JOIN users u ON u.id = d.uploaded_by",
)

CATEGORIES = TableSpec(
	table="document_categories",
	model=models.DocumentCategory,
	alias="c",
	columns=("name", "description", "created_by"),
	updatable=("name", "description"),
	search_columns=("name", "description"),
	order_by="name ASC",
)


class DocumentRepository(TableRepository[models.Document]):
	spec = DOCUMENTS


class CategoryRepository(TableRepository[models.DocumentCategory]):
	spec = CATEGORIES

	async def delete(self, entity_id: UUID | str, *, conn: Optional[asyncpg.Connection] = None) -> bool:
		"""Detach member documents, then drop the category, in one transaction."""
		if conn is None:
			async with self.transaction() as tx:
				return await self.delete(entity_id, conn=tx)
		await conn.execute(
			"UPDATE documents SET category_id = NULL, updated_at = $2 WHERE category_id = $1",
			entity_id,
			datetime.now(timezone.utc),
		)
		return await super().delete(entity_id, conn=conn)
