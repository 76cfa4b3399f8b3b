"""
Export of email assets as single files or a ZIP archive.
"""

import io
import json
import logging
import re
import zipfile
from dataclasses import dataclass
from typing import Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from emailstudio.authorization import get_owned_email_asset, get_owned_email_assets
from emailstudio.constants import ExportFormat, OrganizationStrategy
from emailstudio.exceptions import PreconditionError, UnsupportedExportFormatError
from emailstudio.models import EmailAsset

logger = logging.getLogger(__name__)

BULK_EXPORT_FILENAME = "emails-export.zip"

FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9-]")

FORMAT_EXTENSIONS: Dict[str, str] = {
    ExportFormat.HTML: "html",
    ExportFormat.LIQUID: "liquid",
    ExportFormat.PLAIN_TEXT: "txt",
    ExportFormat.JSON: "json",
}

FORMAT_MIME_TYPES: Dict[str, str] = {
    ExportFormat.HTML: "text/html",
    ExportFormat.LIQUID: "text/plain",
    ExportFormat.PLAIN_TEXT: "text/plain",
    ExportFormat.JSON: "application/json",
}


@dataclass
class ExportedFile:
    content: str
    filename: str
    mime_type: str


def safe_name(value: str) -> str:
    """Every character outside [a-zA-Z0-9-] becomes an underscore."""
    return FILENAME_UNSAFE.sub("_", value)


def export_basename(asset: EmailAsset) -> str:
    audience_name = (asset.audience_snapshot or {}).get("name", "email")
    return safe_name(f"{audience_name}-{asset.version_strategy}-{asset.version_number}")


def render_export(asset: EmailAsset, export_format: str) -> ExportedFile:
    """Build the export body for one asset. Does not count the export."""
    if export_format not in ExportFormat.ALL:
        raise UnsupportedExportFormatError(export_format)

    if export_format == ExportFormat.HTML:
        content = asset.inlined_html
    elif export_format == ExportFormat.LIQUID:
        content = asset.liquid_html or asset.full_html
    elif export_format == ExportFormat.PLAIN_TEXT:
        content = asset.plain_text
    else:
        content = json.dumps(
            {
                "content": asset.content,
                "html": asset.html,
                "metadata": {
                    "email_type": asset.email_type,
                    "version_strategy": asset.version_strategy,
                    "audience": asset.audience_snapshot,
                    "brand": asset.brand_snapshot,
                },
            },
            indent=2,
            ensure_ascii=False,
        )

    return ExportedFile(
        content=content,
        filename=f"{export_basename(asset)}.{FORMAT_EXTENSIONS[export_format]}",
        mime_type=FORMAT_MIME_TYPES[export_format],
    )


def archive_path(asset: EmailAsset, filename: str, organization: str) -> str:
    if organization == OrganizationStrategy.BY_AUDIENCE:
        folder = safe_name((asset.audience_snapshot or {}).get("name", "email"))
        return f"{folder}/{filename}"
    if organization == OrganizationStrategy.BY_TYPE:
        return f"{safe_name(asset.email_type)}/{filename}"
    return filename


def _unique_path(path: str, used: set) -> str:
    if path not in used:
        return path
    stem, dot, extension = path.rpartition(".")
    counter = 2
    while f"{stem}_{counter}{dot}{extension}" in used:
        counter += 1
    return f"{stem}_{counter}{dot}{extension}"


class EmailExportService:
    def __init__(self, db: Session):
        self.db = db

    def export(self, asset_id: UUID, user_id: UUID, export_format: str) -> ExportedFile:
        """Export one asset and count it."""
        if export_format not in ExportFormat.ALL:
            raise UnsupportedExportFormatError(export_format)

        asset = get_owned_email_asset(asset_id, user_id, self.db)
        exported = render_export(asset, export_format)
        self._count_exports([asset.id])
        return exported

    def bulk_export(
        self,
        asset_ids: List[UUID],
        user_id: UUID,
        export_format: str = ExportFormat.HTML,
        organization: str = OrganizationStrategy.FLAT,
    ) -> bytes:
        """
        Export several assets into one ZIP archive.

        All assets must belong to the user; otherwise nothing is exported.
        """
        if not asset_ids:
            raise PreconditionError("Asset IDs array is required")
        if export_format not in ExportFormat.ALL:
            raise UnsupportedExportFormatError(export_format)
        if organization not in OrganizationStrategy.ALL:
            raise PreconditionError(f"Unsupported organization strategy: {organization}")

        assets = get_owned_email_assets(asset_ids, user_id, self.db)

        buffer = io.BytesIO()
        used_paths: set = set()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for asset in assets:
                exported = render_export(asset, export_format)
                path = _unique_path(archive_path(asset, exported.filename, organization), used_paths)
                used_paths.add(path)
                archive.writestr(path, exported.content)

        self._count_exports([asset.id for asset in assets])
        logger.info(f"Bulk exported {len(assets)} email assets as {export_format} ({organization})")
        return buffer.getvalue()

    def _count_exports(self, asset_ids: List[UUID]) -> None:
        # Atomic increment in SQL
        self.db.query(EmailAsset).filter(EmailAsset.id.in_(asset_ids)).update(
            {EmailAsset.export_count: EmailAsset.export_count + 1},
            synchronize_session=False,
        )
        self.db.commit()
