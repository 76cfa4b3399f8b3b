"""
Editing, approval and undo for generated email assets.

Every content change pushes the HTML being replaced onto the asset's edit
history (newest last, bounded by settings.edit_history_limit) and moves the
asset to 'edited'. Approval never touches history.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from emailstudio.authorization import get_owned_email_asset
from emailstudio.config import Settings
from emailstudio.constants import AssetStatus, EditType, MAX_PROMPT_LENGTH
from emailstudio.exceptions import GenerationError, NothingToUndoError, PreconditionError
from emailstudio.models import EmailAsset
from emailstudio.services.email_document import DocumentRenderer, extract_html_from_response
from emailstudio.services.email_prompts import build_edit_prompt, build_edit_system_prompt
from emailstudio.services.llm_service import TextGenerator

logger = logging.getLogger(__name__)


@dataclass
class AiEditResult:
    modified_html: str
    changes: List[str] = field(default_factory=list)
    tokens_used: int = 0


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EmailEditorService:
    def __init__(
        self,
        db: Session,
        renderer: DocumentRenderer,
        settings: Settings,
        generator: Optional[TextGenerator] = None,
    ):
        self.db = db
        self.renderer = renderer
        self.settings = settings
        self.generator = generator

    def list_for_campaign(self, campaign_id: UUID, user_id: UUID) -> List[EmailAsset]:
        return self.db.query(EmailAsset).filter(
            EmailAsset.campaign_id == campaign_id,
            EmailAsset.user_id == user_id,
        ).order_by(EmailAsset.created_at.desc(), EmailAsset.version_number.asc()).all()

    def get(self, asset_id: UUID, user_id: UUID) -> EmailAsset:
        return get_owned_email_asset(asset_id, user_id, self.db)

    def update(
        self,
        asset_id: UUID,
        user_id: UUID,
        html: str,
        edit_type: str = EditType.MANUAL,
        prompt: Optional[str] = None,
    ) -> EmailAsset:
        """Replace the asset's HTML, keeping the previous HTML in history."""
        if not html or not html.strip():
            raise PreconditionError("HTML content is required")
        if edit_type not in (EditType.MANUAL, EditType.AI_ASSISTED):
            raise PreconditionError("Valid edit type is required (manual or ai_assisted)")
        if prompt and len(prompt) > MAX_PROMPT_LENGTH:
            raise PreconditionError(f"Prompt must be at most {MAX_PROMPT_LENGTH} characters")

        asset = get_owned_email_asset(asset_id, user_id, self.db)

        entry = {
            "timestamp": _now().isoformat(),
            "edit_type": edit_type,
            "prompt": prompt,
            "previous_html": asset.full_html,
        }
        # New list so the JSON column is flagged dirty
        history = list(asset.edit_history or []) + [entry]
        asset.edit_history = history[-self.settings.edit_history_limit:]

        self._apply_html(asset, html)
        self.db.commit()
        self.db.refresh(asset)
        logger.info(f"Updated email asset {asset.id} ({edit_type}), history size {len(asset.edit_history)}")
        return asset

    def approve(self, asset_id: UUID, user_id: UUID) -> EmailAsset:
        asset = get_owned_email_asset(asset_id, user_id, self.db)
        asset.status = AssetStatus.APPROVED
        self.db.commit()
        self.db.refresh(asset)
        return asset

    def undo(self, asset_id: UUID, user_id: UUID) -> EmailAsset:
        """
        Restore the HTML from the most recent history entry.

        The entry is removed unless settings.undo_preserves_history is set,
        in which case repeated undos keep restoring the same HTML.
        """
        asset = get_owned_email_asset(asset_id, user_id, self.db)
        history = list(asset.edit_history or [])
        if not history:
            raise NothingToUndoError(asset.id)

        entry = history[-1]
        if not self.settings.undo_preserves_history:
            history = history[:-1]
        asset.edit_history = history

        self._apply_html(asset, entry["previous_html"])
        self.db.commit()
        self.db.refresh(asset)
        logger.info(f"Undid last edit on email asset {asset.id}, history size {len(history)}")
        return asset

    def ai_edit(self, asset_id: UUID, user_id: UUID, prompt: str, preserve_structure: bool = True) -> AiEditResult:
        """
        Ask the text generator to modify the asset's HTML. Nothing is saved;
        the caller submits the result through update().
        """
        if not prompt or not prompt.strip():
            raise PreconditionError("Edit prompt is required")
        if len(prompt) > MAX_PROMPT_LENGTH:
            raise PreconditionError(f"Prompt must be at most {MAX_PROMPT_LENGTH} characters")
        if self.generator is None:
            raise GenerationError("Text generation is not configured")

        asset = get_owned_email_asset(asset_id, user_id, self.db)

        try:
            result = self.generator.generate(
                build_edit_prompt(asset.full_html, prompt),
                self.settings.generation_max_tokens,
                system_message=build_edit_system_prompt(preserve_structure),
            )
        except Exception as e:
            logger.error(f"AI edit failed for email asset {asset.id}: {e}")
            raise GenerationError(f"AI edit failed: {e}") from e

        modified_html = extract_html_from_response(result.text)
        if not modified_html:
            raise GenerationError("AI edit returned no HTML")

        summary = prompt[:50] + ("..." if len(prompt) > 50 else "")
        return AiEditResult(
            modified_html=modified_html,
            changes=[f'Applied modification: "{summary}"'],
            tokens_used=result.tokens_used,
        )

    def _apply_html(self, asset: EmailAsset, html: str) -> None:
        document = self.renderer.render(html)
        asset.full_html = document.full_html
        asset.inlined_html = document.inlined_html
        asset.liquid_html = document.liquid_html
        asset.plain_text = document.plain_text
        asset.last_edited_at = _now()
        asset.status = AssetStatus.EDITED
