"""
Settings API: email templates, SMTP settings and site settings.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...schemas import (
    EmailTemplate, EmailTemplateCreate, EmailTemplateUpdate, EmailTemplatePreview,
    EmailSettings, EmailSettingsUpdate,
    SiteSettings, SiteSettingsUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Settings"])


def _public_email_settings(settings: dict) -> dict:
    # The SMTP password is write-only
    public = {key: value for key, value in settings.items() if key != "password"}
    public["hasPassword"] = bool(settings.get("password"))
    return public


# Email templates

@router.get("/email-templates", response_model=List[EmailTemplate])
async def list_email_templates(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_email_templates()


@router.get("/email-templates/{template_id}", response_model=EmailTemplate)
async def get_email_template(template_id: str, session: AsyncSession = Depends(get_session)):
    template = await DatabaseStorage(session).get_email_template_by_id(template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found")
    return template


@router.post("/email-templates", response_model=EmailTemplate, status_code=status.HTTP_201_CREATED)
async def create_email_template(template: EmailTemplateCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_email_template(template.model_dump())


@router.put("/email-templates/{template_id}", response_model=EmailTemplate)
async def update_email_template(template_id: str, template: EmailTemplateUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_email_template(template_id, template.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found")
    return updated


@router.delete("/email-templates/{template_id}")
async def delete_email_template(template_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_email_template(template_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found")
    return {"success": True}


@router.post("/email-templates/{template_id}/preview")
async def preview_email_template(template_id: str, body: EmailTemplatePreview, session: AsyncSession = Depends(get_session)):
    """Render subject and body with {{variable}} placeholders filled in."""
    rendered = await DatabaseStorage(session).render_email_template(template_id, body.values)
    if not rendered:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found")
    return rendered


# Email settings

@router.get("/email-settings", response_model=Optional[EmailSettings])
async def get_email_settings(session: AsyncSession = Depends(get_session)):
    settings = await DatabaseStorage(session).get_email_settings()
    return _public_email_settings(settings) if settings else None


@router.put("/email-settings", response_model=EmailSettings)
async def update_email_settings(body: EmailSettingsUpdate, session: AsyncSession = Depends(get_session)):
    settings = await DatabaseStorage(session).update_email_settings(body.model_dump(exclude_unset=True))
    logger.info("Email settings updated")
    return _public_email_settings(settings)


# Site settings

@router.get("/site-settings", response_model=SiteSettings)
async def get_site_settings(session: AsyncSession = Depends(get_session)):
    """Stored settings, or the defaults before anything has been saved."""
    return await DatabaseStorage(session).get_site_settings() or SiteSettings()


@router.put("/site-settings", response_model=SiteSettings)
async def update_site_settings(body: SiteSettingsUpdate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).update_site_settings(body.model_dump(exclude_unset=True))
