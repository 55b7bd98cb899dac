from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Query
from app.config import settings
from app.database.supabase_client import get_service_supabase
from app.modules.content.schemas import (
    HeroData, HeroResponse, AboutData, AboutResponse, ContactInfoData, ContactInfoResponse,
    SkillCreate, SkillUpdate, SkillResponse, ProjectCreate, ProjectUpdate, ProjectResponse,
    ExperienceCreate, ExperienceUpdate, ExperienceResponse, PortfolioResponse,
    UploadResponse, DeletedResponse
)
from app.modules.content.service import ContentService
from app.modules.content.storage import PortfolioStorage, UPLOAD_FOLDERS
from app.core.dependencies import get_active_tenant, require_tenant_admin, rate_limit
from supabase import Client
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants/{tenant_slug}", tags=["content"])


def get_content_service(supabase: Client = Depends(get_service_supabase)) -> ContentService:
    return ContentService(supabase)


def get_portfolio_storage(supabase: Client = Depends(get_service_supabase)) -> PortfolioStorage:
    return PortfolioStorage(supabase)


@router.get("/portfolio", response_model=PortfolioResponse)
async def get_portfolio(
    _limit=Depends(rate_limit("tenant_get")),
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    """Whole public portfolio for rendering a tenant site"""
    return service.get_portfolio(tenant)


# Single sections

@router.get("/hero", response_model=Optional[HeroResponse])
async def get_hero(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.get_section("hero", tenant["id"])


@router.put("/hero", response_model=HeroResponse)
async def save_hero(
    hero: HeroData,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.upsert_section("hero", access["tenant"]["id"], hero.model_dump(exclude_unset=True))


@router.get("/about", response_model=Optional[AboutResponse])
async def get_about(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.get_section("about", tenant["id"])


@router.put("/about", response_model=AboutResponse)
async def save_about(
    about: AboutData,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.upsert_section("about", access["tenant"]["id"], about.model_dump(exclude_unset=True))


@router.get("/contact-info", response_model=Optional[ContactInfoResponse])
async def get_contact_info(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.get_section("contact_info", tenant["id"])


@router.put("/contact-info", response_model=ContactInfoResponse)
async def save_contact_info(
    contact_info: ContactInfoData,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.upsert_section(
        "contact_info", access["tenant"]["id"], contact_info.model_dump(exclude_unset=True)
    )


# Skills

@router.get("/skills", response_model=List[SkillResponse])
async def list_skills(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.list_items("skills", tenant["id"])


@router.post("/skills", response_model=SkillResponse, status_code=201)
async def create_skill(
    skill: SkillCreate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.create_item("skills", access["tenant"]["id"], skill.model_dump())


@router.put("/skills/{item_id}", response_model=SkillResponse)
async def update_skill(
    item_id: str,
    skill: SkillUpdate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.update_item("skills", access["tenant"]["id"], item_id, skill.model_dump(exclude_unset=True))


@router.delete("/skills/{item_id}", status_code=204)
async def delete_skill(
    item_id: str,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    service.delete_item("skills", access["tenant"]["id"], item_id)
    return None


# Projects

@router.get("/projects", response_model=List[ProjectResponse])
async def list_projects(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.list_items("projects", tenant["id"])


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project(
    project: ProjectCreate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.create_item("projects", access["tenant"]["id"], project.model_dump())


@router.put("/projects/{item_id}", response_model=ProjectResponse)
async def update_project(
    item_id: str,
    project: ProjectUpdate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.update_item("projects", access["tenant"]["id"], item_id, project.model_dump(exclude_unset=True))


@router.delete("/projects/{item_id}", status_code=204)
async def delete_project(
    item_id: str,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    service.delete_item("projects", access["tenant"]["id"], item_id)
    return None


# Experience

@router.get("/experience", response_model=List[ExperienceResponse])
async def list_experience(
    tenant: Dict = Depends(get_active_tenant),
    service: ContentService = Depends(get_content_service)
):
    return service.list_items("experience", tenant["id"])


@router.post("/experience", response_model=ExperienceResponse, status_code=201)
async def create_experience(
    experience: ExperienceCreate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.create_item("experience", access["tenant"]["id"], experience.model_dump())


@router.put("/experience/{item_id}", response_model=ExperienceResponse)
async def update_experience(
    item_id: str,
    experience: ExperienceUpdate,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    return service.update_item(
        "experience", access["tenant"]["id"], item_id, experience.model_dump(exclude_unset=True)
    )


@router.delete("/experience/{item_id}", status_code=204)
async def delete_experience(
    item_id: str,
    access: Dict = Depends(require_tenant_admin),
    service: ContentService = Depends(get_content_service)
):
    service.delete_item("experience", access["tenant"]["id"], item_id)
    return None


# Images

@router.post("/uploads", response_model=UploadResponse, status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    folder: str = Form("profile"),
    access: Dict = Depends(require_tenant_admin),
    storage: PortfolioStorage = Depends(get_portfolio_storage)
):
    """Upload a profile or project image to the portfolio bucket"""
    if folder not in UPLOAD_FOLDERS:
        raise HTTPException(status_code=400, detail=f"Folder must be one of: {', '.join(UPLOAD_FOLDERS)}")
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image uploads are accepted")
    content = await file.read(settings.max_upload_bytes + 1)
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    try:
        path, url = storage.upload_image(
            access["tenant"]["tenant_id"], folder, file.filename, content, content_type
        )
    except Exception as e:
        logger.error(f"Image upload failed for tenant {access['tenant']['tenant_id']}: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload image")
    return UploadResponse(path=path, url=url)


@router.delete("/uploads", response_model=DeletedResponse)
async def delete_image(
    path: str = Query(..., min_length=1),
    access: Dict = Depends(require_tenant_admin),
    storage: PortfolioStorage = Depends(get_portfolio_storage)
):
    """Remove a previously uploaded image (path or public URL)"""
    object_path = storage.object_path(path)
    if not storage.owns(access["tenant"]["tenant_id"], object_path):
        raise HTTPException(status_code=403, detail="Access denied")
    try:
        storage.remove(object_path)
    except Exception as e:
        logger.error(f"Image removal failed for {object_path}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove image")
    return DeletedResponse(path=object_path)
