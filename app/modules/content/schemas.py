from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.modules.tenants.schemas import TenantResponse


class HeroData(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    title: Optional[str] = Field(default=None, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=1000)
    cta_text: Optional[str] = Field(default=None, max_length=100)
    cta_link: Optional[str] = Field(default=None, max_length=500)
    resume_url: Optional[str] = Field(default=None, max_length=500)
    social_links: Optional[Dict[str, str]] = None


class HeroResponse(HeroData):
    id: Optional[str] = None
    tenant_id: str
    updated_at: Optional[datetime] = None


class AboutData(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=10000)
    extra_text: Optional[str] = Field(default=None, max_length=10000)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)


class AboutResponse(AboutData):
    id: Optional[str] = None
    tenant_id: str
    updated_at: Optional[datetime] = None


class ContactInfoData(BaseModel):
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    location: Optional[str] = Field(default=None, max_length=200)
    whatsapp: Optional[str] = Field(default=None, max_length=50)
    linkedin: Optional[str] = Field(default=None, max_length=500)
    github: Optional[str] = Field(default=None, max_length=500)


class ContactInfoResponse(ContactInfoData):
    id: Optional[str] = None
    tenant_id: str
    updated_at: Optional[datetime] = None


class SkillCreate(BaseModel):
    category: str = Field(min_length=1, max_length=100)
    skill_name: str = Field(min_length=1, max_length=100)


class SkillUpdate(BaseModel):
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    skill_name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class SkillResponse(SkillCreate):
    id: str
    tenant_id: str
    created_at: Optional[datetime] = None


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=10000)
    tech_stack: List[str] = []
    image_url: Optional[str] = Field(default=None, max_length=500)
    github_link: Optional[str] = Field(default=None, max_length=500)
    demo_link: Optional[str] = Field(default=None, max_length=500)


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=10000)
    tech_stack: Optional[List[str]] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    github_link: Optional[str] = Field(default=None, max_length=500)
    demo_link: Optional[str] = Field(default=None, max_length=500)


class ProjectResponse(ProjectCreate):
    id: str
    tenant_id: str
    tech_stack: Optional[List[str]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExperienceCreate(BaseModel):
    company: str = Field(min_length=1, max_length=200)
    role: str = Field(min_length=1, max_length=200)
    period: Optional[str] = Field(default=None, max_length=100)
    details: List[str] = []
    skills_used: List[str] = []


class ExperienceUpdate(BaseModel):
    company: Optional[str] = Field(default=None, min_length=1, max_length=200)
    role: Optional[str] = Field(default=None, min_length=1, max_length=200)
    period: Optional[str] = Field(default=None, max_length=100)
    details: Optional[List[str]] = None
    skills_used: Optional[List[str]] = None


class ExperienceResponse(ExperienceCreate):
    id: str
    tenant_id: str
    details: Optional[List[str]] = []
    skills_used: Optional[List[str]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PortfolioResponse(BaseModel):
    tenant: TenantResponse
    hero: Optional[HeroResponse] = None
    about: Optional[AboutResponse] = None
    contact_info: Optional[ContactInfoResponse] = None
    skills: List[SkillResponse] = []
    projects: List[ProjectResponse] = []
    experience: List[ExperienceResponse] = []


class UploadResponse(BaseModel):
    path: str
    url: str


class DeletedResponse(BaseModel):
    success: bool = True
    path: Optional[str] = None
