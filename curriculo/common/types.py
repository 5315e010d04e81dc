"""
Canonical Types for the resume builder.

This module defines the resume Document (ResumeData) and its list items.
The JSON wire format keeps the camelCase keys used by the browser client
(personalInfo, jobTitle, showQRCode, ...); Python code uses snake_case
attributes. Every model accepts both spellings on input.
"""

import random
import time
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Proficiency = Literal["Básico", "Intermediário", "Avançado", "Fluente", ""]
TemplateId = Literal["template-modern", "template-classic", "template-minimalist"]
ItemType = Literal["experience", "education", "course", "language"]

PROFICIENCY_LEVELS = ("Básico", "Intermediário", "Avançado", "Fluente")
NO_DRIVER_LICENSE = "Não possuo"

# Deletion targets use singular names; the Document stores plural lists
ITEM_TYPE_FIELDS = {
    "experience": "experiences",
    "education": "education",
    "course": "courses",
    "language": "languages",
}


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-05-01T12:30:00.000Z."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def generate_item_id(unique_suffix: bool = False) -> str:
    """
    Generate a list item identifier from the current millisecond timestamp.

    Items created one at a time by the wizard never collide at this scale.
    Batch imports create many items within the same millisecond and ask for
    a random suffix.
    """
    item_id = str(int(time.time() * 1000))
    if unique_suffix:
        item_id = f"{item_id}-{random.random()}"
    return item_id


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CamelModel):
    name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    age: str = ""
    marital_status: str = ""
    cnh: str = ""  # Driver licence category
    profile_picture: str = ""  # Data URL or remote URL


class Experience(CamelModel):
    id: str = Field(default_factory=generate_item_id)
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class Education(CamelModel):
    id: str = Field(default_factory=generate_item_id)
    degree: str = ""
    institution: str = ""
    start_date: str = ""
    end_date: str = ""


class Course(CamelModel):
    id: str = Field(default_factory=generate_item_id)
    name: str = ""
    institution: str = ""
    completion_date: str = ""


class Language(CamelModel):
    id: str = Field(default_factory=generate_item_id)
    language: str = ""
    proficiency: Proficiency = ""

    @field_validator("proficiency", mode="before")
    @classmethod
    def normalize_proficiency(cls, value):
        """Unknown levels (e.g. from AI import) become the empty level."""
        if value is None:
            return ""
        value = str(value).strip()
        for level in PROFICIENCY_LEVELS:
            if value.lower() == level.lower():
                return level
        return ""


class Style(CamelModel):
    template: TemplateId = "template-modern"
    color: str = "#002e9e"
    show_qr_code: bool = Field(default=True, alias="showQRCode")


class ResumeData(CamelModel):
    """The complete resume Document."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experiences: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    courses: List[Course] = Field(default_factory=list)
    languages: List[Language] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    style: Style = Field(default_factory=Style)

    def delete_item(self, item_type: ItemType, item_id: str) -> "ResumeData":
        """
        Return a copy of the Document without the identified list item.

        Args:
            item_type: "experience", "education", "course" or "language"
            item_id: Identifier of the item to remove

        Returns:
            New ResumeData (the original is left untouched)
        """
        field_name = ITEM_TYPE_FIELDS[item_type]
        remaining = [item for item in getattr(self, field_name) if item.id != item_id]
        return self.model_copy(update={field_name: remaining}, deep=True)

    def whatsapp_link(self) -> Optional[str]:
        """
        WhatsApp link encoded by the optional QR block.

        Only Brazilian numbers with 10 or 11 digits (area code included)
        qualify; the country code 55 is prepended.
        """
        if not self.style.show_qr_code:
            return None
        digits = "".join(ch for ch in self.personal_info.phone if ch.isdigit())
        if len(digits) < 10 or len(digits) > 11:
            return None
        return f"https://wa.me/55{digits}"


class SavedResume(ResumeData):
    """A paid Document kept for later edit/download, keyed by save time."""

    saved_at: str


def initial_resume() -> ResumeData:
    """Blank Document used when the user starts a new resume."""
    return ResumeData()


def demo_resume() -> ResumeData:
    """Sample Document shown before the user starts editing."""
    return ResumeData.model_validate({
        "personalInfo": {
            "name": "Ana Maria Silva",
            "jobTitle": "Desenvolvedora Front-End",
            "email": "ana.silva@email.com",
            "phone": "(11) 98765-4321",
            "address": "São Paulo, SP",
        },
        "summary": (
            "Desenvolvedora front-end proativa com 3+ anos de experiência na criação de interfaces "
            "de usuário responsivas e performáticas com React e Vue.js. Apaixonada por design limpo "
            "e em busca de novos desafios para aplicar minhas habilidades em UI/UX. Histórico "
            "comprovado na otimização de performance, resultando em melhorias significativas no "
            "Core Web Vitals e na satisfação do cliente. Proficiente em metodologias ágeis e "
            "ferramentas de versionamento como Git."
        ),
        "experiences": [
            {
                "id": "1",
                "jobTitle": "Desenvolvedora Front-End Pleno",
                "company": "Tech Solutions",
                "location": "São Paulo, SP",
                "startDate": "Jan 2022",
                "endDate": "Atual",
                "description": (
                    "Liderança no desenvolvimento do novo portal do cliente usando React, resultando "
                    "em um aumento de 25% na retenção de usuários. Otimização de performance (Core Web "
                    "Vitals) e mentoria de desenvolvedores júnior. Colaboração com equipes de UI/UX "
                    "para garantir a fidelidade do design e a melhor experiência do usuário. "
                    "Implementação de testes unitários e de integração para garantir a qualidade e a "
                    "estabilidade do código."
                ),
            },
            {
                "id": "2",
                "jobTitle": "Desenvolvedora Front-End Júnior",
                "company": "Web Agil",
                "location": "Remoto",
                "startDate": "Mar 2020",
                "endDate": "Dez 2021",
                "description": (
                    "Desenvolvimento e manutenção de landing pages e e-commerces em Vue.js, "
                    "garantindo total responsividade e acessibilidade (WCAG)."
                ),
            },
        ],
        "education": [
            {
                "id": "1",
                "degree": "Análise e Desenvolvimento de Sistemas",
                "institution": "Universidade Estácio de Sá",
                "startDate": "2018",
                "endDate": "2020",
            }
        ],
        "courses": [
            {"id": "1", "name": "React Avançado", "institution": "Udemy", "completionDate": "2023"},
            {"id": "2", "name": "UI/UX Design Principles", "institution": "Coursera", "completionDate": "2022"},
        ],
        "languages": [
            {"id": "1", "language": "Português", "proficiency": "Fluente"},
            {"id": "2", "language": "Inglês", "proficiency": "Avançado"},
        ],
        "skills": ["React", "JavaScript (ES6+)", "TypeScript", "Vue.js", "Tailwind CSS", "Metodologias Ágeis"],
        "style": {"template": "template-modern", "color": "#002e9e", "showQRCode": True},
    })
