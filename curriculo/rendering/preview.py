"""
HTML rendering of resume pages.

One function renders every surface the pipeline needs:
- the full, unpaginated Document for measurement
- a single PageData (paginated preview and PDF export)

The element ids and classes emitted here are the contract read by the
measurement script (see curriculo.pagination.measurement).
"""

from html import escape
from typing import List, Sequence

from curriculo.common.types import NO_DRIVER_LICENSE, ResumeData
from curriculo.pagination.continuation import is_continued, render_with_continuation
from curriculo.pagination.types import (
    A4,
    A4_PIXEL_HEIGHT,
    A4_PIXEL_WIDTH,
    CONTINUATION_TOP_MARGIN,
    PageData,
)

CONTINUED_SUFFIX = " (continuação)"

SECTION_TITLES = {
    "summary": "Resumo Profissional",
    "experiences": "Experiência Profissional",
    "education": "Formação Acadêmica",
    "courses": "Cursos Complementares",
    "languages": "Idiomas",
    "skills": "Habilidades e Competências",
}

PLACEHOLDERS = {
    "summary": "Seu resumo profissional aparecerá aqui...",
    "experiences": "Suas experiências profissionais aparecerão aqui...",
    "education": "Sua formação acadêmica aparecerá aqui...",
    "courses": "Seus cursos complementares aparecerão aqui...",
    "languages": "Seus idiomas aparecerão aqui...",
    "skills": "Suas habilidades aparecerão aqui...",
}

WHATSAPP_ICON_URL = "https://files.catbox.moe/cvyrae.svg"

GOOGLE_FONTS_URL = "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"


def _text(value: str) -> str:
    return escape(value or "")


def _multiline(value: str) -> str:
    """Escape text and keep its line breaks."""
    return _text(value).replace("\n", "<br />")


def _date_range(start: str, end: str) -> str:
    separator = " - " if start and end else ""
    return f"{_text(start)}{separator}{_text(end)}"


def _placeholder(field_name: str) -> str:
    return f'<p class="placeholder">{PLACEHOLDERS[field_name]}</p>'


# ============================================================================
# Header
# ============================================================================

def _render_header(page: PageData, demo_mode: bool) -> str:
    info = page.personal_info
    has_photo = bool(info.profile_picture)

    picture = ""
    if has_photo:
        picture = f'<img id="profile-pic-img" src="{_text(info.profile_picture)}" alt="Foto de Perfil">'

    contact: List[str] = []
    if info.email:
        contact.append(
            f'<a href="mailto:{_text(info.email)}" id="resume-email-container" class="contact-item">'
            f'<span id="resume-email">{_text(info.email)}</span></a>'
        )
    if info.phone:
        contact.append(
            f'<a href="tel:{_text(info.phone)}" id="resume-phone-container" class="contact-item">'
            f'<span id="resume-phone">{_text(info.phone)}</span></a>'
        )
    if info.address:
        contact.append(
            f'<div id="resume-address-container" class="contact-item">'
            f'<span id="resume-address">{_text(info.address)}</span></div>'
        )
    if info.age:
        contact.append(
            f'<div id="resume-age-container" class="contact-item">'
            f'<span id="resume-age">{_text(info.age)} anos</span></div>'
        )
    if info.marital_status:
        contact.append(
            f'<div id="resume-marital-status-container" class="contact-item">'
            f'<span id="resume-marital-status">{_text(info.marital_status)}</span></div>'
        )
    if info.cnh and info.cnh != NO_DRIVER_LICENSE:
        contact.append(
            f'<div id="resume-cnh-container" class="contact-item">'
            f'<span id="resume-cnh">CNH: {_text(info.cnh)}</span></div>'
        )

    name = info.name or ("" if demo_mode else "Seu Nome")
    job_title = info.job_title or ("" if demo_mode else "Cargo Desejado")
    max_width = "calc(100% - 170px)" if has_photo else "100%"

    return f"""
    <div id="profile-pic-container" class="{'visible' if has_photo else ''}">{picture}</div>
    <header class="{'has-photo' if has_photo else ''}">
        <div class="header-identity" style="max-width: {max_width};">
            <h1 id="resume-name">{_text(name)}</h1>
            <h2 id="resume-job-title">{_text(job_title)}</h2>
        </div>
        <div id="contact-info">{''.join(contact)}</div>
    </header>"""


def _render_whatsapp(page: PageData) -> str:
    document = ResumeData(personal_info=page.personal_info, style=page.style)
    link = document.whatsapp_link()
    if link is None:
        return ""
    return (
        f'<div id="whatsapp-qr-code-container">'
        f'<img src="{WHATSAPP_ICON_URL}" alt="Ícone do WhatsApp" class="whatsapp-icon">'
        f'<a id="whatsapp-link" href="{link}">{link}</a>'
        f'</div>'
    )


# ============================================================================
# Sections
# ============================================================================

def _section(element_id: str, field_name: str, body: str, continued: bool) -> str:
    title = SECTION_TITLES[field_name] + (CONTINUED_SUFFIX if continued else "")
    return (
        f'<section id="{element_id}">'
        f'<h3 class="section-title">{title}</h3>'
        f'{body}'
        f'</section>'
    )


def _render_summary(page: PageData) -> str:
    if page.summary:
        paragraph = f'<p id="resume-summary">{_multiline(page.summary)}</p>'
    else:
        paragraph = f'<p id="resume-summary"><span class="placeholder">{PLACEHOLDERS["summary"]}</span></p>'
    return render_with_continuation("summary", paragraph, page.continuation)


def _render_experiences(page: PageData) -> str:
    if not page.experiences:
        return f'<div id="resume-experience-list">{_placeholder("experiences")}</div>'

    entries = []
    for exp in page.experiences:
        continued = is_continued(exp.id, page.continuation)
        header = ""
        if not continued:
            location = f" • {_text(exp.location)}" if exp.location else ""
            header = (
                f'<div class="experience-header item-row">'
                f'<div class="item-main">'
                f'<h4>{_text(exp.job_title) or "Cargo"}</h4>'
                f'<p class="item-detail">{_text(exp.company) or "Empresa"}{location}</p>'
                f'</div>'
                f'<p class="item-dates">{_date_range(exp.start_date, exp.end_date)}</p>'
                f'</div>'
            )
        description = ""
        if exp.description:
            spacing = "" if continued else " with-gap"
            description = render_with_continuation(
                exp.id,
                f'<p class="experience-description{spacing}">{_multiline(exp.description)}</p>',
                page.continuation,
            )
        entries.append(
            f'<div class="experience-item" data-item-id="{_text(exp.id)}">{header}{description}</div>'
        )
    return f'<div id="resume-experience-list">{"".join(entries)}</div>'


def _render_education(page: PageData) -> str:
    if not page.education:
        return f'<div id="resume-education-list">{_placeholder("education")}</div>'
    entries = "".join(
        f'<div class="item-row">'
        f'<div class="item-main"><h4>{_text(edu.degree) or "Curso/Formação"}</h4>'
        f'<p class="item-detail">{_text(edu.institution) or "Instituição"}</p></div>'
        f'<p class="item-dates">{_date_range(edu.start_date, edu.end_date)}</p>'
        f'</div>'
        for edu in page.education
    )
    return f'<div id="resume-education-list">{entries}</div>'


def _render_courses(page: PageData) -> str:
    if not page.courses:
        return f'<div id="resume-courses-list">{_placeholder("courses")}</div>'
    entries = "".join(
        f'<div class="item-row">'
        f'<div class="item-main"><h4>{_text(course.name) or "Nome do Curso"}</h4>'
        f'<p class="item-detail">{_text(course.institution) or "Instituição"}</p></div>'
        f'<p class="item-dates">{_text(course.completion_date)}</p>'
        f'</div>'
        for course in page.courses
    )
    return f'<div id="resume-courses-list">{entries}</div>'


def _render_languages(page: PageData) -> str:
    if not page.languages:
        return f'<div id="resume-languages-list">{_placeholder("languages")}</div>'
    entries = "".join(
        f'<div class="language-item">'
        f'<h4>{_text(lang.language) or "Idioma"}:&nbsp;</h4>'
        f'<p class="item-detail">{_text(lang.proficiency) or "Nível"}</p>'
        f'</div>'
        for lang in page.languages
    )
    return f'<div id="resume-languages-list">{entries}</div>'


def _render_skills(page: PageData) -> str:
    if not page.skills:
        return f'<div id="resume-skills">{_placeholder("skills")}</div>'
    chips = "".join(f'<span class="skill-chip">{_text(skill)}</span>' for skill in page.skills)
    return f'<div id="resume-skills">{chips}</div>'


# (element id, PageData field, body renderer) in rendering order
_SECTIONS: Sequence[tuple] = (
    ("summary-section", "summary", _render_summary),
    ("experience-section", "experiences", _render_experiences),
    ("education-section", "education", _render_education),
    ("courses-section", "courses", _render_courses),
    ("languages-section", "languages", _render_languages),
    ("skills-section", "skills", _render_skills),
)


def _render_main(page: PageData, is_first_page: bool, placeholders: bool) -> str:
    parts = []
    for element_id, field_name, render_body in _SECTIONS:
        value = getattr(page, field_name)
        if not value and not placeholders:
            continue
        continued = bool(value) and not is_first_page
        parts.append(_section(element_id, field_name, render_body(page), continued))

    main_class = "first-page" if is_first_page else "continuation-page"
    main_style = "" if is_first_page else f' style="padding-top: {CONTINUATION_TOP_MARGIN}px;"'
    return f'<main class="{main_class}"{main_style}>{"".join(parts)}</main>'


# ============================================================================
# Document
# ============================================================================

def render_page_html(
    page: PageData,
    is_first_page: bool = True,
    demo_mode: bool = False,
    is_measurement: bool = False,
) -> str:
    """
    Render one page (or the whole Document) as a standalone HTML document.

    Args:
        page: Page content; PageData.from_document() for the unpaginated render
        is_first_page: Renders the header block and the QR block
        demo_mode: Hide placeholders for empty sections
        is_measurement: Unclipped, natural-height render used for measuring

    Returns:
        Complete HTML document string
    """
    style = page.style
    template = style.template if style else "template-modern"
    color = style.color if style else "#002e9e"

    # Placeholders only make sense where the whole Document is shown
    placeholders = not demo_mode and is_first_page

    classes = ["resume-preview", template]
    if not is_measurement:
        classes.append("resume-preview-paginated")

    header = ""
    whatsapp = ""
    if is_first_page and page.personal_info is not None:
        header = _render_header(page, demo_mode)
        if style is not None:
            whatsapp = _render_whatsapp(page)

    body = f"""
<div id="resume-preview" class="{' '.join(classes)}">{header}
    {_render_main(page, is_first_page, placeholders)}
    {whatsapp}
</div>"""

    return build_document_html(body, color)


def render_pages_html(pages: List[PageData], demo_mode: bool = False) -> List[str]:
    """Render every page of a pagination result."""
    return [
        render_page_html(page, is_first_page=index == 0, demo_mode=demo_mode)
        for index, page in enumerate(pages)
    ]


def build_document_html(body_html: str, theme_color: str) -> str:
    """Wrap preview markup in a complete HTML document with embedded styles."""
    return f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <title>Currículo</title>
    <link href="{GOOGLE_FONTS_URL}" rel="stylesheet">
    <style>
        :root {{
            --theme-color: {escape(theme_color)};
            --color-text: #111827;
            --color-muted: #6b7280;
        }}

        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}

        body {{
            font-family: 'Inter', system-ui, sans-serif;
            font-size: 14px;
            line-height: 1.5;
            color: var(--color-text);
            background: white;
        }}

        .resume-preview {{
            position: relative;
            width: {A4_PIXEL_WIDTH}px;
            padding: 40px 48px 0;
            background: white;
        }}

        .resume-preview-paginated {{
            height: {A4_PIXEL_HEIGHT}px;
            overflow: hidden;
        }}

        header {{
            padding-bottom: 16px;
            border-bottom: 2px solid var(--theme-color);
        }}

        #profile-pic-container {{ display: none; }}
        #profile-pic-container.visible {{
            display: block;
            position: absolute;
            top: 40px;
            right: 48px;
            width: 150px;
            height: 150px;
        }}
        #profile-pic-img {{
            width: 100%;
            height: 100%;
            object-fit: cover;
            border-radius: 50%;
        }}

        header.has-photo {{ min-height: 166px; }}

        #resume-name {{
            font-size: 30px;
            font-weight: 700;
            color: var(--theme-color);
            line-height: 1.2;
        }}

        #resume-job-title {{
            font-size: 18px;
            font-weight: 500;
            color: #4b5563;
            margin-top: 4px;
        }}

        #contact-info {{
            margin-top: 12px;
            display: flex;
            flex-wrap: wrap;
            gap: 4px 16px;
            font-size: 13px;
        }}

        .contact-item {{
            color: #374151;
            text-decoration: none;
        }}

        main.first-page {{ margin-top: 16px; }}

        main > section + section {{ margin-top: 16px; }}

        .section-title {{
            font-size: 16px;
            font-weight: 700;
            text-transform: uppercase;
            letter-spacing: 0.05em;
            color: var(--theme-color);
            border-bottom: 1px solid #e5e7eb;
            padding-bottom: 4px;
            margin-bottom: 8px;
        }}

        #resume-summary, .experience-description {{
            color: #374151;
            line-height: 1.625;
        }}

        .experience-item + .experience-item {{ margin-top: 16px; }}
        .experience-description.with-gap {{ margin-top: 4px; }}

        #resume-education-list .item-row + .item-row,
        #resume-courses-list .item-row + .item-row {{ margin-top: 8px; }}

        .item-row {{
            display: flex;
            justify-content: space-between;
            align-items: baseline;
            flex-wrap: wrap;
        }}

        .item-main {{ padding-right: 16px; }}
        h4 {{ font-weight: 600; }}
        .item-detail {{ color: #374151; }}

        .item-dates {{
            font-size: 12px;
            color: var(--color-muted);
            text-align: right;
            white-space: nowrap;
        }}

        #resume-languages-list {{
            display: flex;
            flex-wrap: wrap;
            gap: 4px 16px;
        }}

        .language-item {{
            display: flex;
            align-items: baseline;
        }}

        .skill-chip {{
            display: inline-block;
            height: 20px;
            line-height: 20px;
            background: #e5e7eb;
            border-radius: 9999px;
            padding: 0 10px;
            font-size: 12px;
            font-weight: 600;
            color: #374151;
            margin: 0 6px 6px 0;
            vertical-align: top;
        }}

        .placeholder {{
            color: #9ca3af;
            font-style: italic;
            font-size: 13px;
        }}

        #whatsapp-qr-code-container {{
            position: absolute;
            right: 48px;
            bottom: {A4.bottom_margin}px;
            display: flex;
            flex-direction: column;
            align-items: center;
            font-size: 10px;
        }}

        .whatsapp-icon {{
            height: 32px;
            margin-bottom: 8px;
        }}

        .template-classic .section-title {{
            font-family: Georgia, 'Times New Roman', serif;
            text-transform: none;
            border-bottom: 2px solid var(--theme-color);
        }}

        .template-classic #resume-name {{
            font-family: Georgia, 'Times New Roman', serif;
        }}

        .template-minimalist header {{ border-bottom: none; }}
        .template-minimalist .section-title {{
            border-bottom: none;
            color: var(--color-text);
        }}
    </style>
</head>
<body>{body_html}
</body>
</html>
"""
