"""
Text Enhancement Service: generative text features backed by Gemini.

Operations:
- enhance(text): Rewrite a passage in a more professional register
- suggest_skills(job_title, experience): Up to 8 relevant skills
- extract_experiences(pdf_text): Work history from a Carteira de Trabalho PDF
- extract_resume(pdf_text): Partial Document from an existing resume PDF

Requests go to the generateContent REST endpoint. HTTP 429 and network
errors are retried with jittered exponential backoff; once retries are
exhausted a rate limit is surfaced as a friendly UpstreamServiceError.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from curriculo.common.config import Config
from curriculo.common.error_handling import RateLimitedError, UpstreamServiceError
from curriculo.common.json_utils import parse_llm_json
from curriculo.common.types import (
    Course,
    Education,
    Experience,
    Language,
    PersonalInfo,
    generate_item_id,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "gemini"

RATE_LIMIT_MESSAGE = (
    "Ops! Prometemos que não é drama, é só um bugzinho do nosso lado. "
    "Por favor, tente novamente em 1 minuto ou atualize a página."
)

MAX_ATTEMPTS = 4

# Ongoing job marker used when the work record has no end date
CURRENT_JOB_END_DATE = "Atual"

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


# ===== PROMPT DESIGN =====

ENHANCE_SYSTEM_PROMPT = (
    "Você é um especialista em RH que cria currículos. Sua tarefa é reescrever o texto "
    "fornecido para ser mais profissional e impactante. Responda apenas com o texto "
    "reescrito, sem introduções ou comentários."
)

ENHANCE_ACKNOWLEDGEMENT = "Entendido. Por favor, forneça o texto que devo reescrever."

SUGGEST_SKILLS_PROMPT_TEMPLATE = (
    'Com base no cargo de "{job_title}" e na seguinte descrição de experiência profissional: '
    '"{experience}", sugira uma lista de 8 habilidades e competências relevantes (incluindo '
    "técnicas e comportamentais). Retorne apenas a lista de habilidades, separadas por vírgula. "
    "Exemplo: Liderança, Comunicação, React, Gestão de Projetos, Proatividade, Git, Scrum, "
    "Trabalho em Equipe"
)

WORK_RECORD_PROMPT = (
    "Analise o seguinte texto extraído de um PDF da Carteira de Trabalho Digital e extraia "
    "todas as experiências profissionais listadas. Para cada experiência, extraia: nome da "
    "empresa (empregador), cargo (ocupação), local (município do estabelecimento), data de "
    "início (admissão) e data de fim (desligamento). Se a data de fim não for especificada ou "
    'estiver em branco, use o valor "Atual". Ignore qualquer outra informação. Retorne os dados '
    'em formato JSON, como no exemplo: {"experiences": [{"company": "EMPRESA EXEMPLO", '
    '"jobTitle": "CARGO EXEMPLO", "location": "CIDADE - UF", "startDate": "DD/MM/YYYY", '
    '"endDate": "DD/MM/YYYY"}]}'
)

RESUME_PROMPT_TEMPLATE = """Você é um assistente de RH especialista em extrair dados de currículos.
Analise o texto do currículo fornecido e retorne **apenas** um objeto JSON.

A estrutura do JSON deve seguir este formato (use `null` ou arrays vazios `[]` para campos não encontrados):
{{
  "personalInfo": {{ "name": "string", "jobTitle": "string", "email": "string", "phone": "string", "address": "string" }},
  "summary": "string",
  "experiences": [{{ "jobTitle": "string", "company": "string", "location": "string", "startDate": "string", "endDate": "string", "description": "string" }}],
  "education": [{{ "degree": "string", "institution": "string", "startDate": "string", "endDate": "string" }}],
  "courses": [{{ "name": "string", "institution": "string", "completionDate": "string" }}],
  "languages": [{{ "language": "string", "proficiency": "string" }}],
  "skills": ["string"]
}}

Tente preencher o máximo de campos possível com base no texto.
Para datas, tente formatar como "Mês Ano" (ex: "Jan 2020") ou "Ano" (ex: "2020").
Não inclua ```json ou qualquer outro texto antes ou depois do objeto JSON.

Texto do Currículo para Análise:
---
{resume_text}
---
"""

# Resume list sections and the item model each one holds
_RESUME_LIST_MODELS = {
    "experiences": Experience,
    "education": Education,
    "courses": Course,
    "languages": Language,
}


class TextEnhancementService:
    """Client for the generative text features."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else Config.GEMINI_API_KEY
        self.model = model or Config.GEMINI_MODEL
        self.timeout = timeout or Config.AI_REQUEST_TIMEOUT
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def enhance(self, text: str) -> str:
        """
        Rewrite text to be more professional and impactful.

        Raises:
            ValueError: If text is blank
            UpstreamServiceError: On service failure
        """
        if not text or not text.strip():
            raise ValueError("Prompt é obrigatório.")

        contents = [
            {"role": "user", "parts": [{"text": ENHANCE_SYSTEM_PROMPT}]},
            {"role": "model", "parts": [{"text": ENHANCE_ACKNOWLEDGEMENT}]},
            {"role": "user", "parts": [{"text": text}]},
        ]
        return self._generate(contents, temperature=0.9).strip()

    def suggest_skills(
        self,
        job_title: str,
        experience: str = "",
        existing_skills: Optional[List[str]] = None,
    ) -> List[str]:
        """
        Suggest skills for a job title and experience summary.

        Suggestions already present in existing_skills (case-insensitive)
        are dropped. A blank job title yields no suggestions without
        calling the service.
        """
        if not job_title or not job_title.strip():
            return []

        prompt = SUGGEST_SKILLS_PROMPT_TEMPLATE.format(job_title=job_title, experience=experience)
        raw = self._generate([{"parts": [{"text": prompt}]}], temperature=0.9)

        skills = [skill.strip() for skill in raw.split(",") if skill.strip()]
        return filter_new_skills(skills, existing_skills or [])

    def extract_experiences(self, pdf_text: str) -> List[Experience]:
        """
        Extract work history from the text of a Carteira de Trabalho PDF.

        Every extracted entry gets a fresh id and an empty description;
        a missing end date becomes "Atual".
        """
        if not pdf_text or not pdf_text.strip():
            raise ValueError("Texto do PDF é obrigatório.")

        contents = [{
            "parts": [
                {"text": WORK_RECORD_PROMPT},
                {"text": f"Aqui está o texto do PDF: {pdf_text}"},
            ]
        }]
        raw = self._generate(contents, temperature=0.2)
        data = self._parse_json(raw)

        experiences = []
        for entry in data.get("experiences") or []:
            if not isinstance(entry, dict):
                continue
            experience = Experience.model_validate({
                **_strings_only(entry),
                "id": generate_item_id(unique_suffix=True),
                "description": "",
            })
            if not experience.end_date:
                experience.end_date = CURRENT_JOB_END_DATE
            experiences.append(experience)

        logger.info(f"Extracted {len(experiences)} experiences from work record")
        return experiences

    def extract_resume(self, pdf_text: str) -> Dict[str, Any]:
        """
        Extract a partial Document from the text of an existing resume.

        Returns:
            camelCase dict with the fields found; list items carry fresh ids
        """
        if not pdf_text or not pdf_text.strip():
            raise ValueError("Texto do PDF é obrigatório.")

        prompt = RESUME_PROMPT_TEMPLATE.format(resume_text=pdf_text)
        raw = self._generate(
            [{"parts": [{"text": prompt}]}],
            temperature=0.1,
            max_output_tokens=8192,
            response_mime_type="application/json",
        )
        return normalize_imported_resume(self._parse_json(raw))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _generate(
        self,
        contents: List[Dict[str, Any]],
        temperature: float,
        max_output_tokens: int = 2048,
        response_mime_type: Optional[str] = None,
    ) -> str:
        if not self.api_key:
            raise UpstreamServiceError(SERVICE_NAME, "Chave da API do Gemini não configurada.", 500)

        generation_config: Dict[str, Any] = {
            "temperature": temperature,
            "topK": 1,
            "topP": 1,
            "maxOutputTokens": max_output_tokens,
        }
        if response_mime_type:
            generation_config["responseMimeType"] = response_mime_type

        payload = {
            "contents": contents,
            "generationConfig": generation_config,
            "safetySettings": SAFETY_SETTINGS,
        }

        try:
            result = self._post_with_retry(payload)
        except RateLimitedError:
            logger.error(f"Gemini still rate limited after {MAX_ATTEMPTS} attempts")
            raise UpstreamServiceError(SERVICE_NAME, RATE_LIMIT_MESSAGE, status_code=429)
        except requests.exceptions.RequestException as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamServiceError(SERVICE_NAME, "Falha ao contactar a API.")

        try:
            return result["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            logger.error(f"Unexpected Gemini response: {str(result)[:500]}")
            raise UpstreamServiceError(SERVICE_NAME, "A API da IA retornou uma resposta inválida.")

    @retry(
        retry=retry_if_exception_type((
            RateLimitedError,
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
        )),
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=8) + wait_random(0, 0.5),
        reraise=True,
    )
    def _post_with_retry(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(
            Config.get_gemini_url(self.model),
            params={"key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )

        if response.status_code == 429:
            logger.warning("Gemini answered 429 (resource exhausted), retrying")
            raise RateLimitedError(SERVICE_NAME)

        if not response.ok:
            message = _error_message(response)
            logger.error(f"Gemini API error {response.status_code}: {message}")
            raise UpstreamServiceError(SERVICE_NAME, message)

        return response.json()

    @staticmethod
    def _parse_json(raw: str) -> Dict[str, Any]:
        try:
            return parse_llm_json(raw)
        except ValueError as e:
            logger.error(f"Failed to parse JSON from Gemini: {e}. Raw: {raw[:500]}")
            raise UpstreamServiceError(SERVICE_NAME, "A IA retornou uma resposta em formato inválido.")


def filter_new_skills(suggestions: List[str], existing_skills: List[str]) -> List[str]:
    """Drop suggestions already present (case-insensitive), keeping order."""
    seen = {skill.lower() for skill in existing_skills}
    fresh = []
    for skill in suggestions:
        key = skill.lower()
        if key in seen:
            continue
        seen.add(key)
        fresh.append(skill)
    return fresh


def normalize_imported_resume(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Coerce an AI-extracted resume into valid Document fields.

    null values become empty strings/lists, every list item gets a fresh
    id, and fields the extraction did not return are left out.
    """
    result: Dict[str, Any] = {}

    personal = data.get("personalInfo")
    if isinstance(personal, dict):
        result["personalInfo"] = PersonalInfo.model_validate(
            _strings_only(personal)
        ).model_dump(by_alias=True)

    if "summary" in data:
        result["summary"] = data.get("summary") or ""

    for field_name, model in _RESUME_LIST_MODELS.items():
        if field_name not in data:
            continue
        items = []
        for entry in data.get(field_name) or []:
            if not isinstance(entry, dict):
                continue
            item = model.model_validate({
                **_strings_only(entry),
                "id": generate_item_id(unique_suffix=True),
            })
            items.append(item.model_dump(by_alias=True))
        result[field_name] = items

    if "skills" in data:
        result["skills"] = [str(skill).strip() for skill in data.get("skills") or [] if skill]

    return result


def _strings_only(entry: Dict[str, Any]) -> Dict[str, str]:
    """Replace null values with empty strings and stringify the rest."""
    return {key: "" if value is None else str(value) for key, value in entry.items()}


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Erro da API: {response.reason}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if body.get("message"):
            return body["message"]
    return f"Erro da API: {response.reason}"
