"""
Data models for the catalog-driven deadline calculator.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel, Field, field_validator

from app.core.validators import MAX_DEADLINE_DAYS, validate_calendar_date, validate_uf


class CountingType(str, Enum):
    DIAS_UTEIS = "DIAS_UTEIS"
    DIAS_CORRIDOS = "DIAS_CORRIDOS"
    HORAS = "HORAS"
    SEM_PRAZO = "SEM_PRAZO"


class DeadlineStartMethod(str, Enum):
    PUBLICACAO_DJE = "PUBLICACAO_DJE"
    INTIMACAO_PESSOAL = "INTIMACAO_PESSOAL"
    INTIMACAO_ELETRONICA = "INTIMACAO_ELETRONICA"
    INTIMACAO_CORREIO = "INTIMACAO_CORREIO"
    INTIMACAO_EDITAL = "INTIMACAO_EDITAL"
    COMPARECIMENTO_ESPONTANEO = "COMPARECIMENTO_ESPONTANEO"
    AUDIENCIA = "AUDIENCIA"
    CARGA_AUTOS = "CARGA_AUTOS"
    DATA_FIXA = "DATA_FIXA"
    MANUAL = "MANUAL"


START_METHOD_LABELS: dict[DeadlineStartMethod, str] = {
    DeadlineStartMethod.PUBLICACAO_DJE: "Publicação no DJE",
    DeadlineStartMethod.INTIMACAO_PESSOAL: "Intimação pessoal",
    DeadlineStartMethod.INTIMACAO_ELETRONICA: "Intimação eletrônica",
    DeadlineStartMethod.INTIMACAO_CORREIO: "Intimação por correio (AR)",
    DeadlineStartMethod.INTIMACAO_EDITAL: "Intimação por edital",
    DeadlineStartMethod.COMPARECIMENTO_ESPONTANEO: "Comparecimento espontâneo",
    DeadlineStartMethod.AUDIENCIA: "Audiência",
    DeadlineStartMethod.CARGA_AUTOS: "Carga dos autos",
    DeadlineStartMethod.DATA_FIXA: "Data fixa",
    DeadlineStartMethod.MANUAL: "Data definida manualmente",
}


class DeadlineCategory(str, Enum):
    PARTE = "PARTE"
    RECURSAL = "RECURSAL"
    JUIZ = "JUIZ"
    MP = "MP"
    PERITO = "PERITO"
    AUXILIAR = "AUXILIAR"
    RJ_ESTATUTARIO = "RJ_ESTATUTARIO"


class PieceType(str, Enum):
    """Procedural act whose receipt opens one or more deadlines."""

    CITACAO = "CITACAO"
    CITACAO_EXECUCAO = "CITACAO_EXECUCAO"
    CONTESTACAO = "CONTESTACAO"
    JUNTADA_DOCUMENTOS = "JUNTADA_DOCUMENTOS"
    LAUDO_PERICIAL = "LAUDO_PERICIAL"
    DECISAO_INTERLOCUTORIA = "DECISAO_INTERLOCUTORIA"
    DECISAO_MONOCRATICA = "DECISAO_MONOCRATICA"
    SENTENCA = "SENTENCA"
    APELACAO = "APELACAO"
    ACORDAO = "ACORDAO"
    INTIMACAO_CUMPRIMENTO = "INTIMACAO_CUMPRIMENTO"
    LIMINAR_BUSCA_APREENSAO = "LIMINAR_BUSCA_APREENSAO"
    SENTENCA_TRABALHISTA = "SENTENCA_TRABALHISTA"
    DEFERIMENTO_RJ = "DEFERIMENTO_RJ"
    EDITAL_CREDORES = "EDITAL_CREDORES"
    EDITAL_PLANO_RJ = "EDITAL_PLANO_RJ"


class PartyRole(str, Enum):
    AUTOR = "AUTOR"
    REU = "REU"
    TERCEIRO = "TERCEIRO"
    # Either side of the case may act on the deadline.
    AMBOS = "AMBOS"


class CatalogEntry(BaseModel):
    type: str
    display_name: str
    short_name: str
    category: DeadlineCategory
    legal_basis: Optional[str] = None
    default_days: int = Field(ge=0)
    counting_type: CountingType = CountingType.DIAS_UTEIS
    is_extendable: bool = False
    is_fatal: bool = False
    double_for_public_entity: bool = True
    double_for_defensoria: bool = True
    color: str = "#6B7280"
    icon: Optional[str] = None

    model_config = {"from_attributes": True}


class DeadlineCalcInput(BaseModel):
    deadline_type: str
    start_method: DeadlineStartMethod

    # DJE publication flow (art. 231 CPC)
    disponibilizacao_date: Optional[date] = None
    publicacao_date: Optional[date] = None
    intimacao_date: Optional[date] = None
    ciencia_date: Optional[date] = None

    start_date: Optional[date] = None

    custom_days: Optional[int] = Field(default=None, ge=0, le=MAX_DEADLINE_DAYS)
    custom_counting_type: Optional[CountingType] = None

    is_public_entity: bool = False
    is_defensoria: bool = False
    is_mp: bool = False
    is_electronic: Optional[bool] = None

    uf: Optional[str] = None
    tribunal: Optional[str] = None

    _validate_uf = field_validator("uf", mode="before")(validate_uf)
    _validate_dates = field_validator(
        "disponibilizacao_date", "publicacao_date", "intimacao_date", "ciencia_date", "start_date"
    )(validate_calendar_date)


class CalcLogEntry(BaseModel):
    step: int
    rule: str
    description: str
    date_before: Optional[str] = None
    date_after: Optional[str] = None


class DeadlineCalcResult(BaseModel):
    start_date: date
    due_date: date
    due_at: Optional[datetime] = None
    internal_due_date: date
    original_days: int
    effective_days: int
    counting_type: CountingType
    is_doubled: bool = False
    double_reason: Optional[str] = None
    business_days_remaining: int
    calculation_log: list[CalcLogEntry] = []
    warnings: list[str] = []
    legal_basis: Optional[str] = None
    is_fatal: bool = False


class PieceTrigger(BaseModel):
    piece_type: PieceType
    deadline_type: str
    target_role: PartyRole
    trigger_description: str
    is_default: bool = False
    is_suggestion: bool = True

    model_config = {"from_attributes": True}


class SuggestedDeadline(BaseModel):
    deadline_type: str
    display_name: str
    short_name: str
    default_days: int
    counting_type: CountingType
    target_role: PartyRole
    trigger_description: str
    is_suggestion: bool
    is_default: bool
    legal_basis: Optional[str] = None
    is_fatal: bool
    category: DeadlineCategory
    color: str
    icon: Optional[str] = None


class DeadlineCatalogRepository(Protocol):
    async def get(self, deadline_type: str) -> Optional[CatalogEntry]: ...

    async def list_active(self, category: Optional[DeadlineCategory] = None) -> list[CatalogEntry]: ...

    async def list_triggers(
        self, piece_type: PieceType, party_role: Optional[PartyRole] = None
    ) -> list[PieceTrigger]: ...
