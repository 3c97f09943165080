"""
Built-in deadline type catalog and the piece triggers that suggest deadlines.

Seeded into deadline_type_catalog and deadline_piece_trigger by app.db.seed and
served directly by InMemoryCatalogRepository when no database is involved.
"""

from typing import Iterable, Optional

from app.services.deadlines.models import (
    CatalogEntry,
    CountingType,
    DeadlineCategory,
    PartyRole,
    PieceTrigger,
    PieceType,
)

DU = CountingType.DIAS_UTEIS
DC = CountingType.DIAS_CORRIDOS
SP = CountingType.SEM_PRAZO
HR = CountingType.HORAS
C = DeadlineCategory

# (type, display_name, short_name, category, legal_basis, days, counting, fatal, doubles)
_CATALOG_ROWS = (
    ("CPC-001", "Contestação", "Contestação", C.PARTE, "Art. 335 CPC", 15, DU, True, True),
    ("CPC-002", "Réplica", "Réplica", C.PARTE, "Art. 351 CPC", 15, DU, False, True),
    ("CPC-003", "Reconvenção", "Reconvenção", C.PARTE, "Art. 343 CPC", 15, DU, True, True),
    ("CPC-004", "Embargos à Execução", "Emb. Execução", C.PARTE, "Art. 915 CPC", 15, DU, True, True),
    ("CPC-005", "Impugnação ao Cumprimento de Sentença", "Impugnação", C.PARTE, "Art. 525 CPC", 15, DU, True, True),
    ("CPC-006", "Manifestação sobre Documentos", "Manif. Documentos", C.PARTE, "Art. 437 CPC", 15, DU, False, True),
    ("CPC-007", "Manifestação sobre Laudo Pericial", "Manif. Laudo", C.PARTE, "Art. 477 §1º CPC", 15, DU, False, True),
    ("CPC-010", "Apelação", "Apelação", C.RECURSAL, "Art. 1.003 CPC", 15, DU, True, True),
    ("CPC-011", "Contrarrazões de Apelação", "CRR Apelação", C.RECURSAL, "Art. 1.010 §1º CPC", 15, DU, True, True),
    ("CPC-012", "Agravo de Instrumento", "AI", C.RECURSAL, "Art. 1.015 CPC", 15, DU, True, True),
    ("CPC-014", "Agravo Interno", "Agravo Interno", C.RECURSAL, "Art. 1.021 CPC", 15, DU, True, True),
    ("CPC-015", "Embargos de Declaração", "ED", C.RECURSAL, "Art. 1.023 CPC", 5, DU, True, True),
    ("CPC-016", "Recurso Especial", "REsp", C.RECURSAL, "Art. 1.029 CPC", 15, DU, True, True),
    ("CPC-018", "Recurso Extraordinário", "RE", C.RECURSAL, "Art. 1.029 CPC", 15, DU, True, True),
    ("CPC-022", "Pagamento Voluntário (Cumprimento)", "Pagamento", C.PARTE, "Art. 523 CPC", 15, DU, True, True),
    ("CPC-026", "Decisão Interlocutória", "Decisão", C.JUIZ, "Art. 226, II CPC", 10, DU, False, False),
    ("CPC-027", "Sentença", "Sentença", C.JUIZ, "Art. 226, III CPC", 30, DU, False, False),
    ("CPC-028", "Manifestação do MP como Fiscal da Lei", "Parecer MP", C.MP, "Art. 178 c/c 180 CPC", 30, DU, False, False),
    ("CPC-029", "Entrega do Laudo Pericial", "Laudo", C.PERITO, "Art. 477 CPC", 20, DU, False, False),
    ("RJ-001", "Apresentação do Plano de RJ", "Plano RJ", C.RJ_ESTATUTARIO, "Art. 53 Lei 11.101/2005", 60, DC, True, False),
    ("RJ-002", "Habilitação de Créditos", "Habilitação", C.RJ_ESTATUTARIO, "Art. 7 §1º Lei 11.101/2005", 15, DC, True, False),
    ("RJ-004", "Objeção ao Plano de RJ", "Objeção", C.RJ_ESTATUTARIO, "Art. 55 Lei 11.101/2005", 30, DC, True, False),
    ("RJ-006", "Relatório Mensal do AJ", "RMA", C.AUXILIAR, "Art. 22, II, c Lei 11.101/2005", 30, DC, False, False),
    ("RJ-008", "Stay Period", "Stay", C.RJ_ESTATUTARIO, "Art. 6 §4º Lei 11.101/2005", 180, DC, True, False),
    ("CLT-001", "Recurso Ordinário Trabalhista", "RO Trabalhista", C.RECURSAL, "Art. 895 CLT", 8, DU, True, True),
    ("ESP-001", "Mandado de Segurança", "MS", C.PARTE, "Art. 23 Lei 12.016/2009", 120, DC, True, False),
    ("ESP-006", "Exceção de Pré-executividade", "Pré-executividade", C.PARTE, None, 0, SP, False, False),
    ("ESP-007", "Purgação da Mora (Busca e Apreensão)", "Purgação da Mora", C.PARTE, "Art. 3º §2º DL 911/69", 120, HR, True, False),
)


# UI color and icon per category
CATEGORY_STYLE: dict[DeadlineCategory, tuple[str, str]] = {
    C.PARTE: ("#2563EB", "file-text"),
    C.RECURSAL: ("#DC2626", "gavel"),
    C.JUIZ: ("#7C3AED", "scale"),
    C.MP: ("#0891B2", "landmark"),
    C.PERITO: ("#0D9488", "microscope"),
    C.AUXILIAR: ("#6B7280", "clipboard-list"),
    C.RJ_ESTATUTARIO: ("#059669", "building-2"),
}


DEFAULT_CATALOG: tuple[CatalogEntry, ...] = tuple(
    CatalogEntry(
        type=type_,
        display_name=name,
        short_name=short,
        category=category,
        legal_basis=basis,
        default_days=days,
        counting_type=counting,
        is_extendable=not fatal,
        is_fatal=fatal,
        double_for_public_entity=doubles,
        double_for_defensoria=doubles,
        color=CATEGORY_STYLE[category][0],
        icon=CATEGORY_STYLE[category][1],
    )
    for type_, name, short, category, basis, days, counting, fatal, doubles in _CATALOG_ROWS
)


PT = PieceType
R = PartyRole

# (piece, deadline type, target party, description, is_default, is_suggestion)
_TRIGGER_ROWS = (
    (PT.CITACAO, "CPC-001", R.REU, "Citação do réu abre o prazo de contestação", True, False),
    (PT.CITACAO, "CPC-003", R.REU, "Reconvenção apresentada na própria contestação", False, True),
    (PT.CITACAO_EXECUCAO, "CPC-004", R.REU, "Citação do executado para embargar", True, False),
    (PT.CITACAO_EXECUCAO, "ESP-006", R.REU, "Defesa por exceção de pré-executividade", False, True),
    (PT.CONTESTACAO, "CPC-002", R.AUTOR, "Contestação com preliminares ou fato impeditivo", True, False),
    (PT.JUNTADA_DOCUMENTOS, "CPC-006", R.AMBOS, "Documentos juntados pela parte contrária", True, False),
    (PT.LAUDO_PERICIAL, "CPC-007", R.AMBOS, "Laudo pericial juntado aos autos", True, False),
    (PT.DECISAO_INTERLOCUTORIA, "CPC-012", R.AMBOS, "Decisão interlocutória agravável (art. 1.015)", True, False),
    (PT.DECISAO_INTERLOCUTORIA, "CPC-015", R.AMBOS, "Omissão, contradição ou obscuridade na decisão", False, True),
    (PT.DECISAO_MONOCRATICA, "CPC-014", R.AMBOS, "Decisão monocrática do relator", True, False),
    (PT.DECISAO_MONOCRATICA, "CPC-015", R.AMBOS, "Omissão, contradição ou obscuridade na decisão", False, True),
    (PT.SENTENCA, "CPC-010", R.AMBOS, "Sentença publicada: prazo de apelação", True, False),
    (PT.SENTENCA, "CPC-015", R.AMBOS, "Omissão, contradição ou obscuridade na sentença", False, True),
    (PT.APELACAO, "CPC-011", R.AMBOS, "Apelação interposta pela parte contrária", True, False),
    (PT.ACORDAO, "CPC-016", R.AMBOS, "Acórdão com violação de lei federal", True, False),
    (PT.ACORDAO, "CPC-018", R.AMBOS, "Acórdão com questão constitucional", False, True),
    (PT.ACORDAO, "CPC-015", R.AMBOS, "Omissão, contradição ou obscuridade no acórdão", False, True),
    (PT.INTIMACAO_CUMPRIMENTO, "CPC-022", R.REU, "Intimação para pagamento voluntário", True, False),
    (PT.INTIMACAO_CUMPRIMENTO, "CPC-005", R.REU, "Impugnação após o prazo de pagamento", False, True),
    (PT.LIMINAR_BUSCA_APREENSAO, "ESP-007", R.REU, "Execução da liminar de busca e apreensão", True, False),
    (PT.SENTENCA_TRABALHISTA, "CLT-001", R.AMBOS, "Sentença trabalhista publicada", True, False),
    (PT.SENTENCA_TRABALHISTA, "CPC-015", R.AMBOS, "Omissão, contradição ou obscuridade na sentença", False, True),
    (PT.DEFERIMENTO_RJ, "RJ-001", R.AUTOR, "Deferimento do processamento da recuperação judicial", True, False),
    (PT.DEFERIMENTO_RJ, "RJ-008", R.AUTOR, "Início do stay period", False, True),
    (PT.EDITAL_CREDORES, "RJ-002", R.TERCEIRO, "Publicação do edital de credores", True, False),
    (PT.EDITAL_PLANO_RJ, "RJ-004", R.TERCEIRO, "Publicação do aviso de recebimento do plano", True, False),
)


DEFAULT_TRIGGERS: tuple[PieceTrigger, ...] = tuple(
    PieceTrigger(
        piece_type=piece,
        deadline_type=deadline_type,
        target_role=role,
        trigger_description=description,
        is_default=is_default,
        is_suggestion=is_suggestion,
    )
    for piece, deadline_type, role, description, is_default, is_suggestion in _TRIGGER_ROWS
)


def matches_party(trigger_role: PartyRole, party_role: Optional[PartyRole]) -> bool:
    """AMBOS triggers apply to every party filter."""
    if party_role is None:
        return True
    return trigger_role in (PartyRole(party_role), PartyRole.AMBOS)


class InMemoryCatalogRepository:
    """Catalog backed by a fixed list of entries, in the given order."""

    def __init__(
        self,
        entries: Iterable[CatalogEntry] = DEFAULT_CATALOG,
        triggers: Iterable[PieceTrigger] = DEFAULT_TRIGGERS,
    ) -> None:
        self._entries = {e.type: e for e in entries}
        self._triggers = list(triggers)

    async def get(self, deadline_type: str) -> Optional[CatalogEntry]:
        return self._entries.get(deadline_type)

    async def list_active(self, category: Optional[DeadlineCategory] = None) -> list[CatalogEntry]:
        if category is None:
            return list(self._entries.values())
        category = DeadlineCategory(category)
        return [e for e in self._entries.values() if e.category is category]

    async def list_triggers(
        self, piece_type: PieceType, party_role: Optional[PartyRole] = None
    ) -> list[PieceTrigger]:
        piece_type = PieceType(piece_type)
        return [
            t for t in self._triggers
            if t.piece_type is piece_type and matches_party(t.target_role, party_role)
        ]
