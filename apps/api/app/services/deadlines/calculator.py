"""
Catalog-driven procedural deadline calculator (CPC/2015).

Rules implemented:
  - Art. 219:  business days only for procedural deadlines (DIAS_UTEIS)
  - Art. 224:  exclude start day, include end day, extend to next business day
  - Art. 231:  start date from publicação / intimação / citação (DJE flow)
  - Art. 183 / 186 / 180:  doubled deadlines for Fazenda, Defensoria and MP
  - Art. 220:  recesso forense (Dec 20 - Jan 20) suspends counting
  - Art. 229:  litisconsórcio doubling (logged only, never applied)

Also suggests the deadlines a received piece opens (piece triggers).
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from app.config import settings
from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.services.deadlines.business_days import BusinessCalendar
from app.services.deadlines.models import (
    START_METHOD_LABELS,
    CalcLogEntry,
    CatalogEntry,
    CountingType,
    DeadlineCalcInput,
    DeadlineCalcResult,
    DeadlineCatalogRepository,
    DeadlineCategory,
    DeadlineStartMethod,
    PartyRole,
    PieceType,
    SuggestedDeadline,
)

logger = logging.getLogger(__name__)

SM = DeadlineStartMethod


def fmt_br(d: date) -> str:
    return d.strftime("%d/%m/%Y")


def in_forensic_recess(d: date) -> bool:
    """Dec 20 through Jan 20, inclusive."""
    return (d.month == 12 and d.day >= 20) or (d.month == 1 and d.day <= 20)


def recess_end(d: date) -> date:
    """Jan 21 that closes the recess `d` falls in."""
    year = d.year + 1 if d.month == 12 else d.year
    return date(year, 1, 21)


class _CalcLog:
    def __init__(self) -> None:
        self.entries: list[CalcLogEntry] = []

    def add(
        self,
        rule: str,
        description: str,
        before: Optional[date] = None,
        after: Optional[date] = None,
    ) -> None:
        self.entries.append(CalcLogEntry(
            step=len(self.entries) + 1,
            rule=rule,
            description=description,
            date_before=before.isoformat() if before else None,
            date_after=after.isoformat() if after else None,
        ))


@dataclass(frozen=True)
class _Doubling:
    effective_days: int
    is_doubled: bool = False
    reason: Optional[str] = None


# Start methods that take a single date: (field precedence, article, rule code)
_DIRECT_START_METHODS: dict[DeadlineStartMethod, tuple[tuple[str, ...], str, str]] = {
    SM.INTIMACAO_PESSOAL: (("intimacao_date", "ciencia_date", "start_date"), "Art. 231, II, CPC", "ART_231_PESSOAL"),
    SM.INTIMACAO_ELETRONICA: (("ciencia_date", "intimacao_date", "start_date"), "Art. 231, V, CPC", "ART_231_ELETRONICA"),
    SM.INTIMACAO_CORREIO: (("intimacao_date", "ciencia_date", "start_date"), "Art. 231, I, CPC", "ART_231_CORREIO"),
    SM.INTIMACAO_EDITAL: (("intimacao_date", "start_date"), "Art. 231, IV, CPC", "ART_231_EDITAL"),
    SM.COMPARECIMENTO_ESPONTANEO: (("ciencia_date", "intimacao_date", "start_date"), "Art. 239 §1º, CPC", "ART_239_COMPARECIMENTO"),
    SM.AUDIENCIA: (("start_date", "intimacao_date"), "Art. 231, VII, CPC", "ART_231_AUDIENCIA"),
    SM.CARGA_AUTOS: (("start_date", "ciencia_date"), "Art. 231, VIII, CPC", "ART_231_CARGA"),
    SM.DATA_FIXA: (("start_date",), "", "DATA_FIXA"),
    SM.MANUAL: (("start_date",), "", "DATA_FIXA"),
}


class DeadlineCalculator:
    """
    Computes due dates from catalog defaults plus the CPC rules above.

    Every result carries a numbered calculation log so the UI can show how the
    date was reached.
    """

    def __init__(
        self,
        calendar: BusinessCalendar,
        catalog: DeadlineCatalogRepository,
        *,
        margin_days: Optional[int] = None,
        urgent_days: Optional[int] = None,
        attention_days: Optional[int] = None,
    ) -> None:
        self.calendar = calendar
        self.catalog = catalog
        self.margin_days = settings.INTERNAL_DUE_MARGIN_DAYS if margin_days is None else margin_days
        self.urgent_days = settings.DEADLINE_URGENT_DAYS if urgent_days is None else urgent_days
        self.attention_days = settings.DEADLINE_ATTENTION_DAYS if attention_days is None else attention_days

    async def get_type_catalog(self, category: Optional[DeadlineCategory] = None) -> list[CatalogEntry]:
        return await self.catalog.list_active(category)

    async def get_suggested_deadlines(
        self,
        piece_type: PieceType,
        party_role: Optional[PartyRole] = None,
    ) -> list[SuggestedDeadline]:
        """
        Deadlines opened by receiving `piece_type`, defaults first then by type.

        Triggers pointing at types missing from the active catalog are skipped.
        """
        triggers = await self.catalog.list_triggers(piece_type, party_role)
        if not triggers:
            return []

        entries = {e.type: e for e in await self.catalog.list_active()}
        suggestions = []
        for trigger in sorted(triggers, key=lambda t: (not t.is_default, t.deadline_type)):
            entry = entries.get(trigger.deadline_type)
            if entry is None:
                logger.warning(
                    "Piece trigger %s -> %s has no active catalog entry",
                    trigger.piece_type.value, trigger.deadline_type,
                )
                continue
            suggestions.append(SuggestedDeadline(
                deadline_type=entry.type,
                display_name=entry.display_name,
                short_name=entry.short_name,
                default_days=entry.default_days,
                counting_type=entry.counting_type,
                target_role=trigger.target_role,
                trigger_description=trigger.trigger_description,
                is_suggestion=trigger.is_suggestion,
                is_default=trigger.is_default,
                legal_basis=entry.legal_basis,
                is_fatal=entry.is_fatal,
                category=entry.category,
                color=entry.color,
                icon=entry.icon,
            ))
        return suggestions

    async def simulate(self, data: DeadlineCalcInput, *, today: Optional[date] = None) -> DeadlineCalcResult:
        """Preview alias of calculate(); nothing is persisted by either."""
        return await self.calculate(data, today=today)

    async def calculate(self, data: DeadlineCalcInput, *, today: Optional[date] = None) -> DeadlineCalcResult:
        today = today or date.today()
        log = _CalcLog()
        warnings: list[str] = []

        entry = await self.catalog.get(data.deadline_type)
        if entry is None:
            raise NotFoundError("Tipo de prazo", data.deadline_type)

        log.add(
            "CATALOGO",
            f"Tipo de prazo: {entry.display_name} ({entry.short_name}). "
            f"Base legal: {entry.legal_basis or 'N/A'}. "
            f"Prazo padrão: {entry.default_days} dias ({entry.counting_type.value}). "
            f"Fatal: {'Sim' if entry.is_fatal else 'Não'}.",
        )

        original_days = data.custom_days if data.custom_days is not None else entry.default_days
        counting_type = data.custom_counting_type or entry.counting_type

        if data.custom_days is not None and data.custom_days != entry.default_days:
            log.add(
                "OVERRIDE_DIAS",
                f"Prazo padrão do catálogo ({entry.default_days} dias) substituído por "
                f"valor personalizado: {data.custom_days} dias.",
            )
        if data.custom_counting_type is not None and data.custom_counting_type != entry.counting_type:
            log.add(
                "OVERRIDE_CONTAGEM",
                f"Tipo de contagem padrão ({entry.counting_type.value}) substituído por "
                f"{data.custom_counting_type.value}.",
            )

        start = self.compute_start_date(data, log=log, today=today)
        doubling = self._apply_doubling(original_days, data, entry, log)
        effective_days = doubling.effective_days

        def result(due: date, internal: date, remaining: int, **extra) -> DeadlineCalcResult:
            return DeadlineCalcResult(
                start_date=start,
                due_date=due,
                internal_due_date=internal,
                original_days=extra.pop("original_days", original_days),
                effective_days=extra.pop("effective_days", effective_days),
                counting_type=counting_type,
                is_doubled=extra.pop("is_doubled", doubling.is_doubled),
                double_reason=extra.pop("double_reason", doubling.reason),
                business_days_remaining=remaining,
                calculation_log=log.entries,
                warnings=warnings,
                legal_basis=entry.legal_basis,
                is_fatal=entry.is_fatal,
                **extra,
            )

        if counting_type is CountingType.SEM_PRAZO:
            log.add(
                "SEM_PRAZO",
                f"Este tipo de prazo ({entry.display_name}) não possui contagem de dias.",
            )
            warnings.append(
                f"Este prazo ({entry.display_name}) não possui contagem de dias definida. "
                "Verifique a determinação judicial para o prazo específico."
            )
            return result(
                start, start, 0,
                original_days=0, effective_days=0, is_doubled=False, double_reason=None,
            )

        if counting_type is CountingType.HORAS:
            due_at = datetime.combine(start, time.min) + timedelta(hours=effective_days)
            due = due_at.date()
            log.add(
                "CONTAGEM_HORAS",
                f"Prazo em horas: {effective_days}h a partir de {fmt_br(start)}. "
                f"Vencimento: {due_at.isoformat()}.",
                before=start, after=due,
            )
            remaining = await self.calendar.business_days_until(due, data.uf, today=today)
            internal = await self._internal_due_date(due, data.uf, today)
            return result(due, internal, remaining, due_at=due_at)

        count_from = start
        if in_forensic_recess(count_from):
            moved = await self.calendar.next_business_day(recess_end(count_from), data.uf)
            log.add(
                "ART_220_RECESSO",
                f"Art. 220 CPC: início da contagem ({fmt_br(count_from)}) no recesso forense "
                f"(20/dez a 20/jan). Ajustado para {fmt_br(moved)}.",
                before=count_from, after=moved,
            )
            warnings.append(
                f"Recesso forense (Art. 220 CPC): o início da contagem foi deslocado para {fmt_br(moved)}."
            )
            count_from = moved

        unit = "dias úteis" if counting_type is CountingType.DIAS_UTEIS else "dias corridos"
        log.add(
            "ART_224_INICIO",
            f"Art. 224 CPC: exclui-se o dia do início ({fmt_br(count_from)}) e inclui-se o dia "
            f"do vencimento. Contagem de {effective_days} {unit}.",
            before=count_from,
        )

        if counting_type is CountingType.DIAS_UTEIS:
            due = await self.calendar.compute_deadline(count_from, effective_days, data.uf)
        else:
            due = count_from + timedelta(days=effective_days)
            if not await self.calendar.is_business_day(due, data.uf):
                rolled = await self.calendar.next_business_day(due, data.uf)
                log.add(
                    "ART_224_P1_CORRIDOS",
                    f"Art. 224 §1º CPC: vencimento em dias corridos caiu em dia não útil "
                    f"({fmt_br(due)}). Prorrogado para {fmt_br(rolled)}.",
                    before=due, after=rolled,
                )
                due = rolled

        if in_forensic_recess(due):
            moved = await self.calendar.next_business_day(recess_end(due), data.uf)
            log.add(
                "ART_220_VENCIMENTO_RECESSO",
                f"Art. 220 CPC: vencimento ({fmt_br(due)}) no recesso forense. "
                f"Prorrogado para {fmt_br(moved)}.",
                before=due, after=moved,
            )
            warnings.append(
                f"Recesso forense (Art. 220 CPC): o vencimento foi prorrogado para {fmt_br(moved)}."
            )
            due = moved

        if not await self.calendar.is_business_day(due, data.uf):
            rolled = await self.calendar.next_business_day(due, data.uf)
            log.add(
                "ART_224_P1_AJUSTE_FINAL",
                f"Art. 224 §1º CPC: vencimento em {fmt_br(due)} não é dia útil. "
                f"Prorrogado para {fmt_br(rolled)}.",
                before=due, after=rolled,
            )
            due = rolled

        log.add("VENCIMENTO", f"Data de vencimento calculada: {fmt_br(due)}.", after=due)

        internal = await self._internal_due_date(due, data.uf, today)
        log.add(
            "PRAZO_INTERNO",
            f"Prazo interno (margem de segurança): {fmt_br(internal)} "
            f"({self.margin_days} dias úteis antes do vencimento).",
            after=internal,
        )

        remaining = await self.calendar.business_days_until(due, data.uf, today=today)
        log.add("DIAS_RESTANTES", f"Dias úteis restantes a partir de hoje: {remaining}.")

        warnings.extend(self._urgency_warnings(remaining, due))
        if entry.is_fatal:
            warnings.append(
                "Prazo FATAL: não admite prorrogação. Perda do prazo acarreta preclusão temporal."
            )

        if data.is_electronic is False:
            log.add(
                "ART_229_INFO",
                "Art. 229 CPC (litisconsórcio): em processo físico com litisconsortes de "
                "procuradores diferentes o prazo pode ser dobrado. Regra NÃO aplicada "
                "automaticamente; verifique manualmente.",
            )

        logger.debug(
            "Deadline %s from %s (%s, %s days, uf=%s) -> %s",
            entry.type, start, counting_type.value, effective_days, data.uf, due,
        )
        return result(due, internal, remaining)

    def compute_start_date(
        self,
        data: DeadlineCalcInput,
        *,
        log: Optional[_CalcLog] = None,
        today: Optional[date] = None,
    ) -> date:
        """
        The day counting starts from (itself excluded, art. 224).

        PUBLICACAO_DJE: disponibilização -> publicação (next day unless given)
        -> start = publicação + 1. Other methods take the first date present in
        their precedence list and raise InvalidArgumentError when none is.
        """
        log = log if log is not None else _CalcLog()
        method = data.start_method
        label = START_METHOD_LABELS.get(method, method.value)

        if method is SM.PUBLICACAO_DJE:
            if data.disponibilizacao_date:
                disponibilizacao = data.disponibilizacao_date
                publicacao = data.publicacao_date or disponibilizacao + timedelta(days=1)
                start = publicacao + timedelta(days=1)
                log.add(
                    "ART_231_DJE",
                    f"Art. 231, I, CPC. Disponibilização: {fmt_br(disponibilizacao)}. "
                    f"Publicação: {fmt_br(publicacao)}. Início da contagem: {fmt_br(start)}.",
                    before=disponibilizacao, after=start,
                )
                return start

            if data.publicacao_date:
                start = data.publicacao_date + timedelta(days=1)
                log.add(
                    "ART_231_DJE_PUBLICACAO",
                    f"Art. 231, I, CPC. Publicação no DJE: {fmt_br(data.publicacao_date)}. "
                    f"Início da contagem: {fmt_br(start)}.",
                    before=data.publicacao_date, after=start,
                )
                return start

            start = data.start_date or today or date.today()
            log.add(
                "ART_231_DJE_FALLBACK",
                f"{label}: nenhuma data de disponibilização ou publicação informada. "
                f"Utilizando data de início direta: {fmt_br(start)}.",
                after=start,
            )
            return start

        fields, article, rule = _DIRECT_START_METHODS[method]
        start = next((getattr(data, f) for f in fields if getattr(data, f) is not None), None)
        if start is None:
            raise InvalidArgumentError(
                f"{method.value}: é necessário fornecer {' ou '.join(fields)}.",
                details={"start_method": method.value, "accepted_fields": list(fields)},
            )

        prefix = f"{article} - " if article else ""
        log.add(
            rule,
            f"{prefix}{label} em {fmt_br(start)}. Contagem inicia a partir desta data "
            "(dia excluído, Art. 224).",
            after=start,
        )
        return start

    def _apply_doubling(
        self,
        original_days: int,
        data: DeadlineCalcInput,
        entry: CatalogEntry,
        log: _CalcLog,
    ) -> _Doubling:
        # Doublings never stack; first applicable rule wins.
        candidates = (
            (data.is_public_entity and entry.double_for_public_entity,
             "ART_183_FAZENDA", "Art. 183 CPC - Fazenda Pública (prazo em dobro)"),
            (data.is_defensoria and entry.double_for_defensoria,
             "ART_186_DEFENSORIA", "Art. 186 CPC - Defensoria Pública (prazo em dobro)"),
            (data.is_mp,
             "ART_180_MP", "Art. 180 CPC - Ministério Público (prazo em dobro)"),
        )
        for applies, rule, reason in candidates:
            if applies:
                doubled = original_days * 2
                log.add(rule, f"{reason}: {original_days} dias -> {doubled} dias.")
                return _Doubling(effective_days=doubled, is_doubled=True, reason=reason)

        if data.is_public_entity or data.is_defensoria:
            who = "Fazenda Pública" if data.is_public_entity else "Defensoria Pública"
            log.add(
                "DOBRA_NAO_APLICAVEL",
                f"{who}: o catálogo indica que {entry.display_name} NÃO admite prazo em dobro.",
            )
        return _Doubling(effective_days=original_days)

    async def _internal_due_date(self, due: date, uf: Optional[str], today: date) -> date:
        internal = await self.calendar.subtract_business_days(due, self.margin_days, uf)
        return max(internal, today)

    def _urgency_warnings(self, remaining: int, due: date) -> list[str]:
        if remaining < 0:
            return [f"ALERTA CRÍTICO: prazo VENCIDO há {abs(remaining)} dia(s) útil(eis)!"]
        if remaining == 0:
            return [f"ALERTA: prazo vence HOJE ({fmt_br(due)})!"]
        if remaining <= self.urgent_days:
            return [f"URGENTE: restam apenas {remaining} dia(s) útil(eis) para o prazo!"]
        if remaining <= self.attention_days:
            return [f"ATENÇÃO: restam {remaining} dias úteis para o prazo."]
        return []
