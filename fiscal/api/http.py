import logging
from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from fiscal import __version__
from fiscal.config import get_settings
from fiscal.core.accumulation import QuarterFigures
from fiscal.core.errors import FiscalError
from fiscal.core.identity import classify_tax_id, is_valid_bank_account, is_valid_tax_id, normalize_tax_id
from fiscal.core.quotas import validate_vat_quota, validate_withholding_quota, vat_quota, withholding_quota
from fiscal.core.risk import score_dependency_risk
from fiscal.core.social_security import quote_social_security
from fiscal.declarations import (
    QuarterlyBoxSet,
    RentalPayment,
    VatBreakdown,
    build_prepayment_return,
    build_rental_withholding_return,
    build_vat_return,
)
from fiscal.lifespan import build_application_lifespan

logger = logging.getLogger("fiscal.api")


async def _announce_year_range(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "Fiscal engine ready; years=%s-%s strict_company_id=%s",
        settings.min_supported_year,
        settings.max_supported_year,
        settings.strict_company_id,
    )


app = FastAPI(
    title="Fiscal Engine",
    description="Quotas, identifier checks and quarterly declarations for self-employed filers.",
    version=__version__,
    lifespan=build_application_lifespan("api", startup_hook=_announce_year_range),
)


@app.exception_handler(FiscalError)
async def _fiscal_error_handler(request: Request, exc: FiscalError) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc.as_issue())
    return JSONResponse(status_code=422, content={"detail": [exc.as_issue()]})


class QuotaRequest(BaseModel):
    base: Decimal
    rate: Decimal
    declared: Decimal | None = None


class TaxIdRequest(BaseModel):
    value: str


class IbanRequest(BaseModel):
    value: str


class SocialSecurityRequest(BaseModel):
    monthly_net_income: Decimal
    flat_rate: bool = False
    chosen_base: Decimal | None = None


class RiskRequest(BaseModel):
    dependency_percentage: Decimal
    has_independence_expenses: bool
    high_risk_expense_count: int = Field(default=0, ge=0)


class QuarterInput(BaseModel):
    income: Decimal = Decimal("0")
    deductible_expense: Decimal = Decimal("0")
    withholding: Decimal = Decimal("0")


class PrepaymentRequest(BaseModel):
    year: int
    quarter: int
    quarters: list[QuarterInput] = Field(max_length=4)


class VatBases(BaseModel):
    super_reduced: Decimal = Decimal("0")
    reduced: Decimal = Decimal("0")
    general: Decimal = Decimal("0")

    def breakdown(self) -> VatBreakdown:
        return VatBreakdown.from_bases(self.super_reduced, self.reduced, self.general)


class VatReturnRequest(BaseModel):
    year: int
    quarter: int
    collected: VatBases = VatBases()
    deductible: VatBases = VatBases()
    prior_offsets: Decimal = Decimal("0")


class RentalReturnRequest(BaseModel):
    year: int
    quarter: int
    payments: list[RentalPayment] = []
    correction: Decimal = Decimal("0")

    model_config = ConfigDict(extra="forbid")


def _declaration_payload(box_set: QuarterlyBoxSet) -> dict:
    return {
        "model": box_set.model,
        "year": box_set.year,
        "quarter": box_set.quarter,
        "boxes": box_set.boxes(),
        "result": box_set.result,
        "action": box_set.action.value,
    }


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    models = getattr(app.state, "declaration_models", [])
    return {
        "status": "ok",
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
            "package": __version__,
        },
        "years": {"min": settings.min_supported_year, "max": settings.max_supported_year},
        "models": models,
    }


@app.post("/quotas/vat")
def vat(req: QuotaRequest):
    response = {"quota": vat_quota(req.base, req.rate)}
    if req.declared is not None:
        response["valid"] = validate_vat_quota(req.base, req.rate, req.declared)
    return response


@app.post("/quotas/withholding")
def withholding(req: QuotaRequest):
    response = {"quota": withholding_quota(req.base, req.rate)}
    if req.declared is not None:
        response["valid"] = validate_withholding_quota(req.base, req.rate, req.declared)
    return response


@app.post("/validate/tax-id")
def validate_tax_id(req: TaxIdRequest):
    kind = classify_tax_id(req.value)
    return {
        "normalized": normalize_tax_id(req.value),
        "kind": kind.value if kind is not None else None,
        "valid": is_valid_tax_id(req.value),
    }


@app.post("/validate/iban")
def validate_iban(req: IbanRequest):
    return {"valid": is_valid_bank_account(req.value)}


@app.post("/social-security/quota")
def social_security(req: SocialSecurityRequest):
    quote = quote_social_security(req.monthly_net_income, req.flat_rate, req.chosen_base)
    return {
        "path": quote.path.value,
        "base": quote.base,
        "main_quota": quote.main_quota,
        "supplementary_quota": quote.supplementary_quota,
        "total": quote.total,
        "bracket": {
            "tier": quote.bracket.tier,
            "min_base": quote.bracket.min_base,
            "max_base": quote.bracket.max_base,
        },
    }


@app.post("/risk/score")
def risk_score(req: RiskRequest):
    score = score_dependency_risk(
        req.dependency_percentage, req.has_independence_expenses, req.high_risk_expense_count
    )
    return {
        "score": score.score,
        "tier": score.tier.value,
        "factors": [{"name": f.name, "points": f.points, "description": f.description} for f in score.factors],
    }


@app.post("/declarations/130")
def declaration_130(req: PrepaymentRequest):
    quarters = [QuarterFigures.of(q.income, q.deductible_expense, q.withholding) for q in req.quarters]
    return _declaration_payload(build_prepayment_return(quarters, req.quarter, req.year))


@app.post("/declarations/303")
def declaration_303(req: VatReturnRequest):
    box_set = build_vat_return(
        req.collected.breakdown(), req.deductible.breakdown(), req.quarter, req.year, req.prior_offsets
    )
    return _declaration_payload(box_set)


@app.post("/declarations/115")
def declaration_115(req: RentalReturnRequest):
    box_set = build_rental_withholding_return(req.payments, req.quarter, req.year, req.correction)
    payload = _declaration_payload(box_set)
    payload["payees"] = list(box_set.payees)
    return payload
