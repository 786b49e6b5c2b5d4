"""Box sets for the quarterly and annual declarations of a self-employed filer."""

from .base import AnnualBoxSet, BoxSet, FilingAction, QuarterlyBoxSet, QuarterLine, action_for
from .dispatch import UnknownModelError, get_builder, list_models, register_builder
from .modelo111 import Modelo111BoxSet, PayeeKind, WithheldPayment, build_withholding_return
from .modelo115 import Modelo115BoxSet, RentalPayment, build_rental_withholding_return
from .modelo130 import Modelo130BoxSet, build_prepayment_return
from .modelo180 import Modelo180BoxSet, build_annual_rental_summary
from .modelo303 import Modelo303BoxSet, VatBreakdown, VatTier, build_vat_return, simple_vat_result
from .modelo390 import Modelo390BoxSet, build_annual_vat_summary

__all__ = [
    "BoxSet",
    "QuarterlyBoxSet",
    "QuarterLine",
    "AnnualBoxSet",
    "FilingAction",
    "action_for",
    "VatTier",
    "VatBreakdown",
    "Modelo303BoxSet",
    "build_vat_return",
    "simple_vat_result",
    "Modelo130BoxSet",
    "build_prepayment_return",
    "PayeeKind",
    "WithheldPayment",
    "Modelo111BoxSet",
    "build_withholding_return",
    "RentalPayment",
    "Modelo115BoxSet",
    "build_rental_withholding_return",
    "Modelo180BoxSet",
    "Modelo390BoxSet",
    "build_annual_rental_summary",
    "build_annual_vat_summary",
    "UnknownModelError",
    "get_builder",
    "list_models",
    "register_builder",
]
