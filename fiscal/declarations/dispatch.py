from __future__ import annotations

from typing import Callable, Dict, List

from .base import BoxSet
from .modelo111 import build_withholding_return
from .modelo115 import build_rental_withholding_return
from .modelo130 import build_prepayment_return
from .modelo180 import build_annual_rental_summary
from .modelo303 import build_vat_return
from .modelo390 import build_annual_vat_summary

Builder = Callable[..., BoxSet]

_REGISTRY: Dict[str, Builder] = {}


def register_builder(model: str, builder: Builder) -> None:
    _REGISTRY[str(model)] = builder


register_builder("303", build_vat_return)
register_builder("130", build_prepayment_return)
register_builder("111", build_withholding_return)
register_builder("115", build_rental_withholding_return)
register_builder("180", build_annual_rental_summary)
register_builder("390", build_annual_vat_summary)


class UnknownModelError(KeyError):
    pass


def get_builder(model: str | int) -> Builder:
    key = str(model).strip()
    try:
        return _REGISTRY[key]
    except KeyError as exc:
        raise UnknownModelError(f"No declaration builder registered for model {key}") from exc


def list_models() -> List[str]:
    return sorted(_REGISTRY)
