import logging
from typing import Any, List, Optional

from .base import Normalizer
from .entities import RuleNormalizer
from .pagination import normalize_list, normalize_meta, unwrap_record
from .ranking import rank_accounts
from .types import CanonicalModel, EntityKind, NormalizedPage

log = logging.getLogger(__name__)


class NormalizerPipeline:
    """
    Runs one record normalizer over whole backend responses.

    list payload -> raw items -> canonical records (records without an
    identity dropped) -> page meta. Accounts are ranked by their sort key.
    """
    def __init__(self, normalizer: Normalizer):
        self.normalizer = normalizer

    def normalize_record(self, kind: EntityKind, payload: Any) -> Optional[CanonicalModel]:
        # single-record responses may be wrapped as {"data": {...}}
        return self.normalizer.normalize_record(kind, unwrap_record(payload))

    def normalize_many(self, kind: EntityKind, items: List[Any]) -> List[CanonicalModel]:
        out: List[CanonicalModel] = []
        for item in items:
            rec = self.normalizer.normalize_record(kind, item)
            if rec is not None:
                out.append(rec)
        if len(out) != len(items):
            log.debug("%s: %d of %d records had no identity", kind, len(items) - len(out), len(items))
        if kind == "account":
            out = rank_accounts(out)
        return out

    def normalize_page(self, kind: EntityKind, payload: Any, page: int, limit: int) -> NormalizedPage:
        items = normalize_list(payload)
        return NormalizedPage(
            data=self.normalize_many(kind, items),
            meta=normalize_meta(payload, page, limit, len(items)),
        )


def get_default_normalizer() -> NormalizerPipeline:
    """Factory for the default pipeline (rule-based record normalizer)."""
    return NormalizerPipeline(RuleNormalizer())
