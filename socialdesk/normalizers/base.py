# socialdesk/normalizers/base.py
from typing import Any, Optional, Protocol
from .types import CanonicalModel, EntityKind

class Normalizer(Protocol):
    def normalize_record(self, kind: EntityKind, rec: Any) -> Optional[CanonicalModel]:
        """Return a NEW canonical record, or None when `rec` has no identity. Do not mutate `rec`."""
        ...
