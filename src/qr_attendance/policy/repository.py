from __future__ import annotations

from typing import Optional, Protocol

from .model import CompanySettings


class CompanySettingsRepository(Protocol):
    def get_current(self) -> Optional[CompanySettings]:
        raise NotImplementedError
