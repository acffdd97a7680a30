"""
Data models shared by the extractor, the submitter and the orchestrator.

CompanyProfile is built once per run from the source page, handed to the
submitter, then dropped. Only the derived info.txt / logo artifacts survive.
"""
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

NO_LOGO = "N/A"


# ============================================================================
# Company profile
# ============================================================================

class CompanyProfile(BaseModel):
    """Structured record extracted from one source page"""
    company_name: str = Field(..., description="Display name, e.g. 'Acme Corp'")
    ticker: str = ""
    exchange: str = ""
    industry: str = ""
    sector: str = ""
    employees: str = ""
    location: str = ""
    website: str = ""
    description: str = ""
    social_links: Dict[str, str] = Field(default_factory=dict, description="platform -> URL, only discovered platforms")
    logo_url: Optional[str] = Field(None, description="Absolute logo URL resolved from the markup")
    logo_image_path: str = Field(NO_LOGO, description="Persisted logo file or the 'N/A' sentinel")
    source_url: str = ""

    @property
    def has_logo(self) -> bool:
        return self.logo_image_path != NO_LOGO and Path(self.logo_image_path).is_file()

    @property
    def logo_file_name(self) -> str:
        """File name written to info.txt ('N/A' when no logo was persisted)"""
        if self.logo_image_path == NO_LOGO:
            return NO_LOGO
        return Path(self.logo_image_path).name


# ============================================================================
# Extraction result
# ============================================================================

class FailureKind(str, Enum):
    """Why an extraction produced no profile."""
    NETWORK = "network"
    PARSE = "parse"
    STORAGE = "storage"

    @property
    def retryable(self) -> bool:
        return self is not FailureKind.PARSE


class ExtractionResult(BaseModel):
    """Either a persisted profile or a failure kind with detail."""
    profile: Optional[CompanyProfile] = None
    kind: Optional[FailureKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.profile is not None and self.kind is None

    @classmethod
    def success(cls, profile: CompanyProfile) -> "ExtractionResult":
        return cls(profile=profile)

    @classmethod
    def failure(cls, kind: FailureKind, detail: str) -> "ExtractionResult":
        return cls(kind=kind, detail=detail)


# ============================================================================
# Submission result
# ============================================================================

class SubmitStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


class SubmitResult(BaseModel):
    """Outcome of one atomic click-and-confirm."""
    status: SubmitStatus
    detail: str = ""
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SUCCESS
