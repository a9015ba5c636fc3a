"""Pydantic request/response models."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


# --- Request ---


class CheckRequest(BaseModel):
    """Request body for source text analysis."""

    code: str = Field(..., description="CSS or JavaScript/TypeScript source")
    language: str = Field(..., description="Language: css, javascript, js, typescript or tsx")
    filename: str = Field(default="input", description="Virtual filename for reporting")
    level: Optional[str] = Field(default=None, description="Required Baseline level: low/newly or high/widely")


# --- Issue (response) ---


class IssueOut(BaseModel):
    """Single classified feature usage."""

    severity: str = Field(..., description="error, warning or info")
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    property: Optional[str] = None
    value: Optional[str] = None
    api: Optional[str] = None
    baseline: Union[str, bool, None] = Field(default=None, description='"high", "low", false or null')
    support: Optional[Dict[str, str]] = None
    bcd_key: str = Field(..., alias="bcdKey")
    compatible: bool

    model_config = {"populate_by_name": True}


class SummaryOut(BaseModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0


# --- Responses ---


class FileResultOut(BaseModel):
    """Issues found in a single file or snippet."""

    file: str
    type: Optional[str] = Field(default=None, description="css or js")
    issues: List[IssueOut] = Field(default_factory=list)
    summary: SummaryOut = Field(default_factory=SummaryOut)
    failed: bool = False
    error: Optional[str] = None


class ScanResponse(BaseModel):
    """Aggregate result of a directory scan."""

    results: List[FileResultOut] = Field(default_factory=list)
    score: Optional[int] = Field(default=None, description="0-100 compatibility score")
    total_files: int = Field(default=0, alias="totalFiles")
    css_files: int = Field(default=0, alias="cssFiles")
    js_files: int = Field(default=0, alias="jsFiles")
    failed_files: int = Field(default=0, alias="failedFiles")

    model_config = {"populate_by_name": True}


class FeatureOut(BaseModel):
    """A web feature and its Baseline status."""

    id: str
    name: str
    description: str = ""
    group: Union[str, List[str], None] = None
    baseline: Union[str, bool, None] = None
    baseline_low_date: Optional[str] = None
    baseline_high_date: Optional[str] = None
    support: Dict[str, str] = Field(default_factory=dict)


class FeatureListResponse(BaseModel):
    count: int
    features: List[FeatureOut] = Field(default_factory=list)


class CacheStatsOut(BaseModel):
    """Resolver cache diagnostics."""

    bcd_cache: Dict[str, Any] = Field(..., alias="bcdCache")
    feature_cache: Dict[str, Any] = Field(..., alias="featureCache")

    model_config = {"populate_by_name": True}


class ErrorDetail(BaseModel):
    """Error response detail."""

    detail: str = Field(..., description="Error message")
    code: Optional[str] = Field(default=None, description="Checker error code")
