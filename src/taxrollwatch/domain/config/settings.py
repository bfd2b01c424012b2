"""
Tracker settings domain model.

Controls how identity and status are read from roll exports, how
duplicates are treated, the foreclosure policy and where snapshots and
reports are kept. Field-name lists are configuration because the county
changes its export schema without notice.
"""

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from taxrollwatch.domain.change_types import StatusCode
from taxrollwatch.domain.identity import DEFAULT_IDENTIFIER_FIELDS, IdentityResolver
from taxrollwatch.domain.report import FORECLOSURE_REASON
from taxrollwatch.domain.status_normalizer import DEFAULT_STATUS_FIELDS, StatusNormalizer

logger = logging.getLogger(__name__)


class TrackerSettings(BaseModel):
    """
    Comprehensive comparison settings for the application.

    Defaults reproduce the historical behaviour except that the exhaustive
    status scan is off unless explicitly enabled.
    """

    identifier_fields: list[list[str]] = Field(
        default_factory=lambda: [list(group) for group in DEFAULT_IDENTIFIER_FIELDS],
        description="Ordered groups of identifier column names (account, parcel, address, owner)",
    )

    first_column_fallback: bool = Field(
        default=True,
        description="Use the first column's value when no identifier column is filled",
    )

    status_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STATUS_FIELDS),
        description="Ordered status column names checked for J/A/P",
    )

    exhaustive_status_scan: bool = Field(
        default=False,
        description="Scan every column for a J/A/P value when no status column matches",
    )

    duplicate_identifiers: Literal["last_wins", "error"] = Field(
        default="last_wins",
        description="How repeated identifiers within one snapshot are handled",
    )

    detect_foreclosures: bool = Field(
        default=True,
        description="List removed properties with a foreclosure status as foreclosed",
    )

    foreclosure_statuses: list[StatusCode] = Field(
        default_factory=lambda: [StatusCode.JUDGMENT],
        description="Previous statuses that mark a removed property as foreclosed",
    )

    foreclosure_reason: str = Field(
        default=FORECLOSURE_REASON,
        description="Reason text attached to foreclosed entries",
    )

    database_path: str = Field(
        default="output/taxrollwatch.db",
        description="SQLite file holding snapshots and comparison reports",
    )

    report_directory: str = Field(
        default="output/reports",
        description="Directory for exported comparison reports",
    )

    sheet_name: str | None = Field(
        default=None,
        description="Worksheet to read from xlsx exports (first sheet when unset)",
    )

    @field_validator("identifier_fields")
    @classmethod
    def validate_identifier_groups(cls, v: list[list[str]]) -> list[list[str]]:
        """Drop blank names and empty groups."""
        groups = [[name for name in group if name.strip()] for group in v]
        groups = [group for group in groups if group]
        if not groups:
            logger.warning("No identifier fields configured - identity falls back to first column")
        return groups

    @field_validator("status_fields")
    @classmethod
    def validate_status_fields(cls, v: list[str]) -> list[str]:
        """Drop blank names."""
        return [name for name in v if name.strip()]

    @field_validator("foreclosure_statuses")
    @classmethod
    def validate_foreclosure_statuses(cls, v: list[StatusCode]) -> list[StatusCode]:
        """Only recognized statuses can mark a foreclosure."""
        if StatusCode.NONE in v:
            raise ValueError("foreclosure_statuses cannot include 'None'")
        return v

    @property
    def raise_on_duplicates(self) -> bool:
        """Check if duplicate identifiers are fatal."""
        return self.duplicate_identifiers == "error"

    def build_identity_resolver(self) -> IdentityResolver:
        """Identity strategy described by these settings."""
        return IdentityResolver.from_field_groups(
            self.identifier_fields,
            first_column_fallback=self.first_column_fallback,
        )

    def build_status_normalizer(self) -> StatusNormalizer:
        """Status policy described by these settings."""
        return StatusNormalizer.from_field_names(
            self.status_fields,
            exhaustive_scan=self.exhaustive_status_scan,
        )
