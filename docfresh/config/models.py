from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ReportFormat = Literal["json", "markdown", "both"]


class OutputSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: ReportFormat = "both"
    json_file: str = ".docs-staleness-report.json"
    markdown_file: str = "docs-staleness-report.md"

    @property
    def writes_json(self) -> bool:
        return self.format in ("json", "both")

    @property
    def writes_markdown(self) -> bool:
        return self.format in ("markdown", "both")


class VCSSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    use_author_date: bool = False
    include_uncommitted: bool = False
    concurrency: int = Field(default=10, gt=0)
    query_timeout: float = Field(default=10.0, gt=0)
    batch_timeout: float = Field(default=120.0, gt=0)


class AuditConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: int = Field(default=7, gt=0, strict=True)
    ignore: tuple[str, ...] = ()
    docs_root: str = "./src"
    output: OutputSettings = Field(default_factory=OutputSettings)
    vcs: VCSSettings = Field(default_factory=VCSSettings)
    log_level: Literal["debug", "info", "warning", "error"] = "info"
