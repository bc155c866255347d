"""Request bodies accepted by the HTTP API."""

from pydantic import BaseModel, Field


class SearchFacilityRequest(BaseModel):
    query: str = Field(default="", description="Facility name, address, city, zip, or portal ID")


class GetDocumentsRequest(BaseModel):
    facility_id: str = Field(default="", description="Portal facility ID or detail page URL")


class ProcessAllRequest(BaseModel):
    query: str | None = Field(default=None, description="Search term; the first match is processed")
    facility_id: str | None = Field(default=None, description="Pre-resolved facility ID")


class SummarizeUrlRequest(BaseModel):
    url: str = Field(default="", description="Direct link to a PDF")
    document_id: str | None = None
    date: str | None = None
    type: str | None = None
