"""Structured output schema for one extracted campaign."""

from pydantic import BaseModel, ConfigDict, Field


class ExtractedCampaign(BaseModel):
    """One candidate campaign as returned by the extraction model.

    Fields other than the four required ones (e.g. a model-supplied
    ``url``) are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1)
    info: str
    category: str
    is_banner: bool = Field(alias="isBanner", strict=True)
