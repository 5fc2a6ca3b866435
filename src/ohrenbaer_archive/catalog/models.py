"""Data models for catalog entries."""

from pydantic import BaseModel, ConfigDict, Field

IdentityKey = tuple[str, str]


class EpisodeRecord(BaseModel):
    """A single episode as listed on the podcast page.

    Field aliases match the keys of the catalog JSON file.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    title: str = Field(..., min_length=1, description="Category label and episode title")
    release_date: str = Field(
        ..., alias="releaseDate", min_length=1, description="ISO-8601 release timestamp"
    )
    download_link: str = Field(
        ..., alias="downloadLink", min_length=1, description="Absolute URL of the media file"
    )
    description: str = ""

    @property
    def identity_key(self) -> IdentityKey:
        """Key used for deduplication."""
        return identity_key(self)

    def to_json_dict(self) -> dict[str, str]:
        """Serialize using the catalog file's key names."""
        return self.model_dump(by_alias=True)


def identity_key(record: EpisodeRecord) -> IdentityKey:
    """Return the (title, release date) pair identifying an episode.

    Comparison is exact and case-sensitive. A tuple is used instead of a
    joined string so separators inside titles cannot produce collisions.
    """
    return (record.title, record.release_date)
