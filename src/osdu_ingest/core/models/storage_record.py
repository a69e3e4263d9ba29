"""
StorageRecord model: the unit submitted to the OSDU storage service.
"""

from typing import Any

from pydantic import BaseModel, Field


class StorageAcl(BaseModel):
    """
    Access-control groups of a record.

    Attributes:
        owners: Groups allowed to read and write the record
        viewers: Groups allowed to read the record
    """

    owners: list[str] = Field(default_factory=list)
    viewers: list[str] = Field(default_factory=list)


class StorageLegal(BaseModel):
    """
    Compliance metadata of a record.

    Attributes:
        legaltags: Legal tags the record is governed by
        otherRelevantDataCountries: ISO country codes relevant to the data
    """

    legaltags: set[str] = Field(default_factory=set)
    otherRelevantDataCountries: set[str] = Field(default_factory=set)


class StorageRecord(BaseModel):
    """
    A record ready for submission to the storage service.

    Attributes:
        id: Record identifier; when unset the service generates one
        kind: Schema kind of the record (e.g. "osdu:wks:master-data--Well:1.0.0")
        acl: Access-control groups
        legal: Legal tags and relevant countries
        data: Normalized payload (plain JSON types only)
    """

    id: str | None = None
    kind: str = Field(..., min_length=1)
    acl: StorageAcl = Field(default_factory=StorageAcl)
    legal: StorageLegal = Field(default_factory=StorageLegal)
    data: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """
        Render the record as a JSON-ready dictionary.

        Sets are emitted as sorted lists and ``id`` is omitted when unset.
        """
        payload: dict[str, Any] = {
            "kind": self.kind,
            "acl": {
                "owners": list(self.acl.owners),
                "viewers": list(self.acl.viewers),
            },
            "legal": {
                "legaltags": sorted(self.legal.legaltags),
                "otherRelevantDataCountries": sorted(self.legal.otherRelevantDataCountries),
            },
            "data": self.data,
        }
        if self.id is not None:
            payload = {"id": self.id, **payload}
        return payload

    class Config:
        json_schema_extra = {
            "example": {
                "id": "opendes:master-data--Well:1001",
                "kind": "osdu:wks:master-data--Well:1.0.0",
                "acl": {
                    "owners": ["data.default.owners@opendes.example.com"],
                    "viewers": ["data.default.viewers@opendes.example.com"]
                },
                "legal": {
                    "legaltags": ["opendes-public-usa-dataset-1"],
                    "otherRelevantDataCountries": ["US"]
                },
                "data": {
                    "FacilityName": "Well 1001",
                    "SpatialLocation": {"Wgs84Coordinates": {"latitude": 29.7, "longitude": -95.3}}
                }
            }
        }
