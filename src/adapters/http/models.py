"""
Wire models for the HTTP adapters.

Pydantic models for the registration submission payload and the
third-party responses the adapters read.
"""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict


class RegistrationPayload(BaseModel):
    """Request body for the registration endpoint."""

    name: str
    furigana: str
    email: str
    password: str
    phone: str
    postcode: str
    prefecture: str
    city: str
    address: str
    remarks: str = ""

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, str]) -> "RegistrationPayload":
        return cls.model_validate(dict(snapshot))


class ServerErrorBody(BaseModel):
    """Error body returned by the registration endpoint on failure."""

    model_config = ConfigDict(extra="ignore")

    message: str | None = None


class ZipAddressResponse(BaseModel):
    """Subset of the postal code API response used for existence checks."""

    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    success: bool | None = None

    @property
    def found(self) -> bool:
        if self.success is not None:
            return self.success
        return self.code == 200
