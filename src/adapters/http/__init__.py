"""HTTP adapters - Postcode lookups and registration submission."""

from .postcode import ZipAddressDirectory
from .transport import HttpSubmissionTransport

__all__ = ["HttpSubmissionTransport", "ZipAddressDirectory"]
