from __future__ import annotations


class SlotwatchError(Exception):
    """Base class for errors raised by the discovery pipeline."""


class GeocodeNotFound(SlotwatchError):
    def __init__(self, postal_code: str) -> None:
        super().__init__(f"No geocode result for postal code {postal_code!r}")
        self.postal_code = postal_code


class ServiceLookupError(SlotwatchError):
    def __init__(self, establishment: str) -> None:
        super().__init__(f"Could not get serviceId for establishmentId={establishment}")
        self.establishment = establishment
