from __future__ import annotations


class AdGenError(Exception):
    """Base class for every error raised by the studio core."""


class MissingInputError(AdGenError):
    """A required asset or copy field is absent. User-correctable, never retried."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"missing required input: {', '.join(self.missing)}")


class AssetDecodeError(AdGenError):
    """An image reference was present but could not be decoded."""

    def __init__(self, asset: str, reason: str) -> None:
        self.asset = asset
        self.reason = reason
        super().__init__(f"could not decode {asset} image: {reason}")


class SuggestionServiceError(AdGenError):
    # Never surfaced to callers; the orchestrator swaps in a fallback list.
    pass
