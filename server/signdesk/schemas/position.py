from typing import Optional

from pydantic import ConfigDict, Field, ValidationError

from signdesk.schemas.common import CamelModel


class SignaturePosition(CamelModel):
    """A click on a rendered page, as ratios of the page's width and height.

    ``y_ratio`` is measured from the top edge, the way the browser reports it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    page: int = Field(default=0, ge=0)
    x_ratio: float = Field(alias="xRatio", ge=0.0, le=1.0)
    y_ratio: float = Field(alias="yRatio", ge=0.0, le=1.0)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def parse_descriptor(cls, raw: Optional[str]) -> Optional["SignaturePosition"]:
        """Decode a stored descriptor; ``None`` for absent, sentinel or malformed input."""
        if raw is None or not raw.strip():
            return None
        try:
            return cls.model_validate_json(raw)
        except ValidationError:
            return None
