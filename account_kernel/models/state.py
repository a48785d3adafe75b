"""What the host driver stores after a read."""

from typing import Dict, Optional

from pydantic import BaseModel


class ProjectedState(BaseModel):
    """
    The remote service's view of one cloud account, in flat form.

    Exactly one slot is populated; the others are None so a previous
    cloud type never lingers after replacement.
    """

    id: str
    aws: Optional[dict] = None
    azure: Optional[dict] = None
    gcp: Optional[dict] = None
    alibaba_cloud: Optional[dict] = None

    def slots(self) -> Dict[str, Optional[dict]]:
        return {
            "aws": self.aws,
            "azure": self.azure,
            "gcp": self.gcp,
            "alibaba_cloud": self.alibaba_cloud,
        }
