"""
Response metadata models.

Standard metadata attached to analysis responses for tracing, debugging
and reproducibility.
"""

import time
from typing import Optional

from pydantic import Field

from src.__version__ import __version__
from src.models.shared import CamelModel


class ResponseMetadata(CamelModel):
    """
    Metadata included in every analysis response.

    Attributes:
        request_id: Unique identifier for request tracing
        computation_time_ms: Time taken for computation in milliseconds
        engine_version: Engine version (semver)
        algorithm: Method used for the computation
        input_fingerprint: Hash of the canonical request body
    """

    request_id: str = Field(
        ...,
        description="Unique request identifier for tracing",
        min_length=1,
        max_length=100
    )

    computation_time_ms: float = Field(
        ...,
        description="Computation time in milliseconds",
        ge=0.0
    )

    engine_version: str = Field(
        default=__version__,
        description="Engine version"
    )

    algorithm: Optional[str] = Field(
        None,
        description="Algorithm/method used (e.g., 'consequence_cascade')",
        max_length=100
    )

    input_fingerprint: Optional[str] = Field(
        None,
        description="Canonical hash of the input; identical inputs share it"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "requestId": "req_a1b2c3d4e5f6",
                "computationTimeMs": 4.21,
                "engineVersion": "0.1.0",
                "algorithm": "consequence_cascade",
                "inputFingerprint": "9f2c4e1ab03d77c5",
            }
        }
    }


class MetadataBuilder:
    """Helper class for building metadata objects."""

    def __init__(self, request_id: str):
        """
        Initialize metadata builder.

        Args:
            request_id: Request identifier
        """
        self.request_id = request_id
        self.start_time = time.perf_counter()

    def build(
        self,
        algorithm: Optional[str] = None,
        input_fingerprint: Optional[str] = None
    ) -> ResponseMetadata:
        """
        Build metadata object with computed timing.

        Args:
            algorithm: Algorithm used for computation
            input_fingerprint: Canonical hash of the input

        Returns:
            ResponseMetadata object
        """
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        return ResponseMetadata(
            request_id=self.request_id,
            computation_time_ms=elapsed_ms,
            algorithm=algorithm,
            input_fingerprint=input_fingerprint,
        )
