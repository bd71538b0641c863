"""Face detector interface."""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ...entities.face import FaceObservation
from ...value_objects.scanning import ScanImage


class FaceDetector(ABC):
    """Interface for the external face detection and embedding model."""

    @abstractmethod
    async def detect(
        self,
        image: ScanImage,
        score_threshold: Optional[float] = None,
        min_side: Optional[int] = None,
    ) -> Iterable[FaceObservation]:
        """
        Detect faces in the provided image and extract their descriptors.

        Args:
            image: Image to analyse; ``image.payload`` carries the detector input
            score_threshold: Detector score below which candidates are discarded
            min_side: Short side the detection surface should be upscaled to

        Returns:
            Observations in detector order, each carrying the upscale factor
            applied before detection. May be empty.

        Raises:
            DetectorError: If the model fails on this image
        """
        pass
