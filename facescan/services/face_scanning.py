"""Face scanning service for checking images against enrolled people."""
import asyncio
from typing import AsyncIterator, List, Optional, Sequence

from facescan.core.config import MatchingConfig, settings
from facescan.core.exceptions import EmbeddingMismatchError, ScanPreconditionError
from facescan.core.logging import get_logger, scan_context
from facescan.domain.entities.face import FaceObservation
from facescan.domain.interfaces.detection.face_detector import FaceDetector
from facescan.domain.interfaces.storage.profile_store import ProfileStore
from facescan.domain.value_objects.recognition import FaceResult
from facescan.domain.value_objects.scanning import (
    ImageScanResult,
    ImageScanStatus,
    ScanImage,
    ScanReport,
)
from facescan.services.detection import detect_with_fallback
from facescan.services.matching.aggregator import aggregate_faces
from facescan.services.matching.matcher import FaceMatcher
from facescan.services.matching.plausibility import filter_observations
from facescan.services.matching.selection import active_identities

logger = get_logger(__name__)


class FaceScanningService:
    """Service for scanning batches of images against the selected people.

    This service:
    1. Takes one snapshot of profiles and selection for the whole batch
    2. Runs the external detector per image (with a fallback pass)
    3. Filters implausible boxes, matches each face and aggregates per image
    4. Reports results in input order, whatever order images finish in

    Example:
        ```python
        scanner = FaceScanningService(detector, profile_store)
        report = await scanner.scan_batch(images, config=MatchingConfig(threshold=0.55))
        print(report.summary())
        ```
    """

    def __init__(
        self,
        detector: FaceDetector,
        profile_store: ProfileStore,
        config: Optional[MatchingConfig] = None,
        scan_min_side: int = settings.SCAN_MIN_SIDE,
        score_threshold: float = settings.DETECTOR_SCORE_THRESHOLD,
        fallback_score_threshold: Optional[float] = settings.DETECTOR_FALLBACK_SCORE_THRESHOLD,
        max_concurrency: int = settings.MAX_CONCURRENT_SCANS,
    ) -> None:
        """Initialize the face scanning service.

        Args:
            detector: External face detector and embedder
            profile_store: Source of enrolled people and the selection
            config: Default matching configuration, from settings if omitted
            scan_min_side: Short side images are upscaled to before detection
            score_threshold: Detector score threshold for the first pass
            fallback_score_threshold: Threshold for the retry pass, None disables it
            max_concurrency: Images processed at the same time
        """
        self.detector = detector
        self.profile_store = profile_store
        self.config = config or MatchingConfig.from_settings(settings)
        self.scan_min_side = scan_min_side
        self.score_threshold = score_threshold
        self.fallback_score_threshold = fallback_score_threshold
        self.max_concurrency = max(1, max_concurrency)

    async def prepare_matcher(self, config: Optional[MatchingConfig] = None) -> FaceMatcher:
        """Snapshot the store and build the matcher for one batch.

        Raises:
            NoActiveIdentitiesError: If no person is selected
            EmptyIdentityPoolError: If the selected people have no samples
        """
        snapshot = await self.profile_store.snapshot()
        pool = active_identities(snapshot.profiles, snapshot.selection)
        try:
            return FaceMatcher(pool, config or self.config)
        except ScanPreconditionError as e:
            logger.warning(
                "Scan refused",
                reason=str(e),
                profiles_count=len(snapshot.profiles),
                active_count=len(pool)
            )
            raise

    def evaluate(
        self,
        image: ScanImage,
        observations: Sequence[FaceObservation],
        matcher: FaceMatcher,
    ) -> ImageScanResult:
        """Filter, match and aggregate one image's observations.

        Raises:
            EmbeddingMismatchError: If a descriptor length differs from the enrolled samples
        """
        accepted = filter_observations(observations, image.dimensions, matcher.config)
        faces: List[FaceResult] = [matcher.match_face(observation) for observation in accepted]
        return ImageScanResult(
            image_id=image.image_id,
            dimensions=image.dimensions,
            verdict=aggregate_faces(faces),
            faces=faces,
            detected_count=len(observations),
        )

    async def scan_image(self, image: ScanImage, matcher: FaceMatcher) -> ImageScanResult:
        """Scan one image; failures are reported on the result, not raised."""
        status = ImageScanStatus.OK
        error = None
        try:
            observations = await detect_with_fallback(
                self.detector,
                image,
                score_threshold=self.score_threshold,
                fallback_score_threshold=self.fallback_score_threshold,
                min_side=self.scan_min_side,
            )
        except Exception as e:
            logger.warning(
                "Detector failed, treating image as having no faces",
                image_id=image.image_id,
                error=str(e)
            )
            observations = []
            status = ImageScanStatus.DETECTOR_FAILED
            error = str(e)

        try:
            result = self.evaluate(image, observations, matcher)
        except EmbeddingMismatchError as e:
            logger.error(
                "Embedding mismatch, image aborted",
                image_id=image.image_id,
                error=str(e),
                **e.details
            )
            return ImageScanResult(
                image_id=image.image_id,
                dimensions=image.dimensions,
                status=ImageScanStatus.FAILED,
                detected_count=len(observations),
                error=str(e),
            )

        logger.debug(
            "Scanned image",
            image_id=image.image_id,
            tier=result.verdict.tier.value,
            face_count=result.verdict.face_count,
            detected_count=result.detected_count
        )
        return result.model_copy(update={"status": status, "error": error})

    async def iter_scan(
        self,
        images: Sequence[ScanImage],
        config: Optional[MatchingConfig] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[ImageScanResult]:
        """Yield one result per image, in input order.

        Images run concurrently up to ``max_concurrency``. Once ``cancel_event``
        is set no further image is started and iteration stops at the first
        image that never ran.

        Raises:
            ScanPreconditionError: Before any image is processed
        """
        matcher = await self.prepare_matcher(config)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(image: ScanImage) -> Optional[ImageScanResult]:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return None
                return await self.scan_image(image, matcher)

        tasks = [asyncio.create_task(run(image)) for image in images]
        try:
            for task in tasks:
                result = await task
                if result is None:
                    logger.info("Scan cancelled", completed=tasks.index(task), total=len(tasks))
                    return
                yield result
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def scan_batch(
        self,
        images: Sequence[ScanImage],
        config: Optional[MatchingConfig] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ScanReport:
        """Scan a batch and collect the results into a report.

        Raises:
            ScanPreconditionError: If there is nothing to compare against
        """
        config = config or self.config
        with scan_context():
            logger.info(
                "Starting scan",
                images_count=len(images),
                threshold=config.threshold,
                possible_band=config.possible_band
            )
            results = [result async for result in self.iter_scan(images, config, cancel_event)]
            report = ScanReport(
                results=results,
                threshold=config.threshold,
                possible_cutoff=config.possible_cutoff,
                cancelled=len(results) < len(images),
            )
            logger.info("Scan finished", summary=report.summary())
        return report
