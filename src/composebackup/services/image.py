"""Helper image resolution and pulling for compose-backup."""

from typing import Optional

from composebackup.constants import DEFAULT_IMAGE
from composebackup.models import ImageReference


class ImageService:
    """Resolves the helper image reference and pulls it when missing."""

    def __init__(self, runtime, logger):
        self.runtime = runtime
        self.logger = logger

    @staticmethod
    def resolve_reference(image: Optional[str]) -> ImageReference:
        if image is None:
            return ImageReference(name=DEFAULT_IMAGE)

        name, separator, tag = image.partition(":")
        return ImageReference(name=name, tag=tag if separator else None)

    def needs_pull(self, reference: ImageReference) -> bool:
        # A search hit is treated as "available"; it does not prove the image is local.
        results = self.runtime.search_images(str(reference))
        self.logger.debug("Image search for %s returned %s result(s)", reference, len(results))
        return len(results) == 0

    def pull(self, reference: ImageReference):
        self.logger.info("Pulling %s", reference)
        self.runtime.pull_image(reference.name, reference.tag)
