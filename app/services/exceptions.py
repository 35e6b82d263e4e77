"""Service-layer exceptions for storage failures."""


class PersistenceError(Exception):
    """A database write could not be completed; the request may be retried."""


class FinalTagPersistenceError(PersistenceError):
    """Replacing the final tags of an image failed and was rolled back."""

    def __init__(self, image_id: int, message: str = "Failed to save final tags"):
        self.image_id = image_id
        super().__init__(f"{message} for image {image_id}")
