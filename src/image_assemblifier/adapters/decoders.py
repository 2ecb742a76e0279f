"""Image decoders backed by Pillow."""

from __future__ import annotations

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from image_assemblifier.errors import ImageLoadError
from image_assemblifier.imaging.models import SourceImage


class PillowImageDecoder:
    """Decode any raster format Pillow understands."""

    def decode(self, data: bytes) -> SourceImage:
        """Decode ``data`` fully into memory.

        Parameters
        ----------
        data : bytes
            Raw file contents.

        Returns
        -------
        SourceImage
            Decoded raster with its natural size.

        Raises
        ------
        ImageLoadError
            If the bytes are empty, not an image, or truncated.
        """
        if not data:
            raise ImageLoadError("The image could not be loaded: file is empty")
        try:
            with Image.open(BytesIO(data)) as handle:
                handle.load()
                image = handle.copy()
        except (
            UnidentifiedImageError,
            OSError,
            ValueError,
            Image.DecompressionBombError,
        ) as exc:
            raise ImageLoadError(f"The image could not be loaded: {exc}") from exc
        return SourceImage.from_pil(image)
