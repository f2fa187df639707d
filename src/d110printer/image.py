"""
Image Processing for D110 Printer.

Normalizes an arbitrary raster into the label's print area and converts it to
a 1-bit matrix. The pipeline order is fixed: fit into the label bounds, pad to
the full print head width, then threshold.
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Iterator, Sequence, Union

from PIL import Image

from .errors import ImageError, ImageSizeError

# Image size limits to prevent memory exhaustion from malicious/malformed images
MAX_IMAGE_DIMENSION = 10000  # Maximum width or height in pixels
MAX_IMAGE_PIXELS = 10_000_000  # Maximum total pixels (10 megapixels)

# Rec. 601 luma weights in thousandths, threshold scaled to match
LUMA_R = 299
LUMA_G = 587
LUMA_B = 114
THRESHOLD = 128

ImageSource = Union[str, Path, bytes, Image.Image]


@dataclass(frozen=True)
class MonochromeImage:
    """A binary pixel matrix ready for printing.

    Attributes:
        width: Row length in pixels
        height: Number of rows
        pixels: One tuple per row; 1 burns a dot (black), 0 leaves it white
    """
    width: int
    height: int
    pixels: tuple

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Invalid image size {self.width}x{self.height}")
        if len(self.pixels) != self.height:
            raise ValueError(
                f"Expected {self.height} rows, got {len(self.pixels)}"
            )
        for y, row in enumerate(self.pixels):
            if len(row) != self.width:
                raise ValueError(
                    f"Row {y} has {len(row)} pixels, expected {self.width}"
                )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "MonochromeImage":
        """Build from nested sequences, coercing every cell to 0 or 1."""
        pixels = tuple(tuple(1 if v else 0 for v in row) for row in rows)
        width = len(pixels[0]) if pixels else 0
        return cls(width=width, height=len(pixels), pixels=pixels)

    def rows(self) -> Iterator[tuple]:
        """Iterate rows top to bottom."""
        return iter(self.pixels)

    def to_image(self) -> Image.Image:
        """Render as a 1-bit PIL image (for previews)."""
        img = Image.new("1", (self.width, self.height), color=255)  # White
        for y, row in enumerate(self.pixels):
            for x, value in enumerate(row):
                if value:
                    img.putpixel((x, y), 0)
        return img


def load_image(source: ImageSource) -> Image.Image:
    """
    Load an image from various sources.

    Args:
        source: File path, bytes, or PIL Image

    Returns:
        PIL Image object

    Raises:
        ImageSizeError: If image dimensions exceed safety limits
        ImageError: If the source cannot be read or its type is unsupported
    """
    try:
        if isinstance(source, Image.Image):
            img = source
        elif isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ImageError(f"Image file not found: {path}")
            img = Image.open(path)
        elif isinstance(source, bytes):
            img = Image.open(BytesIO(source))
        else:
            raise ImageError(f"Unsupported image type: {type(source)}")
    except ImageError:
        raise
    except Exception as e:
        raise ImageError(f"Failed to load image: {e}") from e

    # Validate image dimensions to prevent memory exhaustion
    if img.width > MAX_IMAGE_DIMENSION or img.height > MAX_IMAGE_DIMENSION:
        raise ImageSizeError(
            f"Image dimensions ({img.width}x{img.height}) exceed maximum "
            f"({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"
        )
    if img.width * img.height > MAX_IMAGE_PIXELS:
        raise ImageSizeError(
            f"Image pixel count ({img.width * img.height:,}) exceeds "
            f"maximum ({MAX_IMAGE_PIXELS:,})"
        )

    return img


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def fit_to_bounds(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """
    Shrink an image to fit inside max_width x max_height.

    Never enlarges. Width and height share one scale factor, and scaled
    sizes are floored. An image that already fits is returned as-is (the
    same object, not a copy).
    """
    scale = min(max_width / image.width, max_height / image.height, 1)
    if scale == 1:
        return image

    new_width = max(1, int(image.width * scale))
    new_height = max(1, int(image.height * scale))

    if image.mode not in ("RGB", "RGBA", "L"):
        image = image.convert("RGBA" if _has_alpha(image) else "RGB")
    return image.resize((new_width, new_height), Image.Resampling.LANCZOS)


def pad_to_width(image: Image.Image, target_width: int) -> Image.Image:
    """
    Center an image horizontally on a white canvas of target_width.

    A source wider than the canvas gets a negative offset and is cropped
    on both sides. Transparent pixels are composited over white.
    """
    canvas = Image.new("RGB", (target_width, image.height), color="white")
    offset = (target_width - image.width) // 2
    if _has_alpha(image):
        rgba = image.convert("RGBA")
        canvas.paste(rgba.convert("RGB"), (offset, 0), mask=rgba.getchannel("A"))
    else:
        canvas.paste(image.convert("RGB"), (offset, 0))
    return canvas


def to_monochrome(image: Image.Image) -> MonochromeImage:
    """
    Threshold an image into a MonochromeImage.

    A pixel is marked when 0.299R + 0.587G + 0.114B < 128. The comparison is
    done in integer thousandths so the boundary is exact. Alpha is ignored;
    normalize() composites onto an opaque canvas first.
    """
    rgb = image.convert("RGB")
    width, height = rgb.size
    data = rgb.tobytes()
    limit = THRESHOLD * 1000
    stride = width * 3

    pixels = []
    for y in range(height):
        base = y * stride
        row = []
        for i in range(base, base + stride, 3):
            lum = LUMA_R * data[i] + LUMA_G * data[i + 1] + LUMA_B * data[i + 2]
            row.append(1 if lum < limit else 0)
        pixels.append(tuple(row))

    return MonochromeImage(width=width, height=height, pixels=tuple(pixels))


def normalize(image: Image.Image, max_width: int, max_height: int) -> MonochromeImage:
    """Fit, pad to the full print width, then threshold."""
    fitted = fit_to_bounds(image, max_width, max_height)
    padded = pad_to_width(fitted, max_width)
    return to_monochrome(padded)
