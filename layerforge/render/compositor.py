"""Pillow compositor: the default render collaborator.

Each accepted edition is drawn onto a fresh RGBA canvas: optional background,
then every resolved layer in order with its opacity and blend mode (or one
text line per layer in text-only mode), then saved as ``images/<edition>.png``.
"""

import logging
import random
from typing import Callable

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont

from ..core.models import (
    BackgroundConfig,
    BlendMode,
    FormatConfig,
    ResolvedLayer,
    TextConfig,
)
from ..storage.build import BuildPaths

logger = logging.getLogger(__name__)

ChannelOp = Callable[[Image.Image, Image.Image], Image.Image]

_CHANNEL_OPS: dict[str, ChannelOp] = {
    "multiply": ImageChops.multiply,
    "screen": ImageChops.screen,
    "overlay": ImageChops.overlay,
    "darken": ImageChops.darker,
    "lighten": ImageChops.lighter,
    "difference": ImageChops.difference,
    "add": lambda base, top: ImageChops.add(base, top),
}


def random_pastel(brightness: str, rng: random.Random) -> str:
    """Random hue at full saturation and the configured lightness."""
    hue = rng.randrange(360)
    return f"hsl({hue}, 100%, {brightness})"


def apply_opacity(image: Image.Image, opacity: float) -> Image.Image:
    """Scale an RGBA image's alpha channel."""
    if opacity >= 1:
        return image
    alpha = image.getchannel("A").point(lambda v: int(v * opacity))
    faded = image.copy()
    faded.putalpha(alpha)
    return faded


def blend_onto(base: Image.Image, top: Image.Image, mode: BlendMode) -> Image.Image:
    """Composite ``top`` over ``base`` using a canvas-style blend mode."""
    if mode == "source-over":
        return Image.alpha_composite(base, top)
    op = _CHANNEL_OPS[mode]
    mixed = op(base.convert("RGB"), top.convert("RGB")).convert("RGBA")
    # The blended color only shows where the top layer has coverage
    mixed.putalpha(top.getchannel("A"))
    return Image.alpha_composite(base, mixed)


class PillowRenderer:
    """Draws editions with Pillow and saves them under the build directory."""

    def __init__(
        self,
        paths: BuildPaths,
        fmt: FormatConfig | None = None,
        background: BackgroundConfig | None = None,
        text: TextConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.paths = paths
        self.fmt = fmt or FormatConfig()
        self.background = background or BackgroundConfig()
        self.text = text or TextConfig()
        self.rng = rng or random.Random()
        self._font: ImageFont.ImageFont | ImageFont.FreeTypeFont | None = None

    @property
    def size(self) -> tuple[int, int]:
        return (self.fmt.width, self.fmt.height)

    def render(self, edition: int, layers: list[ResolvedLayer]) -> None:
        canvas = self.compose(layers)
        path = self.paths.edition_image(edition)
        path.parent.mkdir(parents=True, exist_ok=True)
        canvas.save(path, format="PNG")
        logger.debug("Saved image for edition %d to %s", edition, path)

    def compose(self, layers: list[ResolvedLayer]) -> Image.Image:
        """Build the composite image of one selection."""
        canvas = Image.new("RGBA", self.size, (0, 0, 0, 0))
        if self.background.generate:
            canvas = self._draw_background(canvas)

        for index, layer in enumerate(layers):
            if self.text.only:
                self._draw_text(canvas, layer, index)
            else:
                canvas = self._draw_layer(canvas, layer)
        return canvas

    def _draw_background(self, canvas: Image.Image) -> Image.Image:
        color = (
            self.background.default
            if self.background.static
            else random_pastel(self.background.brightness, self.rng)
        )
        fill = Image.new("RGBA", self.size, ImageColor.getcolor(color, "RGBA"))
        return Image.alpha_composite(canvas, fill)

    def _draw_layer(self, canvas: Image.Image, layer: ResolvedLayer) -> Image.Image:
        with Image.open(layer.selected_element.path) as source:
            image = source.convert("RGBA")
        if image.size != self.size:
            resample = (
                Image.Resampling.LANCZOS
                if self.fmt.smoothing
                else Image.Resampling.NEAREST
            )
            image = image.resize(self.size, resample)
        image = apply_opacity(image, layer.opacity)
        return blend_onto(canvas, image, layer.blend)

    def _draw_text(self, canvas: Image.Image, layer: ResolvedLayer, index: int) -> None:
        draw = ImageDraw.Draw(canvas)
        draw.text(
            (self.text.x_gap, self.text.y_gap * (index + 1)),
            f"{layer.name}{self.text.spacer}{layer.selected_element.name}",
            fill=ImageColor.getcolor(self.text.color, "RGBA"),
            font=self._get_font(),
        )

    def _get_font(self):
        if self._font is None:
            if self.text.font:
                self._font = ImageFont.truetype(self.text.font, self.text.size)
            else:
                self._font = ImageFont.load_default(size=self.text.size)
        return self._font
