"""Style catalog: directive text for the remote model and local filter params."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

DEFAULT_STYLE = "corporate"

EDGE_KERNEL = (
    -1, -1, -1,
    -1, 9, -1,
    -1, -1, -1,
)


@dataclass(frozen=True)
class SharpenParams:
    sigma: float
    flat: float = 1.0
    jagged: float = 2.0

    @property
    def percent(self) -> int:
        # Unsharp-mask strength grows with the flat and jagged weights.
        return int(round(50 * (self.flat + self.jagged)))


@dataclass(frozen=True)
class LocalParams:
    brightness: float = 1.0
    saturation: float = 1.0
    hue: int = 0
    greyscale: bool = False
    normalize: bool = False
    gamma: Optional[float] = None
    sharpen: Optional[SharpenParams] = None
    kernel: Optional[Tuple[int, ...]] = None
    quality: int = 95


@dataclass(frozen=True)
class StyleProfile:
    key: str
    directive: str
    local: LocalParams = field(default_factory=LocalParams)


_CORPORATE = StyleProfile(
    key="corporate",
    directive=(
        "Transform this photo into a polished profile shot maintaining the exact facial features and identity. "
        "Subject framed chest-up with headroom, eyes looking directly at camera while body angles slightly away. "
        "White t-shirt with black leather jacket, open smile. Neutral studio background. "
        "High-angle perspective with soft, diffused lighting creating gentle catchlights. "
        "85mm lens aesthetic with shallow depth of field - sharp focus on eyes, soft bokeh background. "
        "Natural skin texture with visible hair detail. Bright, airy feel. "
        "Make subject look great and accurate to their original appearance."
    ),
    local=LocalParams(
        brightness=1.08,
        saturation=0.98,
        hue=0,
        normalize=True,
        sharpen=SharpenParams(sigma=1.6, flat=1, jagged=2),
        quality=95,
    ),
)

_CREATIVE = StyleProfile(
    key="creative",
    directive=(
        "Transform this photo into a close-up portrait with shallow depth of field creating soft bokeh background. "
        "Warm, natural lighting highlighting subject's features. Casual attire and genuine, engaging smile. "
        "Subject fills more of the frame. Background hints at creative workspace or outdoor setting with beautiful blur. "
        "Preserve natural skin texture and authentic features. Modern, approachable creative professional aesthetic. "
        "Make subject look great and accurate to their original appearance."
    ),
    local=LocalParams(
        brightness=1.15,
        saturation=1.2,
        hue=8,
        sharpen=SharpenParams(sigma=1.3, flat=1, jagged=1),
        quality=92,
    ),
)

_EXECUTIVE = StyleProfile(
    key="executive",
    directive=(
        "Transform this photo into a dramatic black and white portrait in editorial style. "
        "Preserve subject's authentic features and character. Apply these specifications: "
        "monochromatic treatment with rich grayscale tones, deep charcoal or black background with subtle gradation, "
        "dramatic side lighting creating strong shadows and highlights on face (Rembrandt or split lighting), "
        "preserve all natural skin texture and detail - no smoothing, "
        "sharp focus capturing fine details in eyes and facial features, "
        "relaxed and contemplative expression - not smiling, casual professional attire (dark textured jacket, no tie), "
        "hand gesture near chest or face for dynamic composition, high contrast with deep blacks and bright highlights, "
        "cinematic film grain for texture. Maintain editorial photography aesthetic - artistic but professional. "
        "Make subject look great and accurate to their original appearance."
    ),
    local=LocalParams(
        greyscale=True,
        brightness=1.2,
        saturation=0.0,
        normalize=True,
        gamma=1.3,
        sharpen=SharpenParams(sigma=1.8, flat=1, jagged=2),
        kernel=EDGE_KERNEL,
        quality=95,
    ),
)

STYLES: Mapping[str, StyleProfile] = MappingProxyType(
    {p.key: p for p in (_CORPORATE, _CREATIVE, _EXECUTIVE)}
)
STYLE_KEYS = tuple(STYLES)


def normalize_style(style: Optional[str]) -> str:
    key = (style or "").strip().lower()
    return key if key in STYLES else DEFAULT_STYLE


def is_known_style(style: Optional[str]) -> bool:
    return (style or "").strip().lower() in STYLES


def lookup(style: Optional[str]) -> StyleProfile:
    """Return the profile for ``style``; anything unrecognized gets corporate."""
    return STYLES[normalize_style(style)]
