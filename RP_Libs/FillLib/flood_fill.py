"""
Seed (flood) fill.

The core `flood_fill` routine is independent of any image: it walks
4-connected points from an origin, calling a fill function on each point it
visits and asking a boundary predicate whether each neighbour should be
visited too. The image-level helpers build those two callables from a paint
(a solid RGBA color or a tiling texture image) and PIL pixel access objects.

Functions:
    flood_fill: Stack-based seed fill over abstract callables
    make_fill_function: Fill function writing a paint into an image
    make_boundary_function: Predicate "transparent in both source and output"
    fill_region: Flood fill into a working (scratch) image in place
    flood_fill_image: Flood fill returning a new image of only the filled pixels
    fill_transparent: Fill every transparent pixel of an image
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from RP_Libs.constants import DEFAULT_FILL_COLOR, RGBA_MODE
from RP_Libs.pillow_compat import as_rgba, new_rgba, require_image
from RP_Libs.RasterLib.raster_models import Bounds, Paint, Point, RgbaColor

FillFunction = Callable[[Point], None]
BoundaryFunction = Callable[[Point], bool]


def flood_fill(
    origin: Tuple[int, int],
    bounds: Bounds,
    fill_fn: FillFunction,
    should_fill: BoundaryFunction,
    skip_visited: bool = True,
) -> int:
    """
    Flood fill from `origin` using an explicit stack.

    The origin is filled unconditionally. After each point is filled, its
    neighbours are considered in the order right, left, down, up; each one
    inside `bounds` for which `should_fill` returns True is pushed.

    With `skip_visited` (the default) a point is filled at most once, so the
    fill terminates even when `should_fill` does not change as pixels are
    filled. With `skip_visited=False` termination is entirely up to the
    predicate.

    Args:
        origin: Starting point, which must lie inside `bounds`
        bounds: Region the fill may not leave
        fill_fn: Called with each Point to fill
        should_fill: Called with a neighbouring Point; True if it should be filled
        skip_visited: Skip points that have already been filled

    Returns:
        Number of fill_fn calls made

    Raises:
        ValueError: If origin is outside bounds
    """
    start = Point(int(origin[0]), int(origin[1]))
    if not bounds.contains(start):
        raise ValueError(f"origin {tuple(start)} is outside fill bounds {bounds}")

    stack: List[Point] = [start]
    visited = set()
    filled = 0

    while stack:
        point = stack.pop()
        if skip_visited:
            if point in visited:
                continue
            visited.add(point)

        fill_fn(point)
        filled += 1

        x, y = point
        for neighbour in (Point(x + 1, y), Point(x - 1, y), Point(x, y + 1), Point(x, y - 1)):
            if skip_visited and neighbour in visited:
                continue
            if bounds.contains(neighbour) and should_fill(neighbour):
                stack.append(neighbour)

    return filled


def _normalize_color(color: Sequence[int]) -> RgbaColor:
    values = tuple(int(c) for c in color)
    if len(values) == 3:
        values = values + (255,)
    if len(values) != 4 or any(c < 0 or c > 255 for c in values):
        raise ValueError(f"Fill color must be 3 or 4 channels in 0-255, got {color}")
    return values


def make_fill_function(image: Any, paint: Paint = DEFAULT_FILL_COLOR) -> FillFunction:
    """
    Build a fill function that writes `paint` into `image` in place.

    A color paint sets the pixel to that color. A texture paint (a PIL Image)
    sets pixel (x, y) to the texture pixel at (x mod width, y mod height),
    tiling the texture from the image origin.

    Raises:
        TypeError: If image is not a PIL Image
        ValueError: If paint is neither a color nor an image, or the texture is empty
    """
    require_image(image)
    pixels = image.load()

    if hasattr(paint, "mode"):
        texture = as_rgba(paint)
        texture_width, texture_height = texture.size
        if texture_width <= 0 or texture_height <= 0:
            raise ValueError(f"Texture must not be empty, got size {texture.size}")
        texture_pixels = texture.load()

        def fill_with_texture(point: Point) -> None:
            pixels[point.x, point.y] = texture_pixels[point.x % texture_width, point.y % texture_height]

        return fill_with_texture

    if isinstance(paint, (tuple, list)):
        color = _normalize_color(paint)

        def fill_with_color(point: Point) -> None:
            pixels[point.x, point.y] = color

        return fill_with_color

    raise ValueError(f"Don't know how to fill with paint {paint!r}")


def make_boundary_function(source: Any, output: Any) -> BoundaryFunction:
    """
    Build the default boundary predicate: a pixel may be filled when it is
    fully transparent in both `source` and `output`.
    """
    require_image(source, "source")
    require_image(output, "output")
    if output.mode != RGBA_MODE:
        raise ValueError(f"output must be an {RGBA_MODE} image, got mode {output.mode}")
    source_alpha = as_rgba(source).getchannel("A").load()
    output_pixels = output.load()

    def is_fillable(point: Point) -> bool:
        return source_alpha[point.x, point.y] == 0 and output_pixels[point.x, point.y][3] == 0

    return is_fillable


def fill_region(
    canvas: Any,
    scratch: Any,
    origin: Tuple[int, int],
    paint: Paint = DEFAULT_FILL_COLOR,
    boundary: Optional[BoundaryFunction] = None,
) -> int:
    """
    Flood fill into a working image in place.

    Fillable pixels are those transparent in both `canvas` and `scratch`
    (unless a `boundary` predicate is given); filled pixels are written to
    `scratch`. `canvas` is only read.

    Args:
        canvas: PIL Image the fill is bounded by; read as RGBA, never modified
        scratch: RGBA PIL Image of the same size, modified in place
        origin: Starting point
        paint: RGBA color or texture image
        boundary: Optional replacement for the default predicate

    Returns:
        Number of pixels filled

    Raises:
        ValueError: If scratch is not RGBA, sizes differ or origin is outside the image
    """
    require_image(canvas, "canvas")
    require_image(scratch, "scratch")
    if scratch.mode != RGBA_MODE:
        raise ValueError(f"scratch must be an {RGBA_MODE} image, got mode {scratch.mode}")
    if canvas.size != scratch.size:
        raise ValueError(f"canvas size {canvas.size} does not match scratch size {scratch.size}")

    canvas = as_rgba(canvas)

    if boundary is None:
        boundary = make_boundary_function(canvas, scratch)

    return flood_fill(
        origin,
        Bounds.of_size(canvas.size),
        make_fill_function(scratch, paint),
        boundary,
    )


def flood_fill_image(
    source: Any,
    origin: Tuple[int, int],
    paint: Paint = DEFAULT_FILL_COLOR,
    boundary: Optional[BoundaryFunction] = None,
) -> Any:
    """
    Flood fill the transparent region of `source` containing `origin`.

    Args:
        source: PIL Image bounding the fill; not modified
        origin: Starting point
        paint: RGBA color or texture image
        boundary: Optional replacement for the default predicate

    Returns:
        New RGBA PIL Image the size of `source` containing only the filled
        pixels; every other pixel is transparent
    """
    require_image(source, "source")
    rgba = as_rgba(source)
    output = new_rgba(rgba.size)
    fill_region(rgba, output, origin, paint, boundary)
    return output


def fill_transparent(image: Any, paint: Paint = DEFAULT_FILL_COLOR, mask: Optional[Any] = None) -> Any:
    """
    Fill every fully transparent pixel of an image.

    Args:
        image: PIL Image; not modified
        paint: RGBA color or texture image
        mask: Optional "L"/"1" PIL Image of the same size; only pixels where
              the mask is nonzero are considered

    Returns:
        New RGBA PIL Image
    """
    transformed = as_rgba(image)

    mask_pixels = None
    if mask is not None:
        require_image(mask, "mask")
        if mask.size != transformed.size:
            raise ValueError(f"mask size {mask.size} does not match image size {transformed.size}")
        mask_pixels = mask.convert("L").load()

    alpha = transformed.getchannel("A").load()
    fill = make_fill_function(transformed, paint)

    for y in range(transformed.height):
        for x in range(transformed.width):
            if (mask_pixels is None or mask_pixels[x, y]) and alpha[x, y] == 0:
                fill(Point(x, y))

    return transformed
