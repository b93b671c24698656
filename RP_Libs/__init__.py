"""
RP_Libs - Raster Paint Library Modules

This package contains the raster-image editing engine, organized into
specialized sub-packages:

- RasterLib: Raster buffer models, compositing, pixel and affine transforms
- DitherLib: Quantizers, error-diffusion ditherers and palette reduction
- FillLib: Seed fill and transparent-region fill
- WarpLib: Quadrilaterals and homography/rubber-sheet warps
- CanvasLib: Change sets, scratch buffers and the undo/redo canvas history
"""

__version__ = "0.1.0"
