"""Image pipeline - Pillow stages and the ImageMagick wrapper."""
