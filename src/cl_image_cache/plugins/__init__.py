"""Built-in transform kinds, registered under the `cl_image_cache.transforms` entry-point group."""
