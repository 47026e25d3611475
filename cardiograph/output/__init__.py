"""
Output.

Data-URI encoding for the preview and saving/downloading infographics.
"""

from cardiograph.output.export import (
    decode_data_uri,
    download_filename,
    save_image,
    to_data_uri,
)

__all__ = [
    "to_data_uri",
    "decode_data_uri",
    "download_filename",
    "save_image",
]
