"""Image pipeline for detecting, validating and uploading embedded images.

Exports
-------
detect_image_source
    Classify an image ``src`` as URL, local file, data URI, or unknown.
mime_for_filename
    Map a file name to the MIME type sent with an upload.
validate_image
    Validate MIME type and file size.
upload_image / async_upload_image
    Validate and upload an image, returning its Ghost URL.
"""

from .detect import detect_image_source, mime_for_filename
from .upload import async_upload_image, upload_image
from .validate import sniff_mime, validate_image

__all__ = [
    "async_upload_image",
    "detect_image_source",
    "mime_for_filename",
    "sniff_mime",
    "upload_image",
    "validate_image",
]
