"""
Attachment upload handling
All files of a request are checked before any of them touches the disk.
"""
import logging
import os
import secrets
from typing import Iterable, List

from werkzeug.utils import secure_filename

from verivault.errors import UploadRejectedError
from verivault.models import Attachment
from verivault.utils.timeutil import now_millis

logger = logging.getLogger(__name__)

# Images, videos, documents
ALLOWED_MIME_TYPES = frozenset([
    'image/jpeg', 'image/png', 'image/gif', 'image/webp',
    'video/mp4', 'video/mov', 'video/avi', 'video/quicktime',
    'application/pdf', 'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'text/plain', 'text/csv', 'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
])


def collect_uploads(files) -> List:
    """Every non-empty file part of a request, whatever its field name"""
    uploads = []
    for field_name, storage in files.items(multi=True):
        if storage and storage.filename:
            uploads.append((field_name, storage))
    return uploads


def get_upload_size(storage) -> int:
    stream = storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def validate_uploads(uploads, max_file_size: int, max_files: int) -> None:
    """
    Reject the whole request if any file breaks a rule

    Raises:
        UploadRejectedError: too many files, a non-whitelisted MIME type
            or a file over max_file_size
    """
    if len(uploads) > max_files:
        raise UploadRejectedError(f'Too many files. Maximum {max_files} files per submission')

    for _, storage in uploads:
        if storage.mimetype not in ALLOWED_MIME_TYPES:
            raise UploadRejectedError(f'File type {storage.mimetype} not allowed')
        size = get_upload_size(storage)
        if size > max_file_size:
            raise UploadRejectedError(
                f'File {storage.filename} exceeds the {max_file_size // (1024 * 1024)}MB limit'
            )


def build_stored_filename(field_name: str, original_name: str) -> str:
    """<field>-<millis>-<random><ext>"""
    _, ext = os.path.splitext(secure_filename(original_name) or '')
    suffix = f"{now_millis()}-{secrets.randbelow(10 ** 9)}"
    return f"{secure_filename(field_name) or 'attachment'}-{suffix}{ext.lower()}"


def save_uploads(uploads, upload_dir: str) -> List[Attachment]:
    """
    Write validated uploads to upload_dir

    If one write fails the files already written are removed before the
    error propagates.
    """
    os.makedirs(upload_dir, exist_ok=True, mode=0o755)
    saved: List[Attachment] = []
    try:
        for field_name, storage in uploads:
            filename = build_stored_filename(field_name, storage.filename)
            path = os.path.abspath(os.path.join(upload_dir, filename))
            storage.stream.seek(0)
            storage.save(path)
            saved.append(Attachment(
                original_name=storage.filename,
                filename=filename,
                size=os.path.getsize(path),
                mimetype=storage.mimetype,
                upload_path=path,
            ))
            logger.info(f"Saved attachment: {path}")
    except Exception:
        remove_files(a.upload_path for a in saved)
        raise
    return saved


def remove_files(paths: Iterable[str]) -> int:
    """Best-effort delete; returns how many files were removed"""
    removed = 0
    for path in paths:
        if not path:
            continue
        try:
            if os.path.exists(path):
                os.remove(path)
                removed += 1
                logger.info(f"Deleted file: {path}")
        except OSError as e:
            logger.error(f"Error cleaning up file {path}: {e}")
    return removed
