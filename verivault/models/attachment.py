from dataclasses import dataclass, field

from verivault.utils.timeutil import now_iso


@dataclass
class Attachment:
    """File uploaded with a submission; the bytes live under the upload folder"""
    original_name: str
    filename: str
    size: int
    mimetype: str
    upload_path: str
    uploaded_at: str = field(default_factory=now_iso)

    def to_dict(self):
        return {
            'originalName': self.original_name,
            'filename': self.filename,
            'size': self.size,
            'mimetype': self.mimetype,
            'uploadPath': self.upload_path,
            'uploadedAt': self.uploaded_at,
        }
