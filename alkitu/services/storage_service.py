"""
Alkitu Site - Storage Service
Local filesystem object store for uploaded profile photos
"""
import logging
import os
import re
import time
from typing import Optional

from flask import current_app

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """Keep letters, digits, dots and hyphens; everything else becomes '_'"""
    return re.sub(r'[^a-zA-Z0-9.-]', '_', filename or 'file')


class StorageService:
    """Buckets are sub-directories of UPLOAD_DIR, served under /uploads/<bucket>/"""

    @property
    def root(self) -> str:
        upload_dir = current_app.config.get('UPLOAD_DIR', 'uploads')
        if not os.path.isabs(upload_dir):
            upload_dir = os.path.join(current_app.root_path, '..', upload_dir)
        return os.path.abspath(upload_dir)

    def bucket_dir(self, bucket: str) -> str:
        path = os.path.join(self.root, bucket)
        os.makedirs(path, exist_ok=True)
        return path

    def public_url(self, bucket: str, path: str) -> str:
        site_url = current_app.config.get('SITE_URL', '').rstrip('/')
        return f"{site_url}/uploads/{bucket}/{path}"

    def upload(self, bucket: str, owner_id: str, filename: str, data: bytes) -> dict:
        """
        Store bytes as <owner_id>_<timestamp ms>_<sanitized filename>.

        Returns:
            dict with url and pathname
        """
        pathname = f"{owner_id}_{int(time.time() * 1000)}_{sanitize_filename(filename)}"
        full_path = os.path.join(self.bucket_dir(bucket), pathname)
        with open(full_path, 'xb') as fh:
            fh.write(data)
        logger.info(f"Stored upload {bucket}/{pathname} ({len(data)} bytes)")
        return {'url': self.public_url(bucket, pathname), 'pathname': pathname}

    def path_from_url(self, bucket: str, url: str) -> Optional[str]:
        """Object path after '/<bucket>/' in a public URL, or None"""
        parts = url.split(f'/{bucket}/', 1)
        if len(parts) < 2 or not parts[1]:
            return None
        name = os.path.basename(parts[1].split('?', 1)[0])
        return name or None

    def delete(self, bucket: str, path: str) -> bool:
        full_path = os.path.join(self.bucket_dir(bucket), os.path.basename(path))
        try:
            os.remove(full_path)
        except FileNotFoundError:
            logger.warning(f"Upload already removed: {bucket}/{path}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete upload {bucket}/{path}: {e}")
            return False
        logger.info(f"Deleted upload {bucket}/{path}")
        return True


storage_service = StorageService()
