"""Test doubles and constants shared across test modules"""

from typing import List, Tuple

from tradehub.services.s3_service import FileUpload

TEST_PASSWORD = "TestPassword123!"

# PNG signature plus padding; storage only looks at the name and type
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FakeStorage:
    """In-memory stand-in for S3Service"""

    def __init__(self):
        self.stored: List[Tuple[str, FileUpload]] = []

    def store(self, upload: FileUpload, folder: str = "uploads") -> str:
        self.stored.append((folder, upload))
        return f"https://test-bucket.s3.amazonaws.com/{folder}/{len(self.stored)}-{upload.filename}"
